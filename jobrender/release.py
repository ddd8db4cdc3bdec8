"""Release directories, jobs and their templates."""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml
from pydantic import ValidationError

from .core.errors import JobNotFoundError, JobSpecError, TemplateNotFoundError
from .core.models import InstanceContext, JobSpec, Link
from .rendering import engine
from .rendering.io import read_yaml

logger = logging.getLogger(__name__)


class ReleaseDir:
    """A release checkout containing a ``jobs/`` directory."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def job(self, name: str) -> Job:
        job_dir = self.path / "jobs" / name
        if not job_dir.is_dir():
            raise JobNotFoundError(f"Job '{name}' not found in release {self.path}")
        return Job(job_dir)

    def jobs(self) -> list[str]:
        jobs_dir = self.path / "jobs"
        if not jobs_dir.is_dir():
            return []
        return sorted(p.name for p in jobs_dir.iterdir() if (p / "spec").is_file())


def load_job_spec(spec_path: Path) -> JobSpec:
    """Parse and validate a job spec file.

    Args:
        spec_path: Path to the job's ``spec`` file

    Returns:
        Validated job spec
    """
    if not spec_path.is_file():
        raise JobSpecError(f"Job spec not found: {spec_path}")

    try:
        data = read_yaml(spec_path) or {}
    except yaml.YAMLError as e:
        raise JobSpecError(f"Invalid YAML in {spec_path}: {e}") from e

    if not isinstance(data, dict):
        raise JobSpecError(f"Job spec {spec_path} must be a mapping")

    # Properties without a body (``foo:``) are legal in job specs.
    properties = data.get("properties") or {}
    if isinstance(properties, dict):
        data["properties"] = {k: v or {} for k, v in properties.items()}

    try:
        return JobSpec.model_validate(data)
    except ValidationError as e:
        raise JobSpecError(f"Invalid job spec {spec_path}: {e}") from e


class Job:
    """A job inside a release directory."""

    def __init__(self, job_dir: Path) -> None:
        self.path = job_dir

    @cached_property
    def spec(self) -> JobSpec:
        spec = load_job_spec(self.path / "spec")
        logger.debug(f"Loaded job spec {spec.name} with {len(spec.templates)} template(s)")
        return spec

    @property
    def name(self) -> str:
        return self.spec.name

    def templates(self) -> list[str]:
        return list(self.spec.templates.values())

    def template(self, destination: str) -> JobTemplate:
        for source, dest in self.spec.templates.items():
            if dest == destination:
                return JobTemplate(self, source, dest)
        raise TemplateNotFoundError(
            f"Job '{self.name}' has no template rendering to '{destination}'"
        )


class JobTemplate:
    """One template of a job, addressed by its destination path."""

    def __init__(self, job: Job, source: str, destination: str) -> None:
        self.job = job
        self.source = source
        self.destination = destination

    def render(
        self,
        properties: Mapping[str, Any] | None = None,
        consumes: Iterable[Link] | None = None,
        instance: InstanceContext | None = None,
    ) -> str:
        """Render the template with the given properties and consumed links."""
        return engine.render(
            self.job.spec,
            self.job.path / "templates",
            self.source,
            properties,
            links=consumes,
            instance=instance,
        )
