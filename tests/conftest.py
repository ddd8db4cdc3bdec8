"""Shared fixtures for jobrender tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from jobrender import Link, LinkInstance, ReleaseDir
from jobrender.release import Job, JobTemplate

FIXTURE_RELEASE = Path(__file__).parent / "fixtures" / "release"
BINDING_CACHE_JOB = "loggr-syslog-binding-cache"


@pytest.fixture
def release() -> ReleaseDir:
    return ReleaseDir(FIXTURE_RELEASE)


@pytest.fixture
def job(release: ReleaseDir) -> Job:
    return release.job(BINDING_CACHE_JOB)


@pytest.fixture
def bpm_template(job: Job) -> JobTemplate:
    return job.template("config/bpm.yml")


@pytest.fixture
def links() -> list[Link]:
    return [Link(name="cloud_controller", instances=[LinkInstance(id="a-b-c-d")])]


@pytest.fixture
def properties() -> dict[str, Any]:
    return {
        "api": {"tls": {"cn": "CN"}},
        "tls": {"cn": "CN"},
        "aggregate_drain_certificates": "aggregate_drain_certificates",
        "external_port": 8888,
    }


@pytest.fixture
def write_job(tmp_path: Path):
    """Create a throwaway job inside ``tmp_path`` and return its ReleaseDir."""

    def _write(name: str, spec: str, templates: dict[str, str]) -> ReleaseDir:
        job_dir = tmp_path / "jobs" / name
        (job_dir / "templates").mkdir(parents=True)
        (job_dir / "spec").write_text(spec, encoding="utf-8")
        for source, body in templates.items():
            (job_dir / "templates" / source).write_text(body, encoding="utf-8")
        return ReleaseDir(tmp_path)

    return _write
