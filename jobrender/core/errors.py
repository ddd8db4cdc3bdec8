"""Errors raised while loading jobs and rendering their templates."""

from __future__ import annotations


class JobRenderError(ValueError):
    """Base class for every failure surfaced by jobrender."""


class JobNotFoundError(JobRenderError):
    """Raised when a release directory has no job with the requested name."""


class JobSpecError(JobRenderError):
    """Raised when a job spec file is missing or malformed."""


class TemplateNotFoundError(JobRenderError):
    """Raised when a job declares no template for the requested destination."""


class MissingPropertyError(JobRenderError):
    """Raised when a template reads a property that has no value."""

    def __init__(self, path: str, job: str | None = None) -> None:
        self.path = path
        self.job = job
        where = f" for job '{job}'" if job else ""
        super().__init__(f"Can't find property '{path}'{where}")


class UnsatisfiedLinkError(JobRenderError):
    """Raised when a consumed link is required but was not supplied."""

    def __init__(self, name: str, job: str | None = None) -> None:
        self.name = name
        self.job = job
        where = f" by job '{job}'" if job else ""
        super().__init__(f"Link '{name}' is consumed{where} but was not supplied")


class UnknownLinkError(JobRenderError):
    """Raised when a supplied link is not declared in the job's consumes."""

    def __init__(self, name: str, job: str | None = None) -> None:
        self.name = name
        self.job = job
        where = f" job '{job}'" if job else " this job"
        super().__init__(f"Link '{name}' is not declared as a consumed link in{where}")


class TemplateRenderError(JobRenderError):
    """Raised when Jinja2 fails to evaluate a template."""


class BpmDocumentError(JobRenderError):
    """Raised when a rendered bpm.yml does not have the expected shape."""
