"""jobrender - BOSH-style job template renderer.

Renders a job's templates from a property tree and consumed links.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .core.errors import (
    JobRenderError,
    MissingPropertyError,
    UnknownLinkError,
    UnsatisfiedLinkError,
)
from .core.models import InstanceContext, Link, LinkInstance
from .release import Job, JobTemplate, ReleaseDir

__all__ = [
    "InstanceContext",
    "Job",
    "JobRenderError",
    "JobTemplate",
    "Link",
    "LinkInstance",
    "MissingPropertyError",
    "ReleaseDir",
    "UnknownLinkError",
    "UnsatisfiedLinkError",
]
