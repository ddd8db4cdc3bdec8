"""Domain models for job specs, links and render configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PropertyDefinition(BaseModel):
    """A property declared in a job spec."""

    description: str | None = Field(default=None, description="Human readable summary")
    default: Any = Field(default=None, description="Value used when none is supplied")


class LinkDefinition(BaseModel):
    """A link declared under ``consumes`` or ``provides`` in a job spec."""

    name: str = Field(..., min_length=1, description="Link name used by templates")
    type: str = Field(..., min_length=1, description="Link type")
    optional: bool = Field(default=False, description="Whether rendering works without it")


class JobSpec(BaseModel):
    """Parsed contents of a job's ``spec`` file."""

    name: str = Field(..., min_length=1, description="Job name")
    templates: dict[str, str] = Field(
        default_factory=dict, description="Template source file -> destination path"
    )
    packages: list[str] = Field(default_factory=list, description="Packages the job uses")
    consumes: list[LinkDefinition] = Field(default_factory=list)
    provides: list[LinkDefinition] = Field(default_factory=list)
    properties: dict[str, PropertyDefinition] = Field(default_factory=dict)

    def consumed(self, name: str) -> LinkDefinition | None:
        for definition in self.consumes:
            if definition.name == name:
                return definition
        return None


class LinkInstance(BaseModel):
    """One deployed instance of the job providing a link."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Instance identifier")
    name: str = Field(default="i-name", description="Instance group name")
    index: int = Field(default=0, ge=0)
    az: str = Field(default="az1")
    address: str = Field(default="my.bosh.com")
    bootstrap: bool = Field(default=False)


class Link(BaseModel):
    """A consumed link as supplied to a render call."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Consumption name")
    instances: list[LinkInstance] = Field(default_factory=list)
    properties: dict[str, Any] = Field(
        default_factory=dict, description="Properties exposed by the providing job"
    )
    address: str | None = Field(default=None, description="DNS address of the link")


class InstanceContext(BaseModel):
    """The rendering instance, exposed to templates as ``spec``."""

    model_config = ConfigDict(frozen=True)

    name: str = "i-name"
    id: str = "xxxxxx-xxxxxxxx-xxxxx"
    index: int = Field(default=0, ge=0)
    az: str = "az1"
    address: str = "my.bosh.com"
    deployment: str = "my-deployment"
    bootstrap: bool = False


class RenderTask(BaseModel):
    """A single template rendering task driven from the CLI."""

    release_dir: Path = Field(..., description="Release directory")
    job: str = Field(..., min_length=1, description="Job name")
    template: str = Field(..., min_length=1, description="Template destination path")
    output_path: Path | None = Field(default=None, description="Output file path")
    file_mode: int = Field(default=0o644, description="File permissions (octal)")
