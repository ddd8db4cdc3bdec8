"""Template rendering engine."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
)

from ..context.links import LinkSet, resolve_links
from ..context.properties import PropertyTree, resolve_properties
from ..core.errors import JobRenderError, TemplateNotFoundError, TemplateRenderError
from ..core.models import InstanceContext, JobSpec, Link
from .io import atomic_write_text

logger = logging.getLogger(__name__)


# JSON leaves these raw, but a YAML reader rejects or folds them.
_YAML_UNSAFE = re.compile(
    r"[^\x09\x0a\x0d\x20-\x7e\xa0-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
    r"|[\u2028\u2029\ufeff]"
)


def yaml_quote(value: Any) -> str:
    """Render ``value`` as a YAML double-quoted string that loads back verbatim."""
    text = json.dumps(str(value), ensure_ascii=False)
    return _YAML_UNSAFE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def build_environment(templates_dir: Path) -> Environment:
    """Create the Jinja2 environment used for a job's templates.

    Args:
        templates_dir: Directory holding the job's template sources

    Returns:
        Environment with strict undefined handling, no autoescaping and the
        ``yaml_quote`` filter
    """
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["yaml_quote"] = yaml_quote
    return env


def load_template(templates_dir: Path, source: str) -> Template:
    """Load a Jinja2 template from a job's templates directory.

    Args:
        templates_dir: Directory holding the job's template sources
        source: Template file name relative to ``templates_dir``

    Returns:
        Compiled Jinja2 template
    """
    env = build_environment(templates_dir)
    try:
        return env.get_template(source)
    except TemplateNotFound as e:
        raise TemplateNotFoundError(f"Template not found: {templates_dir / source}") from e
    except TemplateError as e:
        raise TemplateRenderError(f"Failed to compile template {source}: {e}") from e


def build_context(
    spec: JobSpec,
    properties: Mapping[str, Any] | None,
    links: Iterable[Link] | None,
    instance: InstanceContext | None = None,
) -> dict[str, Any]:
    """Build the template context for one render call.

    Links are validated here, so an unsatisfied consumption fails before any
    template code runs.

    Args:
        spec: Job spec of the job being rendered
        properties: Nested property tree supplied by the caller
        links: Consumed links supplied by the caller
        instance: Instance data exposed as ``spec``; defaults are used when omitted

    Returns:
        Context dictionary for template rendering
    """
    link_set = LinkSet(resolve_links(spec, links), owner=spec.name)
    tree = PropertyTree(resolve_properties(spec, properties), owner=spec.name)

    return {
        "p": tree.p,
        "has_p": tree.has_p,
        "link": link_set.link,
        "has_link": link_set.has_link,
        "spec": instance or InstanceContext(),
        "job_name": spec.name,
    }


def render_template(template: Template, context: dict[str, Any]) -> str:
    """Render a compiled template, normalising failures to jobrender errors."""
    try:
        return template.render(**context)
    except JobRenderError:
        raise
    except TemplateError as e:
        raise TemplateRenderError(f"Failed to render {template.name}: {e}") from e


def render(
    spec: JobSpec,
    templates_dir: Path,
    source: str,
    properties: Mapping[str, Any] | None,
    links: Iterable[Link] | None = None,
    instance: InstanceContext | None = None,
) -> str:
    """Render one of a job's templates.

    Args:
        spec: Job spec of the job being rendered
        templates_dir: Directory holding the job's template sources
        source: Template file name
        properties: Nested property tree
        links: Consumed links
        instance: Optional instance data

    Returns:
        Rendered text
    """
    logger.debug(f"Rendering template {source} for job {spec.name}")

    context = build_context(spec, properties, links, instance)
    template = load_template(templates_dir, source)
    return render_template(template, context)


def write_output(text: str, output_path: Path, file_mode: int) -> Path:
    """Write rendered text to ``output_path`` atomically."""
    atomic_write_text(output_path, text, mode=file_mode)
    logger.info(f"Wrote {output_path}")
    return output_path
