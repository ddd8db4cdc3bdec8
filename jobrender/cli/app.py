"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..core.errors import JobRenderError
from ..core.models import RenderTask
from ..core.settings import Settings
from ..release import ReleaseDir
from ..rendering import engine
from .parsers import apply_override, load_link, load_properties, parse_file_mode

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="jobrender",
    help="Render BOSH-style job templates from properties and consumed links.",
)


def _configure_logging(settings: Settings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _release_path(release: str, settings: Settings) -> Path:
    return Path(release) if release else settings.release_dir


@app.command()
def render(
    job: Annotated[
        str,
        typer.Option("--job", help="Job name inside the release.", metavar="NAME"),
    ],
    template: Annotated[
        str,
        typer.Option(
            "--template",
            help="Template destination path (e.g. config/bpm.yml).",
            metavar="DEST",
        ),
    ],
    release: Annotated[
        str,
        typer.Option(
            "--release",
            help="Release directory (default: JOBRENDER_RELEASE_DIR or cwd).",
            metavar="DIR",
        ),
    ] = "",
    properties_file: Annotated[
        str,
        typer.Option(
            "--properties",
            help="YAML file holding the nested property tree.",
            metavar="FILE",
        ),
    ] = "",
    overrides: Annotated[
        list[str],
        typer.Option(
            "--set",
            help="Override one property (format: PATH=VALUE, e.g. api.tls.cn=CN). Repeatable.",
            metavar="PATH=VALUE",
        ),
    ] = [],
    links: Annotated[
        list[str],
        typer.Option(
            "--link",
            help="Consumed link (format: NAME=FILE, FILE holds instances and properties). Repeatable.",
            metavar="NAME=FILE",
        ),
    ] = [],
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Write the result to FILE instead of stdout.",
            metavar="FILE",
        ),
    ] = "",
    file_mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="File permissions in octal (default: 0644).",
            metavar="OCTAL",
        ),
    ] = "0644",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Render one job template."""
    settings = Settings()
    _configure_logging(settings, verbose)

    task = RenderTask(
        release_dir=_release_path(release, settings),
        job=job,
        template=template,
        output_path=Path(output) if output else None,
        file_mode=parse_file_mode(file_mode),
    )
    properties = load_properties(Path(properties_file) if properties_file else None)
    for override in overrides:
        apply_override(properties, override)
    consumed = [load_link(value) for value in links]

    logger.debug(f"Rendering {task.template} of job {task.job} from {task.release_dir}")

    try:
        text = (
            ReleaseDir(task.release_dir)
            .job(task.job)
            .template(task.template)
            .render(properties, consumes=consumed)
        )
    except JobRenderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    if task.output_path is None:
        typer.echo(text, nl=False)
        return

    engine.write_output(text, task.output_path, task.file_mode)


@app.command()
def templates(
    job: Annotated[
        str,
        typer.Option("--job", help="Job name inside the release.", metavar="NAME"),
    ],
    release: Annotated[
        str,
        typer.Option("--release", help="Release directory.", metavar="DIR"),
    ] = "",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """List the template destinations a job renders."""
    settings = Settings()
    _configure_logging(settings, verbose)

    try:
        destinations = ReleaseDir(_release_path(release, settings)).job(job).templates()
    except JobRenderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    for destination in destinations:
        typer.echo(destination)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
