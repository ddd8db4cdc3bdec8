"""Tests for the jobrender CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from jobrender.bpm import load_document, process
from jobrender.cli import app

FIXTURE_RELEASE = Path(__file__).parent / "fixtures" / "release"
BINDING_CACHE_JOB = "loggr-syslog-binding-cache"

runner = CliRunner()


@pytest.fixture
def properties_file(tmp_path: Path, properties) -> Path:
    path = tmp_path / "properties.yml"
    path.write_text(yaml.safe_dump(properties))
    return path


@pytest.fixture
def link_file(tmp_path: Path) -> Path:
    path = tmp_path / "cloud_controller.yml"
    path.write_text("instances:\n- id: a-b-c-d\n  address: cc.internal\n")
    return path


def _render_args(properties_file: Path, *extra: str) -> list[str]:
    return [
        "render",
        "--release",
        str(FIXTURE_RELEASE),
        "--job",
        BINDING_CACHE_JOB,
        "--template",
        "config/bpm.yml",
        "--properties",
        str(properties_file),
        *extra,
    ]


class TestRenderCommand:
    def test_renders_to_stdout(self, properties_file: Path, link_file: Path) -> None:
        result = runner.invoke(
            app, _render_args(properties_file, "--link", f"cloud_controller={link_file}")
        )

        assert result.exit_code == 0, result.output
        env = process(load_document(result.stdout), 0)["env"]
        assert env["AGGREGATE_DRAIN_CERTIFICATES"] == "aggregate_drain_certificates"
        assert env["API_URL"] == "https://cc.internal:9023"

    def test_renders_to_file(self, tmp_path: Path, properties_file: Path, link_file: Path) -> None:
        output = tmp_path / "rendered" / "bpm.yml"

        result = runner.invoke(
            app,
            _render_args(
                properties_file,
                "--link",
                f"cloud_controller={link_file}",
                "--output",
                str(output),
                "--mode",
                "0600",
            ),
        )

        assert result.exit_code == 0, result.output
        assert process(load_document(output.read_text()), 0)["name"] == BINDING_CACHE_JOB
        assert output.stat().st_mode & 0o777 == 0o600

    def test_release_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, properties_file: Path, link_file: Path
    ) -> None:
        monkeypatch.setenv("JOBRENDER_RELEASE_DIR", str(FIXTURE_RELEASE))

        result = runner.invoke(
            app,
            [
                "render",
                "--job",
                BINDING_CACHE_JOB,
                "--template",
                "config/bpm.yml",
                "--properties",
                str(properties_file),
                "--link",
                f"cloud_controller={link_file}",
            ],
        )

        assert result.exit_code == 0, result.output

    def test_missing_link_exits_with_error(self, properties_file: Path) -> None:
        result = runner.invoke(app, _render_args(properties_file))

        assert result.exit_code == 1
        assert "cloud_controller" in result.output

    def test_malformed_link_argument(self, properties_file: Path) -> None:
        result = runner.invoke(app, _render_args(properties_file, "--link", "cloud_controller"))

        assert result.exit_code == 2
        assert "NAME=FILE" in result.output

    def test_link_file_must_not_name_the_link(self, tmp_path: Path, properties_file: Path) -> None:
        path = tmp_path / "link.yml"
        path.write_text("name: other\ninstances: []\n")

        result = runner.invoke(
            app, _render_args(properties_file, "--link", f"cloud_controller={path}")
        )

        assert result.exit_code == 2

    def test_invalid_mode(self, properties_file: Path, link_file: Path) -> None:
        result = runner.invoke(
            app,
            _render_args(
                properties_file, "--link", f"cloud_controller={link_file}", "--mode", "rw"
            ),
        )

        assert result.exit_code == 2


class TestTemplatesCommand:
    def test_lists_destinations(self) -> None:
        result = runner.invoke(
            app, ["templates", "--release", str(FIXTURE_RELEASE), "--job", BINDING_CACHE_JOB]
        )

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["config/bpm.yml", "config/certs/api_ca.crt"]

    def test_unknown_job(self) -> None:
        result = runner.invoke(
            app, ["templates", "--release", str(FIXTURE_RELEASE), "--job", "nope"]
        )

        assert result.exit_code == 1
        assert "nope" in result.output


class TestPropertyOverrides:
    def test_set_overrides_properties_file(self, properties_file: Path, link_file: Path) -> None:
        result = runner.invoke(
            app,
            _render_args(
                properties_file,
                "--link",
                f"cloud_controller={link_file}",
                "--set",
                "aggregate_drain_certificates=overridden",
                "--set",
                "external_port=7777",
            ),
        )

        assert result.exit_code == 0, result.output
        env = process(load_document(result.stdout), 0)["env"]
        assert env["AGGREGATE_DRAIN_CERTIFICATES"] == "overridden"
        assert env["CACHE_PORT"] == "7777"


class TestLoggingConfiguration:
    @pytest.fixture
    def levels(self, monkeypatch: pytest.MonkeyPatch) -> list[int]:
        seen: list[int] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.append(kwargs["level"]))
        return seen

    def test_templates_honours_log_level_setting(
        self, monkeypatch: pytest.MonkeyPatch, levels: list[int]
    ) -> None:
        monkeypatch.setenv("JOBRENDER_LOG_LEVEL", "WARNING")

        result = runner.invoke(
            app, ["templates", "--release", str(FIXTURE_RELEASE), "--job", BINDING_CACHE_JOB]
        )

        assert result.exit_code == 0, result.output
        assert levels == [logging.WARNING]

    def test_templates_verbose(self, levels: list[int]) -> None:
        result = runner.invoke(
            app,
            ["templates", "--release", str(FIXTURE_RELEASE), "--job", BINDING_CACHE_JOB, "-v"],
        )

        assert result.exit_code == 0, result.output
        assert levels == [logging.DEBUG]

    def test_render_honours_log_level_setting(
        self,
        monkeypatch: pytest.MonkeyPatch,
        levels: list[int],
        properties_file: Path,
        link_file: Path,
    ) -> None:
        monkeypatch.setenv("JOBRENDER_LOG_LEVEL", "ERROR")

        result = runner.invoke(
            app, _render_args(properties_file, "--link", f"cloud_controller={link_file}")
        )

        assert result.exit_code == 0, result.output
        assert levels == [logging.ERROR]


class TestOversizedOverride:
    def test_huge_numeric_override_renders_verbatim(
        self, properties_file: Path, link_file: Path
    ) -> None:
        digits = "7" * 5000

        result = runner.invoke(
            app,
            _render_args(
                properties_file,
                "--link",
                f"cloud_controller={link_file}",
                "--set",
                f"aggregate_drain_certificates={digits}",
            ),
        )

        assert result.exit_code == 0, result.output
        env = process(load_document(result.stdout), 0)["env"]
        assert env["AGGREGATE_DRAIN_CERTIFICATES"] == digits
