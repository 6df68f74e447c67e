"""Tests for the gradle-inspector CLI, with the inspector mocked."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from gradle_inspector.cli import main
from gradle_inspector.exceptions import ToolingFailure
from gradle_inspector.models import (
    Identifier,
    Issue,
    Package,
    PackageReference,
    Project,
    ProjectAnalyzerResult,
    Scope,
    Severity,
)

LIB = Identifier("Maven", "com.x", "lib", "1.0")

RESULT = ProjectAnalyzerResult(
    project=Project(
        id=Identifier("GradleInspector", "org.example", "app", "1.0"),
        definition_file_path="build.gradle",
        scopes=[Scope("compileClasspath", [PackageReference(LIB)])],
    ),
    packages=[Package(LIB, declared_licenses={"MIT"})],
    issues=[Issue("Gradle", "Something odd", Severity.WARNING)],
)


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("gradle_inspector.cli.setup_logging"):
        yield


@pytest.fixture
def project(tmp_path):
    (tmp_path / "build.gradle").write_text("")
    return tmp_path


def _mock_inspector(**kwargs):
    return patch(
        "gradle_inspector.cli.GradleInspector.resolve_dependencies",
        new=AsyncMock(**kwargs),
    )


class TestResolveCommand:
    def test_summary(self, project):
        with _mock_inspector(return_value=[RESULT]):
            result = CliRunner().invoke(main, ["resolve", str(project), "--tree"])
        assert result.exit_code == 0, result.output
        assert "Project: GradleInspector:org.example:app:1.0" in result.output
        assert "compileClasspath: 1 direct dependencies" in result.output
        assert "    Maven:com.x:lib:1.0" in result.output
        assert "[MIT]" in result.output
        assert "[WARNING] Gradle: Something odd" in result.output

    def test_json(self, project):
        with _mock_inspector(return_value=[RESULT]):
            result = CliRunner().invoke(main, ["resolve", str(project), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data[0]["project"]["id"]["name"] == "app"
        assert data[0]["packages"][0]["declared_licenses"] == ["MIT"]
        assert data[0]["issues"][0]["severity"] == "WARNING"
        assert data[0]["project"]["scopes"][0]["dependencies"][0]["linkage"] == "DYNAMIC"

    def test_options_reach_config(self, project):
        with patch("gradle_inspector.cli.GradleInspector") as inspector_cls:
            inspector_cls.return_value.resolve_dependencies = AsyncMock(return_value=[RESULT])
            result = CliRunner().invoke(
                main,
                [
                    "resolve",
                    str(project / "build.gradle"),
                    "--exclude-scope",
                    "test.*",
                    "--exclude-scope",
                    ".*Annotation.*",
                    "--gradle-version",
                    "8.7",
                    "--concurrency",
                    "4",
                    "--checksum-algorithm",
                    "sha256",
                ],
            )
        assert result.exit_code == 0, result.output
        config = inspector_cls.call_args.args[0]
        assert config.exclude_scopes == ["test.*", ".*Annotation.*"]
        assert config.gradle_version == "8.7"
        assert config.concurrency == 4
        assert config.checksum_algorithm == "sha256"
        assert inspector_cls.call_args.kwargs["analysis_root"] == project

    def test_tooling_failure(self, project):
        error = ToolingFailure("Gradle failed (exit 1) in 'x'.", output="FAILURE: boom")
        with _mock_inspector(side_effect=error):
            result = CliRunner().invoke(main, ["resolve", str(project)])
        assert result.exit_code == 1
        assert "Gradle failed" in result.output
        assert "FAILURE: boom" in result.output

    def test_invalid_scope_pattern(self, project):
        result = CliRunner().invoke(main, ["resolve", str(project), "--exclude-scope", "test[("])
        assert result.exit_code == 2
        assert "invalid scope pattern" in result.output

    def test_rejects_zero_concurrency(self, project):
        result = CliRunner().invoke(main, ["resolve", str(project), "--concurrency", "0"])
        assert result.exit_code == 2

    def test_missing_path(self, tmp_path):
        result = CliRunner().invoke(main, ["resolve", str(tmp_path / "nope")])
        assert result.exit_code == 2


class TestLoggingOption:
    def test_verbose_logs_at_debug(self, project):
        with (
            patch("gradle_inspector.cli.setup_logging") as setup,
            _mock_inspector(return_value=[RESULT]),
        ):
            result = CliRunner().invoke(main, ["--verbose", "resolve", str(project)])
        assert result.exit_code == 0, result.output
        setup.assert_called_once_with("DEBUG")

    def test_default_defers_to_environment(self, project):
        with (
            patch("gradle_inspector.cli.setup_logging") as setup,
            _mock_inspector(return_value=[RESULT]),
        ):
            CliRunner().invoke(main, ["resolve", str(project)])
        setup.assert_called_once_with(None)
