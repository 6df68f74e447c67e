"""CLI entry point: gradle-inspector.

Subcommands:
    gradle-inspector resolve /path/to/project            # summary
    gradle-inspector resolve build.gradle.kts --json     # full result as JSON
    gradle-inspector resolve . --exclude-scope 'test.*'  # drop test configurations
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import re
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import click

from gradle_inspector.config import InspectorConfig
from gradle_inspector.core.logging import setup_logging
from gradle_inspector.exceptions import ToolingFailure
from gradle_inspector.inspector import GradleInspector
from gradle_inspector.models import PackageReference, ProjectAnalyzerResult
from gradle_inspector.models.package import HASH_LENGTHS


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(_to_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return value


def _print_tree(refs: list[PackageReference], depth: int) -> None:
    for ref in refs:
        marker = " (project)" if ref.linkage.value.startswith("PROJECT") else ""
        click.echo(f"{'  ' * depth}{ref.id.to_coordinates()}{marker}")
        _print_tree(ref.dependencies, depth + 1)


def _print_result(result: ProjectAnalyzerResult, show_tree: bool) -> None:
    project = result.project
    click.echo(f"Project: {project.id.to_coordinates()} ({project.definition_file_path})")
    if project.vcs_processed.url:
        click.echo(f"  VCS: {project.vcs_processed.url} @ {project.vcs_processed.revision}")

    click.echo(f"\nScopes ({len(project.scopes)}):")
    for scope in project.scopes:
        click.echo(f"  {scope.name}: {len(scope.dependencies)} direct dependencies")
        if show_tree:
            _print_tree(scope.dependencies, 2)

    placeholders = sum(1 for p in result.packages if p.is_placeholder)
    click.echo(f"\nPackages: {len(result.packages)} ({placeholders} without metadata)")
    for pkg in result.packages:
        licenses = ", ".join(sorted(pkg.declared_licenses)) or "-"
        click.echo(f"  {pkg.id.to_coordinates()}  [{licenses}]")

    if result.issues:
        click.echo(f"\nIssues ({len(result.issues)}):")
        for issue in result.issues:
            click.echo(f"  [{issue.severity.value}] {issue.source}: {issue.message}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG, including Gradle's output")
def main(verbose: bool) -> None:
    """Gradle Inspector: resolve Gradle dependency graphs into package metadata.

    Logging is controlled by GRADLE_INSPECTOR_LOG_LEVEL and
    GRADLE_INSPECTOR_LOG_FORMAT.
    """
    setup_logging("DEBUG" if verbose else None)


@main.command("resolve")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--gradle-version", default=None, help="Gradle version to use instead of the wrapper's"
)
@click.option(
    "--exclude-scope",
    "exclude_scopes",
    multiple=True,
    help="Regex of configuration names to exclude (repeatable)",
)
@click.option("--concurrency", type=click.IntRange(min=1), default=None, help="Parallel lookups")
@click.option(
    "--checksum-algorithm",
    type=click.Choice(sorted(HASH_LENGTHS)),
    default=None,
    help="Checksum algorithm for remote artifacts",
)
@click.option("--tree", "show_tree", is_flag=True, help="Print the dependency trees")
@click.option("--json", "as_json", is_flag=True, help="Output the result as JSON")
def resolve(
    path: Path,
    gradle_version: str | None,
    exclude_scopes: tuple[str, ...],
    concurrency: int | None,
    checksum_algorithm: str | None,
    show_tree: bool,
    as_json: bool,
) -> None:
    """Resolve the Gradle project at PATH (a directory or a build/settings file)."""
    config = InspectorConfig.from_env(
        gradle_version=gradle_version,
        exclude_scopes=list(exclude_scopes) or None,
        concurrency=concurrency,
        checksum_algorithm=checksum_algorithm,
    )
    try:
        inspector = GradleInspector(config, analysis_root=path if path.is_dir() else path.parent)
    except re.error as exc:
        raise click.BadParameter(
            f"invalid scope pattern: {exc}", param_hint="--exclude-scope"
        ) from exc

    try:
        results = asyncio.run(inspector.resolve_dependencies(path))
    except ToolingFailure as exc:
        click.echo(f"Error: {exc}", err=True)
        if exc.output:
            click.echo(exc.output, err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(_to_jsonable(results), indent=2))
        return

    for result in results:
        _print_result(result, show_tree)
