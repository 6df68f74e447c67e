"""Raw dependency-tree model as written by the Gradle init script.

Parsing is best-effort: any missing field defaults to an empty value, so a
partial model still yields a (partial) dependency graph.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value) if value is not None else ""


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return str(value) if value else None


def _list(data: dict[str, Any], key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


@dataclass
class RawDependency:
    group_id: str
    artifact_id: str
    version: str
    classifier: str = ""
    extension: str = ""
    local_path: str | None = None  # set for sibling project modules
    pom_file: str | None = None  # remote POM location of external artifacts
    error: str | None = None
    warning: str | None = None
    dependencies: list[RawDependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawDependency:
        return cls(
            group_id=_str(data, "groupId"),
            artifact_id=_str(data, "artifactId"),
            version=_str(data, "version"),
            classifier=_str(data, "classifier"),
            extension=_str(data, "extension"),
            local_path=_opt_str(data, "localPath"),
            pom_file=_opt_str(data, "pomFile"),
            error=_opt_str(data, "error"),
            warning=_opt_str(data, "warning"),
            dependencies=[
                cls.from_dict(d) for d in _list(data, "dependencies") if isinstance(d, dict)
            ],
        )


@dataclass
class RawConfiguration:
    name: str
    dependencies: list[RawDependency] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawConfiguration:
        return cls(
            name=_str(data, "name"),
            dependencies=[
                RawDependency.from_dict(d)
                for d in _list(data, "dependencies")
                if isinstance(d, dict)
            ],
        )


@dataclass
class RawModel:
    group: str
    name: str
    version: str
    configurations: list[RawConfiguration] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RawModel:
        return cls(
            group=_str(data, "group"),
            name=_str(data, "name"),
            version=_str(data, "version"),
            configurations=[
                RawConfiguration.from_dict(c)
                for c in _list(data, "configurations")
                if isinstance(c, dict)
            ],
            errors=[str(e) for e in _list(data, "errors")],
            warnings=[str(w) for w in _list(data, "warnings")],
        )
