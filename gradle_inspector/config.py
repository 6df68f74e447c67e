"""Inspector configuration, from keyword arguments or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_ENV_PREFIX = "GRADLE_INSPECTOR_"


def _default_concurrency() -> int:
    return min(32, (os.cpu_count() or 1) * 4)


def _env(key: str, default: str | None = None) -> str | None:
    value = os.environ.get(key)
    return value if value else default


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def gradle_user_home() -> Path:
    return Path(_env("GRADLE_USER_HOME") or Path.home() / ".gradle")


def maven_local_repository() -> Path:
    return Path(_env("MAVEN_REPO_LOCAL") or Path.home() / ".m2" / "repository")


@dataclass
class InspectorConfig:
    """Settings for one :class:`~gradle_inspector.inspector.GradleInspector`.

    ``gradle_version`` overrides the Gradle version declared by the project's
    wrapper; ``exclude_scopes`` holds regular expressions matched against
    whole configuration names.
    """

    gradle_version: str | None = None
    timeout: float = 1800.0
    checksum_timeout: float = 10.0
    checksum_algorithm: str = "sha1"
    concurrency: int = field(default_factory=_default_concurrency)
    exclude_scopes: list[str] = field(default_factory=list)
    cache_dir: Path = field(default_factory=lambda: Path.home() / ".cache" / "gradle-inspector")
    maven_repository: Path = field(default_factory=maven_local_repository)
    gradle_home: Path = field(default_factory=gradle_user_home)

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")

    @classmethod
    def from_env(cls, **overrides) -> InspectorConfig:
        """Build a config from ``GRADLE_INSPECTOR_*`` variables; *overrides* win."""
        values: dict = {
            "gradle_version": _env(f"{_ENV_PREFIX}GRADLE_VERSION"),
            "timeout": _env_float(f"{_ENV_PREFIX}TIMEOUT", 1800.0),
            "checksum_timeout": _env_float(f"{_ENV_PREFIX}CHECKSUM_TIMEOUT", 10.0),
            "checksum_algorithm": _env(f"{_ENV_PREFIX}CHECKSUM_ALGORITHM", "sha1"),
        }
        concurrency = _env(f"{_ENV_PREFIX}CONCURRENCY")
        if concurrency:
            values["concurrency"] = int(concurrency)
        excludes = _env(f"{_ENV_PREFIX}EXCLUDE_SCOPES")
        if excludes:
            values["exclude_scopes"] = [p.strip() for p in excludes.split(",") if p.strip()]
        cache_dir = _env(f"{_ENV_PREFIX}CACHE_DIR")
        if cache_dir:
            values["cache_dir"] = Path(cache_dir)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
