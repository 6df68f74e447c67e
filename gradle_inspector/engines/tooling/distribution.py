"""Locate the Gradle executable to run for a project."""

from __future__ import annotations

import os
import shutil
import stat
import zipfile
from pathlib import Path

import httpx
import structlog

from gradle_inspector.exceptions import ToolingFailure

log = structlog.get_logger("gradle_inspector.engine")

DISTRIBUTIONS_URL = "https://services.gradle.org/distributions"

_SCRIPT_NAME = "gradle.bat" if os.name == "nt" else "gradle"
_WRAPPER_NAME = "gradlew.bat" if os.name == "nt" else "gradlew"


def resolve_gradle_command(
    project_dir: Path,
    gradle_version: str | None,
    *,
    gradle_home: Path,
    cache_dir: Path,
) -> str:
    """Return the Gradle executable to use for *project_dir*.

    With an explicit *gradle_version* a matching distribution is taken from
    the wrapper cache or downloaded. Otherwise the project's own wrapper
    (and thereby its declared Gradle version) is preferred over ``gradle``
    on ``PATH``.
    """
    if gradle_version:
        return str(_distribution_script(gradle_version, gradle_home, cache_dir))

    for directory in (project_dir, *project_dir.parents):
        wrapper = directory / _WRAPPER_NAME
        if wrapper.is_file():
            return str(wrapper)
        if (directory / "settings.gradle").is_file() or (
            directory / "settings.gradle.kts"
        ).is_file():
            break

    found = shutil.which("gradle")
    if found is None:
        raise ToolingFailure(
            f"No Gradle wrapper found for '{project_dir}' and 'gradle' is not on the PATH."
        )
    return found


def _distribution_script(version: str, gradle_home: Path, cache_dir: Path) -> Path:
    name = f"gradle-{version}"

    # Distributions unpacked by the Gradle wrapper live in a hash-named subdirectory.
    wrapper_dists = gradle_home / "wrapper" / "dists" / f"{name}-bin"
    for candidate in sorted(wrapper_dists.glob(f"*/{name}/bin/{_SCRIPT_NAME}")):
        if candidate.is_file():
            return candidate

    script = cache_dir / "dists" / name / "bin" / _SCRIPT_NAME
    if script.is_file():
        return script

    _download_distribution(version, cache_dir / "dists")
    if not script.is_file():
        raise ToolingFailure(f"Gradle distribution {version} does not contain '{_SCRIPT_NAME}'.")
    return script


def _download_distribution(version: str, target_dir: Path) -> None:
    url = f"{DISTRIBUTIONS_URL}/gradle-{version}-bin.zip"
    target_dir.mkdir(parents=True, exist_ok=True)
    archive = target_dir / f"gradle-{version}-bin.zip.part"

    log.info("tooling.downloading_distribution", version=version, url=url)
    try:
        with httpx.stream("GET", url, follow_redirects=True, timeout=60.0) as resp:
            resp.raise_for_status()
            with archive.open("wb") as f:
                for chunk in resp.iter_bytes():
                    f.write(chunk)
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(target_dir)
    except (httpx.HTTPError, zipfile.BadZipFile, OSError) as exc:
        raise ToolingFailure(f"Unable to download Gradle {version} from {url}: {exc}") from exc
    finally:
        archive.unlink(missing_ok=True)

    # zipfile does not restore permission bits.
    script = target_dir / f"gradle-{version}" / "bin" / _SCRIPT_NAME
    if script.is_file():
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
