"""VCS helpers: Maven SCM parsing, URL normalization, working tree detection."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

import structlog

from gradle_inspector.models import VcsInfo

log = structlog.get_logger("gradle_inspector.vcs")

GIT = "Git"
SUBVERSION = "Subversion"
MERCURIAL = "Mercurial"

_VCS_TYPES = {
    "git": GIT,
    "git-svn": SUBVERSION,
    "svn": SUBVERSION,
    "subversion": SUBVERSION,
    "hg": MERCURIAL,
    "mercurial": MERCURIAL,
}

# scm:<type>:<url>, the provider separator may also be '|'
_SCM_RE = re.compile(r"scm[:|](?P<type>[^:|@]+)[:|](?P<url>.+)")

_HOST_RE = re.compile(
    r"(?:https?://|git://|ssh://(?:git@)?|git@)(?:www\.)?"
    r"(?P<host>github\.com|gitlab\.com|bitbucket\.org)[/:]"
    r"(?P<owner>[^/]+)/(?P<repo>[^/#?]+)"
    r"(?:/(?:tree|blob|src)/(?P<revision>[^/#?]+)(?:/(?P<path>[^#?]*))?)?"
)


def normalize_vcs_url(url: str) -> str:
    """Turn SSH, ``git://`` and plain HTTP forms of known hosts into HTTPS clone URLs."""
    url = url.strip()
    m = _HOST_RE.match(url)
    if not m:
        return url
    repo = m.group("repo").removesuffix(".git")
    return f"https://{m.group('host')}/{m.group('owner')}/{repo}.git"


def parse_vcs_url(url: str) -> VcsInfo:
    """Derive :class:`VcsInfo` from a browsable or clone URL.

    Only URLs that clearly name a repository (a known hosting service or a
    ``.git`` suffix) yield a result; anything else gives ``VcsInfo.EMPTY``.
    """
    url = url.strip()
    m = _HOST_RE.match(url)
    if m:
        return VcsInfo(
            type=GIT,
            url=normalize_vcs_url(url),
            revision=m.group("revision") or "",
            path=(m.group("path") or "").strip("/"),
        )
    if url.endswith(".git") or url.startswith("git://"):
        return VcsInfo(type=GIT, url=url)
    return VcsInfo.EMPTY


def parse_scm_connection(connection: str, tag: str = "") -> VcsInfo:
    """Read the declared VCS from a Maven SCM connection string and tag."""
    if tag == "HEAD":
        tag = ""
    if not connection:
        return VcsInfo.EMPTY

    m = _SCM_RE.fullmatch(connection)
    if m:
        vcs_type = m.group("type").lower()
        return VcsInfo(
            type=_VCS_TYPES.get(vcs_type, vcs_type), url=m.group("url"), revision=tag
        )

    if connection.startswith("git://") or connection.endswith(".git"):
        return VcsInfo(type=GIT, url=connection, revision=tag)

    log.info("vcs.unknown_scm_format", connection=connection)
    return VcsInfo.EMPTY


def process_package_vcs(vcs: VcsInfo, *fallback_urls: str) -> VcsInfo:
    """Normalize *vcs*, or derive it from the first usable fallback URL."""
    if vcs.url:
        parsed = parse_vcs_url(vcs.url)
        return VcsInfo(
            type=vcs.type or parsed.type,
            url=normalize_vcs_url(vcs.url),
            revision=vcs.revision or parsed.revision,
            path=vcs.path or parsed.path,
        )

    for url in fallback_urls:
        if not url:
            continue
        parsed = parse_vcs_url(url)
        if not parsed.is_empty:
            return parsed

    return VcsInfo.EMPTY


def _git(cwd: Path, *args: str) -> str | None:
    try:
        result = subprocess.run(
            ["git", "-C", str(cwd), *args],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def detect_working_tree(path: Path) -> VcsInfo:
    """Return the Git working tree information for *path*, or ``VcsInfo.EMPTY``."""
    top_level = _git(path, "rev-parse", "--show-toplevel")
    if not top_level:
        return VcsInfo.EMPTY

    url = _git(path, "remote", "get-url", "origin") or ""
    revision = _git(path, "rev-parse", "HEAD") or ""
    try:
        rel = path.resolve().relative_to(Path(top_level).resolve()).as_posix()
    except ValueError:
        rel = ""

    return VcsInfo(
        type=GIT,
        url=normalize_vcs_url(url) if url else "",
        revision=revision,
        path="" if rel == "." else rel,
    )
