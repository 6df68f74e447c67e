"""IssueCollector — append-only, ordered record of recoverable problems."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from gradle_inspector.models import Identifier, Issue, Package, Severity

log = structlog.get_logger("gradle_inspector.engine")


def log_issue(issue: Issue) -> None:
    """Log *issue* at the level matching its severity."""
    if issue.severity is Severity.ERROR:
        log.error("issue.recorded", source=issue.source, message=issue.message)
    elif issue.severity is Severity.WARNING:
        log.warning("issue.recorded", source=issue.source, message=issue.message)
    else:
        log.info("issue.recorded", source=issue.source, message=issue.message)


def create_and_log_issue(
    source: str, message: str, severity: Severity = Severity.ERROR
) -> Issue:
    """Create an :class:`Issue` and log it at the matching level."""
    issue = Issue(source=source, message=message, severity=severity)
    log_issue(issue)
    return issue


class IssueCollector:
    """Ordered, append-only issue log.

    Concurrent stages fill their own buffers (plain lists or collectors)
    and hand them over with :meth:`extend` once they are done.
    """

    def __init__(self) -> None:
        self._issues: list[Issue] = []

    def add(self, source: str, message: str, severity: Severity = Severity.ERROR) -> Issue:
        issue = create_and_log_issue(source, message, severity)
        self._issues.append(issue)
        return issue

    def append(self, issue: Issue) -> None:
        self._issues.append(issue)

    def extend(self, issues: Iterable[Issue]) -> None:
        self._issues.extend(issues)

    @property
    def issues(self) -> list[Issue]:
        return list(self._issues)

    def has_errors(self) -> bool:
        return any(i.severity is Severity.ERROR for i in self._issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(list(self._issues))

    def __len__(self) -> int:
        return len(self._issues)


def merge_packages(packages: Iterable[Package]) -> list[Package]:
    """Deduplicate *packages* by identifier, sorted by identifier.

    A resolved package always supersedes a placeholder for the same
    identifier; between two resolved packages the first one wins.
    """
    merged: dict[Identifier, Package] = {}
    for pkg in packages:
        existing = merged.get(pkg.id)
        if existing is None or (existing.is_placeholder and not pkg.is_placeholder):
            merged[pkg.id] = pkg
    return [merged[key] for key in sorted(merged)]
