"""Issue collection shared by all pipeline stages."""

from gradle_inspector.engines.issues.collector import (
    IssueCollector,
    create_and_log_issue,
    log_issue,
    merge_packages,
)

__all__ = ["IssueCollector", "create_and_log_issue", "log_issue", "merge_packages"]
