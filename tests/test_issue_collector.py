"""Tests for the issue collector and package merging."""

from __future__ import annotations

from gradle_inspector.engines.issues import IssueCollector, create_and_log_issue, merge_packages
from gradle_inspector.models import Identifier, Issue, Package, Severity


def _id(name: str) -> Identifier:
    return Identifier("Maven", "com.x", name, "1.0")


class TestIssueCollector:
    def test_keeps_insertion_order(self):
        collector = IssueCollector()
        collector.add("Gradle", "first")
        collector.append(Issue("Gradle", "second", Severity.WARNING))
        collector.extend([Issue("Gradle", "third"), Issue("Gradle", "fourth", Severity.HINT)])

        assert [i.message for i in collector] == ["first", "second", "third", "fourth"]
        assert len(collector) == 4

    def test_issues_is_a_copy(self):
        collector = IssueCollector()
        collector.add("Gradle", "boom")
        collector.issues.clear()
        assert len(collector) == 1

    def test_has_errors(self):
        collector = IssueCollector()
        assert not collector.has_errors()
        collector.add("Gradle", "careful", Severity.WARNING)
        assert not collector.has_errors()
        collector.add("Gradle", "boom")
        assert collector.has_errors()

    def test_create_and_log_issue(self):
        issue = create_and_log_issue("Gradle", "hint", Severity.HINT)
        assert issue == Issue("Gradle", "hint", Severity.HINT)


class TestMergePackages:
    def test_sorted_and_deduplicated(self):
        merged = merge_packages([Package(_id("b")), Package(_id("a")), Package(_id("b"))])
        assert [p.id.name for p in merged] == ["a", "b"]

    def test_resolved_supersedes_placeholder(self):
        resolved = Package(_id("a"), description="real")
        merged = merge_packages([Package.placeholder(_id("a")), resolved])
        assert merged == [resolved]

    def test_placeholder_never_replaces_resolved(self):
        resolved = Package(_id("a"), description="real")
        merged = merge_packages([resolved, Package.placeholder(_id("a"))])
        assert merged == [resolved]

    def test_first_resolved_wins(self):
        first = Package(_id("a"), description="first")
        merged = merge_packages([first, Package(_id("a"), description="second")])
        assert merged == [first]

    def test_empty(self):
        assert merge_packages([]) == []
