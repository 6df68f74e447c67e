"""Tests for InspectorConfig."""

from __future__ import annotations

from pathlib import Path

import pytest

from gradle_inspector.config import InspectorConfig, gradle_user_home, maven_local_repository

_VARS = [
    "GRADLE_INSPECTOR_GRADLE_VERSION",
    "GRADLE_INSPECTOR_TIMEOUT",
    "GRADLE_INSPECTOR_CHECKSUM_TIMEOUT",
    "GRADLE_INSPECTOR_CHECKSUM_ALGORITHM",
    "GRADLE_INSPECTOR_CONCURRENCY",
    "GRADLE_INSPECTOR_EXCLUDE_SCOPES",
    "GRADLE_INSPECTOR_CACHE_DIR",
    "GRADLE_USER_HOME",
    "MAVEN_REPO_LOCAL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


class TestInspectorConfig:
    def test_defaults(self):
        config = InspectorConfig.from_env()
        assert config.gradle_version is None
        assert config.timeout == 1800.0
        assert config.checksum_algorithm == "sha1"
        assert config.exclude_scopes == []
        assert config.concurrency >= 1

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GRADLE_INSPECTOR_GRADLE_VERSION", "8.7")
        monkeypatch.setenv("GRADLE_INSPECTOR_TIMEOUT", "60")
        monkeypatch.setenv("GRADLE_INSPECTOR_CONCURRENCY", "3")
        monkeypatch.setenv("GRADLE_INSPECTOR_EXCLUDE_SCOPES", "test.*, ,.*Annotation.*")
        monkeypatch.setenv("GRADLE_INSPECTOR_CACHE_DIR", str(tmp_path))

        config = InspectorConfig.from_env()
        assert config.gradle_version == "8.7"
        assert config.timeout == 60.0
        assert config.concurrency == 3
        assert config.exclude_scopes == ["test.*", ".*Annotation.*"]
        assert config.cache_dir == tmp_path

    def test_overrides_win_unless_none(self, monkeypatch):
        monkeypatch.setenv("GRADLE_INSPECTOR_CONCURRENCY", "3")
        monkeypatch.setenv("GRADLE_INSPECTOR_GRADLE_VERSION", "8.7")
        config = InspectorConfig.from_env(concurrency=7, gradle_version=None)
        assert config.concurrency == 7
        assert config.gradle_version == "8.7"

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValueError):
            InspectorConfig(concurrency=0)

    def test_cache_locations(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GRADLE_USER_HOME", str(tmp_path / "gh"))
        monkeypatch.setenv("MAVEN_REPO_LOCAL", str(tmp_path / "m2"))
        assert gradle_user_home() == tmp_path / "gh"
        assert maven_local_repository() == tmp_path / "m2"
        config = InspectorConfig()
        assert config.gradle_home == tmp_path / "gh"
        assert config.maven_repository == tmp_path / "m2"

    def test_default_cache_locations(self):
        assert gradle_user_home() == Path.home() / ".gradle"
        assert maven_local_repository() == Path.home() / ".m2" / "repository"
