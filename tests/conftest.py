"""Shared fixtures for the release tracker test-suite."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable

import pytest

from release_tracker.config import (
    ConfigLocator,
    ConfigRepository,
    GlobalConfig,
    SourceConfig,
    SourceKind,
)
from release_tracker.engine import CandidateRecord, Classifier, TitleFilter, identity_key


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("RELEASE_TRACKER_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_global_config(tmp_path: Path) -> GlobalConfig:
    return GlobalConfig(
        state_path=tmp_path / "data" / "state.json",
        history_dir=tmp_path / "data" / "history",
    )


@pytest.fixture
def sample_source_config() -> Callable[..., SourceConfig]:
    def _builder(**overrides: Any) -> SourceConfig:
        base: dict[str, Any] = {
            "name": "example",
            "kind": SourceKind.DOCUMENT,
            "url": "https://example.com/updates",
        }
        base.update(overrides)
        return SourceConfig(**base)

    return _builder


@pytest.fixture
def temp_config_repository(tmp_path: Path) -> Iterable[ConfigRepository]:
    locator = ConfigLocator(project_root=tmp_path)
    repository = ConfigRepository(locator)
    yield repository


@pytest.fixture
def title_filter() -> TitleFilter:
    return TitleFilter()


@pytest.fixture
def classifier() -> Classifier:
    return Classifier()


@pytest.fixture
def make_candidate() -> Callable[..., CandidateRecord]:
    def _builder(title: str = "New Sequence Automation Beta", **overrides: Any) -> CandidateRecord:
        base: dict[str, Any] = {
            "id": identity_key(title),
            "title": title,
            "description": "Short.",
            "status": "public beta",
            "categories": ("Sales Hub",),
            "source": "example",
            "source_url": "https://example.com/updates",
        }
        base.update(overrides)
        return CandidateRecord(**base)

    return _builder
