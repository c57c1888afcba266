from __future__ import annotations

import json
from datetime import timedelta

import pytest

from release_tracker.config import ClassifierRules, ConfigRepository, GlobalConfig, KeywordRule, SourceKind
from release_tracker.engine import MergeEngine, StoreState
from release_tracker.errors import StorePersistenceError
from release_tracker.orchestrator import Orchestrator, status_breakdown


class StubAdapter:
    def __init__(self, name: str, candidates=None, error: Exception | None = None) -> None:
        self.name = name
        self.candidates = candidates or []
        self.error = error
        self.calls = 0

    def fetch_candidates(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.candidates)


@pytest.fixture
def repository(temp_config_repository: ConfigRepository, sample_source_config) -> ConfigRepository:
    for name in ("feed", "page", "rollups", "broken"):
        temp_config_repository.save_source(sample_source_config(name=name, url=f"https://example.com/{name}"))
    temp_config_repository.save_source(
        sample_source_config(name="disabled", kind=SourceKind.FEED, enabled=False)
    )
    return temp_config_repository


@pytest.fixture
def adapters(make_candidate) -> dict[str, StubAdapter]:
    return {
        "feed": StubAdapter("feed", [make_candidate(description="x" * 40, source="feed")]),
        "page": StubAdapter(
            "page",
            [
                make_candidate(description="y" * 120, source="page"),
                make_candidate("Custom Objects Now Support Pipelines", status="now live", source="page"),
            ],
        ),
        "rollups": StubAdapter("rollups"),
        "broken": StubAdapter("broken", error=RuntimeError("browser crashed")),
    }


def _orchestrator(repository, adapters, now) -> Orchestrator:
    return Orchestrator(
        repository,
        adapter_factory=lambda source, fetcher: adapters[source.name],
        clock=lambda: now,
    )


def test_run_scan_merges_and_reports(repository, adapters, fixed_now) -> None:
    orchestrator = _orchestrator(repository, adapters, fixed_now)

    report = orchestrator.run_scan()

    assert report.items_found == 2
    assert len(report.changes.new) == 2
    assert report.empty_sources == ["rollups"]
    assert report.failed_sources == ["broken"]
    assert report.scan_count == 1
    assert report.total_tracked == 2
    tracked = orchestrator.current_state().items["new-sequence-automation-beta"]
    assert tracked.description == "y" * 120
    assert tracked.source == "page"


def test_disabled_sources_are_skipped(repository, adapters, fixed_now) -> None:
    orchestrator = _orchestrator(repository, adapters, fixed_now)
    assert "disabled" not in [source.name for source in orchestrator.enabled_sources()]
    orchestrator.run_scan()
    assert all(adapter.calls == 1 for adapter in adapters.values())


def test_rescan_without_changes_is_quiet(repository, adapters, fixed_now) -> None:
    _orchestrator(repository, adapters, fixed_now).run_scan()
    later = fixed_now + timedelta(hours=6)
    report = _orchestrator(repository, adapters, later).run_scan()

    assert report.changes.is_empty
    assert report.scan_count == 2
    state = _orchestrator(repository, adapters, later).current_state()
    assert state.last_scan == later
    assert all(item.last_seen == later for item in state.items.values())


def test_scan_appends_history_snapshot(repository, adapters, fixed_now) -> None:
    orchestrator = _orchestrator(repository, adapters, fixed_now)
    orchestrator.run_scan()

    snapshots = orchestrator.history.read(fixed_now.date())
    assert len(snapshots) == 1
    snapshot = snapshots[0]
    assert set(snapshot) == {"changes", "items_found", "empty_sources", "failed_sources", "timestamp"}
    assert snapshot["failed_sources"] == ["broken"]
    assert len(snapshot["changes"]["new"]) == 2


def test_report_to_dict_is_json_serialisable(repository, adapters, fixed_now) -> None:
    report = _orchestrator(repository, adapters, fixed_now).run_scan()
    payload = json.loads(json.dumps(report.to_dict()))
    assert payload["summary"]["new"] == 2
    assert payload["total_tracked"] == 2
    assert ["public beta", 1] in payload["summary"]["by_status"]


def test_persistence_failure_propagates(repository, adapters, fixed_now, monkeypatch) -> None:
    orchestrator = _orchestrator(repository, adapters, fixed_now)

    def failing_save(state):  # noqa: ANN001
        raise StorePersistenceError(orchestrator.store.path, "disk full")

    monkeypatch.setattr(orchestrator.store, "save", failing_save)
    with pytest.raises(StorePersistenceError):
        orchestrator.run_scan()
    assert orchestrator.history.list_days() == []


def test_status_breakdown_orders_by_count(make_candidate, fixed_now) -> None:
    state = StoreState()
    MergeEngine().merge(
        state,
        [
            make_candidate("Custom Objects Now Support Pipelines", status="now live"),
            make_candidate("Breeze Copilot Public Beta Expands"),
            make_candidate(),
        ],
        fixed_now,
    )
    assert status_breakdown(state) == [("public beta", 2), ("now live", 1)]


def test_merge_engine_follows_configured_classifier(repository, make_candidate, fixed_now) -> None:
    rules = ClassifierRules(
        status_rules=(KeywordRule(label="alpha", keywords=("Alpha",)),),
        fallback_status="noted",
        placeholder_category="General",
    )
    repository.save_global_config(GlobalConfig(classifier=rules))
    stored = make_candidate(status="alpha", source="feed")
    rescanned = make_candidate(status="noted", categories=("General",), source="page")
    orchestrator = Orchestrator(repository, clock=lambda: fixed_now)
    state = StoreState()

    assert orchestrator.merge_engine.fallback_status == "noted"
    assert orchestrator.merge_engine.placeholder_category == "General"
    orchestrator.merge_engine.merge(state, [stored], fixed_now)
    changes = orchestrator.merge_engine.merge(state, [rescanned], fixed_now + timedelta(hours=1))
    assert changes.status_changed == []
    assert state.items[stored.id].status == "alpha"
