"""Scan orchestrator wiring together adapters, dedup, merge and persistence."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

import structlog

from .config import ConfigRepository, GlobalConfig, SourceConfig
from .engine import (
    AdapterOutcome,
    AdapterPool,
    CandidateBuilder,
    ChangeSet,
    Classifier,
    Fetcher,
    MergeEngine,
    Parser,
    SourceAdapter,
    StoreState,
    TitleFilter,
    build_adapter,
    deduplicate,
)
from .engine.merge import utcnow
from .infra import HistoryLog, ItemStore
from .logging_conf import configure_logging, source_logger

AdapterFactory = Callable[[SourceConfig, Fetcher], SourceAdapter]


def status_breakdown(state: StoreState) -> list[tuple[str, int]]:
    """Tracked item counts per status, largest first."""

    counts = Counter(item.status for item in state.items.values())
    return sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))


@dataclass(slots=True)
class ScanReport:
    """Outcome of one scan, as returned to callers and logged to history."""

    changes: ChangeSet
    items_found: int
    empty_sources: list[str] = field(default_factory=list)
    failed_sources: list[str] = field(default_factory=list)
    scan_count: int = 0
    total_tracked: int = 0
    timestamp: datetime | None = None
    by_status: list[tuple[str, int]] = field(default_factory=list)

    def snapshot(self) -> dict:
        """Payload appended to the history log."""

        return {
            "changes": self.changes.to_dict(),
            "items_found": self.items_found,
            "empty_sources": list(self.empty_sources),
            "failed_sources": list(self.failed_sources),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }

    def to_dict(self) -> dict:
        return {
            "generated": self.timestamp.isoformat() if self.timestamp else None,
            "total_tracked": self.total_tracked,
            "scan_count": self.scan_count,
            "items_found": self.items_found,
            "changes": self.changes.to_dict(),
            "summary": {
                **self.changes.counts(),
                "by_status": [[status, count] for status, count in self.by_status],
            },
            "empty_sources": list(self.empty_sources),
            "failed_sources": list(self.failed_sources),
        }


class Orchestrator:
    """Central coordinator running scans against the configured sources."""

    def __init__(
        self,
        config_repository: ConfigRepository,
        store: ItemStore | None = None,
        history: HistoryLog | None = None,
        adapter_factory: AdapterFactory | None = None,
        pool: AdapterPool | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.config_repository = config_repository
        self.global_config: GlobalConfig = config_repository.load_global_config()
        root = config_repository.locator.project_root
        self.store = store or ItemStore(self.global_config.resolved_state_path(root))
        self.history = history or HistoryLog(self.global_config.resolved_history_dir(root))
        self.logger = configure_logging().bind(component="orchestrator")
        self.pool = pool or AdapterPool(self.global_config.adapter_workers, logger=self.logger)
        self.clock = clock
        self.parser = Parser()
        classifier = Classifier(self.global_config.classifier)
        self.builder = CandidateBuilder(
            TitleFilter(self.global_config.title_filter),
            classifier,
            description_limit=self.global_config.description_limit,
        )
        self.merge_engine = MergeEngine(
            fallback_status=classifier.fallback_status,
            placeholder_category=classifier.placeholder_category,
            logger=self.logger,
        )
        self.adapter_factory = adapter_factory or self._default_adapter

    # ------------------------------------------------------------------
    def current_state(self) -> StoreState:
        return self.store.load()

    def enabled_sources(self) -> list[SourceConfig]:
        return [source for source in self.config_repository.list_sources() if source.enabled]

    def run_scan(self) -> ScanReport:
        """Run every enabled source once and persist the merged result.

        Source failures only shrink the batch. Store and history write
        failures propagate as ``StorePersistenceError``.
        """

        state = self.store.load()
        sources = self.enabled_sources()
        self.logger.info("scan_started", sources=[source.name for source in sources])

        with Fetcher(self.global_config.fetch, logger=self.logger) as fetcher:
            adapters = [self.adapter_factory(source, fetcher) for source in sources]
            outcomes = self.pool.run(adapters)

        candidates = [candidate for outcome in outcomes for candidate in outcome.candidates]
        unique = deduplicate(candidates)
        now = self.clock()
        changes = self.merge_engine.merge(state, unique, now)
        self.merge_engine.complete_scan(state, now)
        self.store.save(state)

        report = ScanReport(
            changes=changes,
            items_found=len(unique),
            empty_sources=self._empty_sources(outcomes),
            failed_sources=[outcome.source for outcome in outcomes if outcome.failed],
            scan_count=state.scan_count,
            total_tracked=len(state.items),
            timestamp=now,
            by_status=status_breakdown(state),
        )
        self.history.append(report.snapshot(), now)
        self.logger.info(
            "scan_completed",
            items_found=report.items_found,
            total_tracked=report.total_tracked,
            scan_count=report.scan_count,
            empty_sources=report.empty_sources,
            failed_sources=report.failed_sources,
            **changes.counts(),
        )
        return report

    # ------------------------------------------------------------------
    def _default_adapter(self, source: SourceConfig, fetcher: Fetcher) -> SourceAdapter:
        return build_adapter(
            source,
            self.builder,
            fetcher,
            global_config=self.global_config,
            parser=self.parser,
            logger=source_logger(source.name),
        )

    @staticmethod
    def _empty_sources(outcomes: Iterable[AdapterOutcome]) -> list[str]:
        return [outcome.source for outcome in outcomes if outcome.empty and not outcome.failed]


__all__ = ["AdapterFactory", "Orchestrator", "ScanReport", "status_breakdown"]
