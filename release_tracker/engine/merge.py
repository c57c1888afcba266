"""Reconcile a deduplicated scan batch against the persisted item state."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

import structlog

from .records import (
    CandidateRecord,
    ChangeSet,
    StatusEntry,
    StatusTransition,
    StoreState,
    TrackedItem,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MergeEngine:
    """Apply candidates to a ``StoreState`` in place and report what changed.

    Per identity:

    * unknown identity: a new tracked item with a one-entry history;
    * known identity, same status or the fallback status: only ``last_seen``,
      sources and categories are touched;
    * known identity, different non-fallback status: a history entry recording
      the previous status is appended.

    Independently, a strictly longer description replaces the stored one.
    """

    def __init__(
        self,
        fallback_status: str = "update",
        placeholder_category: str = "Platform",
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.fallback_status = fallback_status
        self.placeholder_category = placeholder_category
        self.logger = logger or structlog.get_logger("release_tracker.merge")

    def merge(
        self,
        state: StoreState,
        candidates: Iterable[CandidateRecord],
        now: datetime | None = None,
    ) -> ChangeSet:
        now = now or utcnow()
        changes = ChangeSet()
        for candidate in candidates:
            existing = state.items.get(candidate.id)
            if existing is None:
                state.items[candidate.id] = self._track(candidate, now)
                changes.new.append(candidate)
                continue

            existing.last_seen = max(now, existing.last_seen)
            existing.categories = self._merge_categories(existing.categories, candidate.categories)
            if candidate.source not in existing.sources:
                existing.sources.append(candidate.source)

            if candidate.status != existing.status and candidate.status != self.fallback_status:
                previous = existing.status
                existing.status = candidate.status
                existing.status_history.append(
                    StatusEntry(
                        status=candidate.status,
                        timestamp=self._history_timestamp(existing, now),
                        source=candidate.source,
                        previous_status=previous,
                    )
                )
                changes.status_changed.append(StatusTransition(candidate, previous))
                self.logger.info(
                    "status_changed",
                    item=candidate.id,
                    previous_status=previous,
                    status=candidate.status,
                    source=candidate.source,
                )

            if len(candidate.description) > len(existing.description):
                existing.description = candidate.description
                changes.updated.append(candidate)
        return changes

    def complete_scan(self, state: StoreState, now: datetime | None = None) -> None:
        state.scan_count += 1
        state.last_scan = now or utcnow()

    # ------------------------------------------------------------------
    def _track(self, candidate: CandidateRecord, now: datetime) -> TrackedItem:
        return TrackedItem(
            id=candidate.id,
            title=candidate.title,
            description=candidate.description,
            status=candidate.status,
            categories=self._merge_categories([], candidate.categories),
            source=candidate.source,
            source_url=candidate.source_url,
            pub_date=candidate.pub_date,
            author=candidate.author,
            first_seen=now,
            last_seen=now,
            status_history=[StatusEntry(status=candidate.status, timestamp=now, source=candidate.source)],
            sources=[candidate.source],
        )

    def _merge_categories(self, stored: list[str], detected: Iterable[str]) -> list[str]:
        merged = list(stored)
        for category in detected:
            if category not in merged:
                merged.append(category)
        real = [category for category in merged if category != self.placeholder_category]
        if real:
            return real
        return [self.placeholder_category]

    @staticmethod
    def _history_timestamp(item: TrackedItem, now: datetime) -> datetime:
        # History timestamps never go backwards, even if the clock does.
        if item.status_history and item.status_history[-1].timestamp > now:
            return item.status_history[-1].timestamp
        return now


__all__ = ["MergeEngine", "utcnow"]
