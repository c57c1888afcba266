"""Concurrent adapter fan-out with per-adapter failure isolation."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Iterable

import structlog

from .adapters import SourceAdapter
from .records import CandidateRecord


@dataclass(slots=True)
class AdapterOutcome:
    """What one adapter produced during a scan."""

    source: str
    candidates: list[CandidateRecord] = field(default_factory=list)
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def empty(self) -> bool:
        return not self.candidates


class AdapterPool:
    """Run every adapter on a thread pool and wait for all of them.

    Outcomes are returned in adapter order once every future has settled.
    An adapter raising is recorded as a failed outcome; its siblings keep
    running.
    """

    def __init__(
        self,
        max_workers: int = 4,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.max_workers = max_workers
        self.logger = logger or structlog.get_logger("release_tracker.pool")

    def run(self, adapters: Iterable[SourceAdapter]) -> list[AdapterOutcome]:
        adapters = list(adapters)
        if not adapters:
            return []
        workers = min(self.max_workers, len(adapters))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="adapter") as executor:
            futures: list[tuple[SourceAdapter, Future]] = [
                (adapter, executor.submit(adapter.fetch_candidates)) for adapter in adapters
            ]
            wait([future for _, future in futures])
        return [self._outcome(adapter, future) for adapter, future in futures]

    def _outcome(self, adapter: SourceAdapter, future: Future) -> AdapterOutcome:
        exc = future.exception()
        if exc is not None:
            self.logger.error(
                "adapter_failed",
                source=adapter.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            return AdapterOutcome(source=adapter.name, error=f"{type(exc).__name__}: {exc}")
        return AdapterOutcome(source=adapter.name, candidates=list(future.result()))


__all__ = ["AdapterOutcome", "AdapterPool"]
