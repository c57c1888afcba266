"""Adapter capability interface and the shared candidate builder."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

import structlog

from ...config import SourceConfig
from ..classifier import Classifier
from ..dedup import identity_key
from ..parser import Parser, RawEntry, collapse_whitespace
from ..records import CandidateRecord
from ..title_filter import TitleFilter, TitleVerdict


class CandidateBuilder:
    """Filter, classify and normalise raw entries into candidate records."""

    def __init__(
        self,
        title_filter: TitleFilter,
        classifier: Classifier,
        description_limit: int = 500,
    ) -> None:
        self.title_filter = title_filter
        self.classifier = classifier
        self.description_limit = description_limit

    def build(
        self,
        entry: RawEntry,
        source: str,
        logger: structlog.BoundLogger | None = None,
    ) -> CandidateRecord | None:
        title = collapse_whitespace(entry.title)
        verdict = self.title_filter.classify(title)
        if verdict is not TitleVerdict.VALID:
            if logger is not None:
                logger.debug("title_rejected", title=title, verdict=verdict.value)
            return None

        description = collapse_whitespace(entry.description)[: self.description_limit]
        classification = self.classifier.classify(title, description)
        return CandidateRecord(
            id=identity_key(title),
            title=title,
            description=description,
            status=classification.status,
            categories=classification.categories,
            source=source,
            source_url=entry.url,
            pub_date=entry.pub_date,
            author=entry.author,
        )

    def build_all(
        self,
        entries: Iterable[RawEntry],
        source: str,
        logger: structlog.BoundLogger | None = None,
    ) -> list[CandidateRecord]:
        candidates: list[CandidateRecord] = []
        for entry in entries:
            candidate = self.build(entry, source, logger)
            if candidate is not None:
                candidates.append(candidate)
        return candidates


class SourceAdapter(ABC):
    """One configured source able to produce candidate records.

    Subclasses only implement ``_collect``; filtering and classification are
    shared through the ``CandidateBuilder``. Exceptions propagate to the
    caller, which isolates each adapter.

    Rollup documents (titles such as "March 2025 Product Updates") are split
    into their sub-items by ``_split_document``; the rollup title itself never
    becomes a candidate.
    """

    def __init__(
        self,
        source: SourceConfig,
        builder: CandidateBuilder,
        parser: Parser | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.source = source
        self.builder = builder
        self.parser = parser or Parser()
        self.logger = logger or structlog.get_logger("release_tracker.adapter").bind(source=source.name)

    @property
    def name(self) -> str:
        return self.source.name

    def fetch_candidates(self) -> list[CandidateRecord]:
        entries = self._collect()
        candidates = self.builder.build_all(entries, self.source.name, self.logger)
        self.logger.info(
            "adapter_collected",
            entries=len(entries),
            candidates=len(candidates),
        )
        return candidates

    def _split_document(self, html: str, url: str) -> list[RawEntry]:
        entries = self.parser.extract_sections(html, url)
        title = self.parser.document_title(html)
        if self.builder.title_filter.is_rollup(title):
            expanded = not (len(entries) == 1 and entries[0].title == title)
            self.logger.info(
                "rollup_expanded" if expanded else "rollup_unexpanded",
                url=url,
                title=title,
                sections=len(entries) if expanded else 0,
            )
        return entries

    @abstractmethod
    def _collect(self) -> list[RawEntry]:
        """Return raw title/description entries from the source."""


__all__ = ["CandidateBuilder", "SourceAdapter"]
