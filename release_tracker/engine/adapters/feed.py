"""RSS / Atom feed adapter."""

from __future__ import annotations

import structlog

from ...config import SourceConfig
from ..fetcher import Fetcher
from ..parser import Parser, RawEntry
from .base import CandidateBuilder, SourceAdapter


class FeedAdapter(SourceAdapter):
    def __init__(
        self,
        source: SourceConfig,
        builder: CandidateBuilder,
        fetcher: Fetcher,
        parser: Parser | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        super().__init__(source, builder, parser, logger)
        self.fetcher = fetcher

    def _collect(self) -> list[RawEntry]:
        response = self.fetcher.fetch(self.source.url)
        if response is None:
            return []
        entries = self.parser.parse_feed(response.text)
        if not entries:
            self.logger.warning("feed_empty", url=self.source.url)
        return entries


__all__ = ["FeedAdapter"]
