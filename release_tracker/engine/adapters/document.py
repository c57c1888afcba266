"""Static HTML page adapter with heading, link and section layouts."""

from __future__ import annotations

import structlog

from ...config import DocumentLayout, SourceConfig
from ..fetcher import Fetcher
from ..parser import Parser, RawEntry
from .base import CandidateBuilder, SourceAdapter


class DocumentAdapter(SourceAdapter):
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
        base_url = self.source.base_url or response.url
        layout = self.source.layout
        if layout is DocumentLayout.LINKS:
            return self.parser.parse_links(response.text, base_url, self.source.link_selector or "a")
        if layout is DocumentLayout.SECTIONS:
            return self._split_document(response.text, response.url)
        return self.parser.parse_headings(response.text, base_url, self.source.heading_selector)


__all__ = ["DocumentAdapter"]
