"""Adapter for listing pages that need a real browser to render."""

from __future__ import annotations

from typing import Callable

import structlog

from ...config import BrowserConfig, SourceConfig
from ..fetcher import BrowserSession
from ..parser import Parser, RawEntry
from .base import CandidateBuilder, SourceAdapter

SessionFactory = Callable[[], BrowserSession]


class BrowserAdapter(SourceAdapter):
    """Load a listing page, follow matching document links, split each document.

    At most ``max_documents`` links are visited in first-seen order. A failure
    on one document skips only that document; the browser session is
    released when collection ends, however it ends.
    """

    def __init__(
        self,
        source: SourceConfig,
        builder: CandidateBuilder,
        session_factory: SessionFactory | None = None,
        parser: Parser | None = None,
        browser_config: BrowserConfig | None = None,
        user_agent: str | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        super().__init__(source, builder, parser, logger)
        self.session_factory = session_factory or (
            lambda: BrowserSession(browser_config, user_agent=user_agent, logger=self.logger)
        )

    def _collect(self) -> list[RawEntry]:
        entries: list[RawEntry] = []
        with self.session_factory() as session:
            listing = session.load(self.source.url)
            links = self.parser.find_links(
                listing.text,
                self.source.base_url or listing.url,
                self.source.link_pattern or "",
            )
            selected = links[: self.source.max_documents]
            self.logger.info("documents_selected", found=len(links), selected=len(selected))
            for url in selected:
                try:
                    document = session.load(url)
                except Exception as exc:  # noqa: BLE001
                    self.logger.warning("document_failed", url=url, error=str(exc))
                    continue
                entries.extend(self._split_document(document.text, document.url))
        return entries


__all__ = ["BrowserAdapter", "SessionFactory"]
