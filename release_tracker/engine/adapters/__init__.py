"""Source adapters and the factory building them from configuration."""

from __future__ import annotations

import structlog

from ...config import GlobalConfig, SourceConfig, SourceKind
from ..fetcher import Fetcher
from ..parser import Parser
from .base import CandidateBuilder, SourceAdapter
from .browser import BrowserAdapter, SessionFactory
from .document import DocumentAdapter
from .feed import FeedAdapter


def build_adapter(
    source: SourceConfig,
    builder: CandidateBuilder,
    fetcher: Fetcher,
    global_config: GlobalConfig | None = None,
    parser: Parser | None = None,
    session_factory: SessionFactory | None = None,
    logger: structlog.BoundLogger | None = None,
) -> SourceAdapter:
    """Return the adapter matching ``source.kind``."""

    parser = parser or Parser()
    if source.kind is SourceKind.FEED:
        return FeedAdapter(source, builder, fetcher, parser=parser, logger=logger)
    if source.kind is SourceKind.DOCUMENT:
        return DocumentAdapter(source, builder, fetcher, parser=parser, logger=logger)
    if source.kind is SourceKind.BROWSER:
        global_config = global_config or GlobalConfig()
        return BrowserAdapter(
            source,
            builder,
            session_factory=session_factory,
            parser=parser,
            browser_config=global_config.browser,
            user_agent=global_config.fetch.user_agent,
            logger=logger,
        )
    raise ValueError(f"Unsupported source kind: {source.kind}")


__all__ = [
    "BrowserAdapter",
    "CandidateBuilder",
    "DocumentAdapter",
    "FeedAdapter",
    "SessionFactory",
    "SourceAdapter",
    "build_adapter",
]
