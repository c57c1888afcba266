"""Scan pipeline: fetching, parsing, filtering, classification, dedup, merge."""

from .adapters import (
    BrowserAdapter,
    CandidateBuilder,
    DocumentAdapter,
    FeedAdapter,
    SourceAdapter,
    build_adapter,
)
from .classifier import Classification, Classifier
from .dedup import deduplicate, identity_key
from .fetcher import BrowserSession, FetchResponse, Fetcher
from .merge import MergeEngine
from .parser import Parser, RawEntry
from .records import (
    CandidateRecord,
    ChangeSet,
    StatusEntry,
    StatusTransition,
    StoreState,
    TrackedItem,
)
from .thread_pool import AdapterOutcome, AdapterPool
from .title_filter import TitleFilter, TitleVerdict

__all__ = [
    "AdapterOutcome",
    "AdapterPool",
    "BrowserAdapter",
    "BrowserSession",
    "CandidateBuilder",
    "CandidateRecord",
    "ChangeSet",
    "Classification",
    "Classifier",
    "DocumentAdapter",
    "FeedAdapter",
    "FetchResponse",
    "Fetcher",
    "MergeEngine",
    "Parser",
    "RawEntry",
    "SourceAdapter",
    "StatusEntry",
    "StatusTransition",
    "StoreState",
    "TitleFilter",
    "TitleVerdict",
    "TrackedItem",
    "build_adapter",
    "deduplicate",
    "identity_key",
]
