"""Records flowing through a scan and the persisted item state."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime

from pydantic import BaseModel, Field


@dataclass(slots=True)
class CandidateRecord:
    """One extracted, filtered and classified announcement from a single scan."""

    id: str
    title: str
    description: str
    status: str
    categories: tuple[str, ...]
    source: str
    source_url: str
    pub_date: str | None = None
    author: str | None = None

    def to_dict(self) -> dict:
        payload = asdict(self)
        payload["categories"] = list(self.categories)
        return payload


@dataclass(slots=True)
class StatusTransition:
    """A tracked item whose status moved to a new, non-fallback status."""

    candidate: CandidateRecord
    previous_status: str

    def to_dict(self) -> dict:
        payload = self.candidate.to_dict()
        payload["previous_status"] = self.previous_status
        return payload


@dataclass(slots=True)
class ChangeSet:
    """New items, status transitions and description upgrades from one merge."""

    new: list[CandidateRecord] = field(default_factory=list)
    status_changed: list[StatusTransition] = field(default_factory=list)
    updated: list[CandidateRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.new or self.status_changed or self.updated)

    def counts(self) -> dict[str, int]:
        return {
            "new": len(self.new),
            "status_changed": len(self.status_changed),
            "updated": len(self.updated),
        }

    def to_dict(self) -> dict:
        return {
            "new": [item.to_dict() for item in self.new],
            "status_changed": [item.to_dict() for item in self.status_changed],
            "updated": [item.to_dict() for item in self.updated],
        }


class StatusEntry(BaseModel):
    """One append-only entry of an item's status history."""

    status: str
    timestamp: datetime
    source: str
    previous_status: str | None = None


class TrackedItem(BaseModel):
    """Persistent lifecycle record of one identity key."""

    id: str
    title: str
    description: str = ""
    status: str
    categories: list[str] = Field(default_factory=list)
    source: str
    source_url: str
    pub_date: str | None = None
    author: str | None = None
    first_seen: datetime
    last_seen: datetime
    status_history: list[StatusEntry] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)


class StoreState(BaseModel):
    """Everything the item store persists between scans."""

    items: dict[str, TrackedItem] = Field(default_factory=dict)
    last_scan: datetime | None = None
    scan_count: int = 0


__all__ = [
    "CandidateRecord",
    "ChangeSet",
    "StatusEntry",
    "StatusTransition",
    "StoreState",
    "TrackedItem",
]
