"""Identity keys and per-scan candidate deduplication."""

from __future__ import annotations

import re
from typing import Iterable

from .records import CandidateRecord

IDENTITY_KEY_LENGTH = 80

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def identity_key(title: str) -> str:
    """Derive the stable identity key of an item from its title."""

    slug = _NON_ALNUM.sub("-", title.lower()).strip("-")
    return slug[:IDENTITY_KEY_LENGTH]


def deduplicate(candidates: Iterable[CandidateRecord]) -> list[CandidateRecord]:
    """Keep one candidate per identity key: the one with the longest description.

    Ties keep the first candidate seen. The result is ordered by the first
    appearance of each identity, so the reduction is stable and idempotent.
    """

    chosen: dict[str, CandidateRecord] = {}
    for candidate in candidates:
        current = chosen.get(candidate.id)
        if current is None or len(candidate.description) > len(current.description):
            chosen[candidate.id] = candidate
    return list(chosen.values())


__all__ = ["IDENTITY_KEY_LENGTH", "deduplicate", "identity_key"]
