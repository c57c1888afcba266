"""Ordered noise / rollup / informational title filtering."""

from __future__ import annotations

import re
from enum import Enum

from ..config import TitleFilterRules

_UPPERCASE = re.compile(r"[A-Z]")


class TitleVerdict(str, Enum):
    VALID = "valid"
    NOISE = "noise"
    ROLLUP = "rollup"
    INFORMATIONAL = "informational"
    MALFORMED = "malformed"


class TitleFilter:
    """Decide whether a raw title names a concrete feature.

    Pattern classes are checked in order: noise, rollup, informational.
    A title passing all three still needs a length within the configured
    bounds and at least one upper-case letter.
    """

    def __init__(self, rules: TitleFilterRules | None = None) -> None:
        self.rules = rules or TitleFilterRules()
        self._classes: tuple[tuple[TitleVerdict, tuple[re.Pattern[str], ...]], ...] = (
            (TitleVerdict.NOISE, self._compile(self.rules.noise_patterns)),
            (TitleVerdict.ROLLUP, self._compile(self.rules.rollup_patterns)),
            (TitleVerdict.INFORMATIONAL, self._compile(self.rules.informational_patterns)),
        )

    @staticmethod
    def _compile(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)

    def classify(self, title: str | None) -> TitleVerdict:
        text = (title or "").strip()
        for verdict, patterns in self._classes:
            if any(pattern.search(text) for pattern in patterns):
                return verdict
        if not self.rules.min_length <= len(text) <= self.rules.max_length:
            return TitleVerdict.MALFORMED
        if not _UPPERCASE.search(text):
            return TitleVerdict.MALFORMED
        return TitleVerdict.VALID

    def accepts(self, title: str | None) -> bool:
        return self.classify(title) is TitleVerdict.VALID

    def is_rollup(self, title: str | None) -> bool:
        text = (title or "").strip()
        _, rollups = self._classes[1]
        return any(pattern.search(text) for pattern in rollups)


__all__ = ["TitleFilter", "TitleVerdict"]
