"""Keyword classification of lifecycle status and product categories."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import ClassifierRules


@dataclass(frozen=True, slots=True)
class Classification:
    status: str
    categories: tuple[str, ...]


class Classifier:
    """Assign a status and categories from title + description text.

    Status rules are tried in their configured order and the first match
    wins, so "public beta" is never shadowed by a generic "update" mention.
    Category rules are all tried; an item may carry several. Both results
    depend only on the text and the rules given at construction.
    """

    def __init__(self, rules: ClassifierRules | None = None) -> None:
        self.rules = rules or ClassifierRules()

    @property
    def fallback_status(self) -> str:
        return self.rules.fallback_status

    @property
    def placeholder_category(self) -> str:
        return self.rules.placeholder_category

    def detect_status(self, text: str) -> str:
        lower = text.lower()
        for rule in self.rules.status_rules:
            if rule.matches(lower):
                return rule.label
        return self.rules.fallback_status

    def detect_categories(self, text: str) -> tuple[str, ...]:
        lower = text.lower()
        categories = tuple(rule.label for rule in self.rules.category_rules if rule.matches(lower))
        return categories or (self.rules.placeholder_category,)

    def classify(self, title: str, description: str = "") -> Classification:
        combined = f"{title} {description}"
        return Classification(
            status=self.detect_status(combined),
            categories=self.detect_categories(combined),
        )


__all__ = ["Classification", "Classifier"]
