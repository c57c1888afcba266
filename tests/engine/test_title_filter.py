from __future__ import annotations

import pytest

from release_tracker.config import TitleFilterRules
from release_tracker.engine import TitleFilter, TitleVerdict


@pytest.mark.parametrize(
    ("title", "verdict"),
    [
        ("Questions or comments? Reach out to us", TitleVerdict.NOISE),
        ("What's changing for your account", TitleVerdict.NOISE),
        ("3. Connect your Workflows to Slack", TitleVerdict.NOISE),
        ("Top Product Updates for March 2025", TitleVerdict.ROLLUP),
        ("March 2025 Release Notes", TitleVerdict.ROLLUP),
        ("October, 2024 Product Updates", TitleVerdict.ROLLUP),
        ("Monthly Product Roundup for admins", TitleVerdict.ROLLUP),
        ("The March 2025 Industry Edit", TitleVerdict.INFORMATIONAL),
        ("New apps in the App Marketplace this week", TitleVerdict.INFORMATIONAL),
        ("Celebrating 250,000 customers worldwide", TitleVerdict.INFORMATIONAL),
        ("Short Title", TitleVerdict.MALFORMED),
        ("all lower case title without capitals", TitleVerdict.MALFORMED),
        ("Custom Objects Now Support Pipelines", TitleVerdict.VALID),
    ],
)
def test_classify_titles(title_filter: TitleFilter, title: str, verdict: TitleVerdict) -> None:
    assert title_filter.classify(title) is verdict


def test_pattern_classes_take_precedence_over_length(title_filter: TitleFilter) -> None:
    long_noise = "What's new " + "in the Workflows editor " * 12
    assert len(long_noise) > 200
    assert title_filter.classify(long_noise) is TitleVerdict.NOISE


def test_length_bounds_are_inclusive() -> None:
    title_filter = TitleFilter(TitleFilterRules(min_length=15, max_length=20))
    assert title_filter.accepts("A" * 15)
    assert title_filter.accepts("A" * 20)
    assert not title_filter.accepts("A" * 14)
    assert not title_filter.accepts("A" * 21)


def test_accepts_handles_missing_titles(title_filter: TitleFilter) -> None:
    assert not title_filter.accepts(None)
    assert not title_filter.accepts("   ")


def test_is_rollup_only_matches_rollup_class(title_filter: TitleFilter) -> None:
    assert title_filter.is_rollup("Top Updates for January 2025")
    assert not title_filter.is_rollup("What's new in January 2025")
    assert not title_filter.is_rollup("Custom Objects Now Support Pipelines")


def test_matching_is_case_insensitive(title_filter: TitleFilter) -> None:
    assert title_filter.classify("TOP PRODUCT UPDATES FOR MAY 2024") is TitleVerdict.ROLLUP
