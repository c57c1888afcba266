from __future__ import annotations

from release_tracker.engine import deduplicate, identity_key
from release_tracker.engine.dedup import IDENTITY_KEY_LENGTH


def test_identity_key_normalises_titles() -> None:
    assert identity_key("New Sequence Automation (Beta)!") == "new-sequence-automation-beta"
    assert identity_key("  --Custom   Objects--  ") == "custom-objects"


def test_identity_key_is_truncated() -> None:
    key = identity_key("Workflow " * 30)
    assert len(key) == IDENTITY_KEY_LENGTH


def test_identity_key_matches_across_punctuation_variants() -> None:
    assert identity_key("Custom Objects: Now Live") == identity_key("custom objects now live")


def test_longest_description_wins(make_candidate) -> None:
    short = make_candidate(description="x" * 40, source="feed")
    long = make_candidate(description="y" * 120, source="page")
    result = deduplicate([short, long])
    assert len(result) == 1
    assert result[0].description == "y" * 120
    assert result[0].source == "page"


def test_ties_keep_first_candidate(make_candidate) -> None:
    first = make_candidate(description="same", source="first")
    second = make_candidate(description="same", source="second")
    assert deduplicate([first, second])[0].source == "first"


def test_order_follows_first_appearance(make_candidate) -> None:
    a = make_candidate("Custom Objects Now Support Pipelines")
    b = make_candidate("Breeze Copilot Public Beta Expands")
    a_longer = make_candidate("Custom Objects Now Support Pipelines", description="A much longer body.")
    result = deduplicate([a, b, a_longer])
    assert [item.id for item in result] == [a.id, b.id]
    assert result[0].description == "A much longer body."


def test_deduplicate_is_idempotent(make_candidate) -> None:
    batch = [
        make_candidate("Custom Objects Now Support Pipelines", description="short"),
        make_candidate("Breeze Copilot Public Beta Expands"),
        make_candidate("Custom Objects Now Support Pipelines", description="much longer text"),
    ]
    once = deduplicate(batch)
    assert deduplicate(once) == once
