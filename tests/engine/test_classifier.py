from __future__ import annotations

from release_tracker.config import ClassifierRules, KeywordRule
from release_tracker.engine import Classifier


def test_specific_status_beats_generic_update(classifier: Classifier) -> None:
    result = classifier.classify("Sequences update", "The new editor is now in public beta.")
    assert result.status == "public beta"


def test_status_rules_follow_configured_order(classifier: Classifier) -> None:
    assert classifier.detect_status("private beta that is now live") == "private beta"
    assert classifier.detect_status("the legacy api will be deprecated") == "sunset"
    assert classifier.detect_status("General Availability of the new inbox") == "now live"


def test_status_falls_back_when_nothing_matches(classifier: Classifier) -> None:
    assert classifier.detect_status("Quarterly keynote recording") == "update"


def test_categories_collect_every_match(classifier: Classifier) -> None:
    categories = classifier.detect_categories("Sync tickets into deals from the help desk")
    assert "Sales Hub" in categories
    assert "Service Hub" in categories
    assert "Platform" not in categories


def test_placeholder_category_when_nothing_matches(classifier: Classifier) -> None:
    assert classifier.detect_categories("Quarterly keynote recording") == ("Platform",)


def test_classification_is_deterministic(classifier: Classifier) -> None:
    first = classifier.classify("Custom Objects Now Support Pipelines", "Rolling out to all portals.")
    second = classifier.classify("Custom Objects Now Support Pipelines", "Rolling out to all portals.")
    assert first == second


def test_custom_rules_are_used() -> None:
    rules = ClassifierRules(
        status_rules=(KeywordRule(label="alpha", keywords=("Alpha",)),),
        fallback_status="noted",
        category_rules=(KeywordRule(label="Billing", keywords=("invoice",)),),
        placeholder_category="General",
    )
    classifier = Classifier(rules)
    result = classifier.classify("Invoice Designer Alpha")
    assert result.status == "alpha"
    assert result.categories == ("Billing",)
    assert classifier.classify("Something else entirely").status == "noted"
    assert classifier.classify("Something else entirely").categories == ("General",)
