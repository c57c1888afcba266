"""Pydantic models used across the release tracker configuration flow."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_MONTHS = "(?:january|february|march|april|may|june|july|august|september|october|november|december)"


class SourceKind(str, Enum):
    """How a source is retrieved and parsed."""

    FEED = "feed"
    DOCUMENT = "document"
    BROWSER = "browser"


class DocumentLayout(str, Enum):
    """Extraction layouts supported by document sources."""

    HEADINGS = "headings"
    LINKS = "links"
    SECTIONS = "sections"


class ScheduleType(str, Enum):
    """Scheduler modes for recurring scans."""

    CRON = "cron"
    INTERVAL = "interval"
    ONCE = "once"


class ScheduleConfig(BaseModel):
    """Configuration describing when scans should run."""

    type: ScheduleType = Field(default=ScheduleType.CRON)
    value: Any = Field(
        default="0 */6 * * *",
        description="Cron expression, interval seconds or ISO datetime, depending on type.",
    )

    @model_validator(mode="after")
    def _validate_value(self) -> "ScheduleConfig":
        if self.type is ScheduleType.CRON and not isinstance(self.value, str):
            raise ValueError("Cron schedule requires string expression")
        if self.type is ScheduleType.INTERVAL and not isinstance(self.value, (int, float, dict)):
            raise ValueError("Interval schedule requires seconds (int/float) or kwargs dict")
        if (
            self.type is ScheduleType.ONCE
            and self.value is not None
            and not isinstance(self.value, str)
        ):
            raise ValueError("Once schedule expects ISO datetime string or null")
        return self


class KeywordRule(BaseModel):
    """A label and the lower-case substrings that select it."""

    model_config = ConfigDict(frozen=True)

    label: str
    keywords: tuple[str, ...]

    @field_validator("keywords", mode="before")
    @classmethod
    def _lower_keywords(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str):
            value = [value]
        keywords = tuple(str(keyword).lower() for keyword in value if str(keyword).strip())
        if not keywords:
            raise ValueError("A rule needs at least one keyword")
        return keywords

    def matches(self, text: str) -> bool:
        """Return True when any keyword occurs in already lower-cased text."""

        return any(keyword in text for keyword in self.keywords)


def _rules(table: list[tuple[str, list[str]]]) -> tuple[KeywordRule, ...]:
    return tuple(KeywordRule(label=label, keywords=keywords) for label, keywords in table)


# Most specific first; evaluation stops at the first match.
DEFAULT_STATUS_RULES = _rules(
    [
        ("public beta", ["public beta"]),
        ("private beta", ["private beta"]),
        ("developer preview", ["developer preview"]),
        ("early access", ["early access"]),
        (
            "now live",
            [
                "now live",
                "general availability",
                "ga release",
                "now available",
                "is live",
                "goes live",
                "gone live",
                "launched",
            ],
        ),
        ("sunset", ["sunset", "deprecat", "end of life", "eol"]),
        ("breaking change", ["breaking change"]),
        ("live", ["live", "available now", "rolling out", "released"]),
        (
            "update",
            [
                "update",
                "improvement",
                "enhanced",
                "new feature",
                "added",
                "improved",
                "redesigned",
                "upgraded",
            ],
        ),
    ]
)

DEFAULT_CATEGORY_RULES = _rules(
    [
        (
            "Marketing Hub",
            [
                "marketing", "email", "forms", "landing pages", "campaigns", "seo", "social",
                "ads", "blog", "ctas", "lead scoring", "lists", "nurture", "a/b test",
            ],
        ),
        (
            "Sales Hub",
            [
                "deals", "pipeline", "sequences", "quotes", "forecasting", "playbooks", "sales",
                "prospecting", "meetings", "calling", "tasks",
            ],
        ),
        (
            "Service Hub",
            [
                "tickets", "conversations", "knowledge base", "customer portal", "feedback",
                "service", "help desk", "sla",
            ],
        ),
        (
            "CMS Hub",
            [
                "cms", "pages", "themes", "templates", "drag-and-drop", "hubdb", "modules",
                "website", "blog",
            ],
        ),
        (
            "Operations Hub",
            [
                "workflows", "data sync", "data quality", "datasets", "custom code",
                "operations", "programmable automation",
            ],
        ),
        (
            "Commerce Hub",
            [
                "payments", "quotes", "invoices", "subscriptions", "commerce", "orders",
                "carts", "checkout",
            ],
        ),
        (
            "Developer Platform",
            [
                "api", "sdk", "cli", "oauth", "apps", "extensions", "sandbox", "marketplace",
                "developer", "webhook", "serverless", "hubl",
            ],
        ),
        ("Breeze AI", ["breeze", "ai", "copilot", "assistant", "agent", "intelligence"]),
    ]
)

DEFAULT_NOISE_PATTERNS: tuple[str, ...] = (
    r"^questions or comments",
    r"^what'?s changing",
    r"^when is it happening",
    r"^for \w+",
    r"^ready to transform",
    r"^app theme #?\d",
    r"^key considerations",
    r"^starting \w+ \d",
    r"^all \w+ release notes",
    r"^over the last month",
    r"^this month'?s updates focus",
    r"^node\.?js requirements$",
    r"^deprecated commands removed$",
    r"^additional breaking changes$",
    r"^bug fixes and improvements$",
    r"^ci/cd considerations$",
    r"^sunset notice for",
    r"^what'?s new",
    r"^\d+\.\s",
)

DEFAULT_ROLLUP_PATTERNS: tuple[str, ...] = (
    rf"^top (?:product )?updates (?:for|from) {_MONTHS},? \d{{4}}",
    rf"^{_MONTHS},? \d{{4}} (?:product updates|release notes|releases)",
    r"^(?:monthly|weekly|quarterly) (?:product )?(?:updates|roundup|recap|digest)",
    r"^product updates? (?:roundup|recap|digest)",
)

DEFAULT_INFORMATIONAL_PATTERNS: tuple[str, ...] = (
    r"^the \w+ \d{4} industry edit",
    r"^new (?:apps|integrations) (?:in|on|for) the (?:app )?marketplace",
    r"^(?:featured|top) (?:apps|integrations)\b",
    r"^(?:celebrating|congratulations|thank you)\b",
    r"\b\d[\d,]* (?:customers|developers|users|installs)\b",
    r"^(?:meet|spotlight on)\b",
)


class ClassifierRules(BaseModel):
    """Immutable keyword tables consumed by the classifier."""

    model_config = ConfigDict(frozen=True)

    status_rules: tuple[KeywordRule, ...] = DEFAULT_STATUS_RULES
    fallback_status: str = "update"
    category_rules: tuple[KeywordRule, ...] = DEFAULT_CATEGORY_RULES
    placeholder_category: str = "Platform"

    @model_validator(mode="after")
    def _validate_rules(self) -> "ClassifierRules":
        if not self.status_rules:
            raise ValueError("status_rules cannot be empty")
        labels = [rule.label for rule in self.category_rules]
        if self.placeholder_category in labels:
            raise ValueError("placeholder_category must not also be a real category")
        return self


class TitleFilterRules(BaseModel):
    """Ordered pattern classes and length bounds for title filtering."""

    model_config = ConfigDict(frozen=True)

    noise_patterns: tuple[str, ...] = DEFAULT_NOISE_PATTERNS
    rollup_patterns: tuple[str, ...] = DEFAULT_ROLLUP_PATTERNS
    informational_patterns: tuple[str, ...] = DEFAULT_INFORMATIONAL_PATTERNS
    min_length: int = 15
    max_length: int = 200

    @field_validator("noise_patterns", "rollup_patterns", "informational_patterns")
    @classmethod
    def _compile_check(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid pattern {pattern!r}: {exc}") from exc
        return value

    @model_validator(mode="after")
    def _validate_bounds(self) -> "TitleFilterRules":
        if self.min_length < 1:
            raise ValueError("min_length must be >= 1")
        if self.max_length < self.min_length:
            raise ValueError("max_length must be >= min_length")
        return self


class FetchConfig(BaseModel):
    """Retry and timeout settings shared by every HTTP fetch."""

    retries: int = 2
    timeout: float = 15.0
    backoff_seconds: float = 1.0
    user_agent: str = "Release-Tracker/1.0 (product update monitor)"

    @model_validator(mode="after")
    def _validate_limits(self) -> "FetchConfig":
        if self.retries < 0:
            raise ValueError("retries must be >= 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")
        return self


class BrowserConfig(BaseModel):
    """Headless browser options for browser-rendered sources."""

    headless: bool = True
    navigation_timeout: int = 30000  # milliseconds
    settle_ms: int = 250
    viewport_size: tuple[int, int] = (1920, 1080)


class SourceConfig(BaseModel):
    """Definition of one announcement source."""

    name: str
    display_name: str | None = None
    kind: SourceKind
    url: str
    base_url: str | None = None
    layout: DocumentLayout = DocumentLayout.HEADINGS
    heading_selector: str = "h2, h3, h4"
    link_selector: str | None = None
    link_pattern: str | None = None
    max_documents: int = 3
    enabled: bool = True

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        if not re.fullmatch(r"[a-z0-9][a-z0-9_-]*", value):
            raise ValueError("name must be a lower-case slug such as 'dev-changelog'")
        return value

    @model_validator(mode="after")
    def _validate_kind(self) -> "SourceConfig":
        if self.max_documents < 1:
            raise ValueError("max_documents must be >= 1")
        if self.kind is SourceKind.DOCUMENT and self.layout is DocumentLayout.LINKS:
            if not self.link_selector:
                raise ValueError("links layout requires link_selector")
        if self.kind is SourceKind.BROWSER:
            if not self.link_pattern:
                raise ValueError("browser sources require link_pattern")
            try:
                re.compile(self.link_pattern)
            except re.error as exc:
                raise ValueError(f"Invalid link_pattern: {exc}") from exc
        return self

    @property
    def label(self) -> str:
        return self.display_name or self.name


class GlobalConfig(BaseModel):
    """Global controls shared across sources."""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    description_limit: int = 500
    adapter_workers: int = 4
    state_path: Path = Field(default=Path("data/state.json"))
    history_dir: Path = Field(default=Path("data/history"))
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    title_filter: TitleFilterRules = Field(default_factory=TitleFilterRules)
    classifier: ClassifierRules = Field(default_factory=ClassifierRules)

    @field_validator("state_path", "history_dir", mode="before")
    @classmethod
    def _coerce_paths(cls, value: Any) -> Path:
        return Path(value)

    @model_validator(mode="after")
    def _validate_limits(self) -> "GlobalConfig":
        if self.description_limit < 1:
            raise ValueError("description_limit must be >= 1")
        if self.adapter_workers < 1:
            raise ValueError("adapter_workers must be >= 1")
        return self

    def resolved_state_path(self, base_dir: Path) -> Path:
        """Return the item store path relative to the project root."""

        if not self.state_path.is_absolute():
            return (base_dir / self.state_path).resolve()
        return self.state_path

    def resolved_history_dir(self, base_dir: Path) -> Path:
        if not self.history_dir.is_absolute():
            return (base_dir / self.history_dir).resolve()
        return self.history_dir


__all__ = [
    "BrowserConfig",
    "ClassifierRules",
    "DocumentLayout",
    "FetchConfig",
    "GlobalConfig",
    "KeywordRule",
    "ScheduleConfig",
    "ScheduleType",
    "SourceConfig",
    "SourceKind",
    "TitleFilterRules",
]
