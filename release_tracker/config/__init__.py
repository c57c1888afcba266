"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    BrowserConfig,
    ClassifierRules,
    DocumentLayout,
    FetchConfig,
    GlobalConfig,
    KeywordRule,
    ScheduleConfig,
    ScheduleType,
    SourceConfig,
    SourceKind,
    TitleFilterRules,
)

__all__ = [
    "BrowserConfig",
    "ClassifierRules",
    "ConfigLocator",
    "ConfigRepository",
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
