"""Infra layer utilities (item store, history log)."""

from .storage import HistoryLog, ItemStore

__all__ = ["HistoryLog", "ItemStore"]
