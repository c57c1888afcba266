"""JSON-file persistence for the item store and the per-day history log."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any

from pydantic import ValidationError

from ..engine.records import StoreState
from ..errors import StoreCorruptedError, StorePersistenceError


def _atomic_write(path: Path, payload: str) -> None:
    """Write ``payload`` next to ``path`` and rename it into place."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as stream:
                stream.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise StorePersistenceError(path, str(exc)) from exc


class ItemStore:
    """The full tracked-item state, read and written as one JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = Lock()

    def load(self) -> StoreState:
        with self._lock:
            if not self.path.exists():
                return StoreState()
            try:
                raw = self.path.read_text(encoding="utf-8")
            except OSError as exc:
                raise StoreCorruptedError(self.path, str(exc)) from exc
            if not raw.strip():
                return StoreState()
            try:
                return StoreState.model_validate_json(raw)
            except ValidationError as exc:
                raise StoreCorruptedError(self.path, str(exc)) from exc

    def save(self, state: StoreState) -> None:
        with self._lock:
            _atomic_write(self.path, state.model_dump_json(indent=2))


class HistoryLog:
    """Append-only scan snapshots grouped into one JSON file per UTC day."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self._lock = Lock()

    def path_for(self, day: date) -> Path:
        return self.directory / f"{day.isoformat()}.json"

    def append(self, snapshot: dict[str, Any], now: datetime | None = None) -> Path:
        now = now or datetime.now(timezone.utc)
        day = now.astimezone(timezone.utc).date()
        path = self.path_for(day)
        record = dict(snapshot)
        record.setdefault("timestamp", now.isoformat())
        with self._lock:
            snapshots = self._read(path)
            snapshots.append(record)
            _atomic_write(path, json.dumps(snapshots, ensure_ascii=False, indent=2))
        return path

    def read(self, day: date) -> list[dict[str, Any]]:
        with self._lock:
            return self._read(self.path_for(day))

    def list_days(self) -> list[date]:
        if not self.directory.exists():
            return []
        days: list[date] = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                days.append(date.fromisoformat(path.stem))
            except ValueError:
                continue
        return days

    @staticmethod
    def _read(path: Path) -> list[dict[str, Any]]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreCorruptedError(path, str(exc)) from exc
        if not isinstance(data, list):
            raise StoreCorruptedError(path, "expected a list of snapshots")
        return data


__all__ = ["HistoryLog", "ItemStore"]
