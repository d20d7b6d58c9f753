from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from core.loggers import get_logger
from core.services.aggregation import DEFAULT_TOP_N, normalize_top_n
from core.services.sales import ALL_STORES
from core.utils import current_period, year_start_period

log = get_logger(__name__)

VIEW_ENTRY = "entry"
VIEW_LEDGER = "ledger"
VIEW_STORES = "stores"
VIEW_DASHBOARD = "dashboard"
VIEW_DATA = "data"
VIEWS = (VIEW_ENTRY, VIEW_LEDGER, VIEW_STORES, VIEW_DASHBOARD, VIEW_DATA)
DEFAULT_VIEW = VIEW_ENTRY

LAST_VIEW_KEY = "last_view"


class Preferences(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemoryPreferences:
    def __init__(self, initial: Optional[dict] = None):
        self.values = dict(initial or {})
        self.writes = 0

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value
        self.writes += 1


class JsonFilePreferences:
    """Small key/value file in the data directory (survives app restarts)."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> dict:
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                log.warning("ignoring unreadable preferences %s: %s", self.path, e)
                return {}
            return data if isinstance(data, dict) else {}
        return {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class AppState:
    """
    Which view the user was last on. Read once from the preferences port
    when constructed, written back only when it actually changes.
    """

    def __init__(self, preferences: Preferences):
        self.preferences = preferences
        stored = preferences.get(LAST_VIEW_KEY, DEFAULT_VIEW)
        self._active_view = stored if stored in VIEWS else DEFAULT_VIEW

    @property
    def active_view(self) -> str:
        return self._active_view

    def set_active_view(self, view: str) -> bool:
        if view not in VIEWS:
            raise ValueError(f"Unknown view: {view!r}")
        if view == self._active_view:
            return False
        self._active_view = view
        self.preferences.set(LAST_VIEW_KEY, view)
        return True


@dataclass(frozen=True)
class DashboardFilters:
    store_id: Any = ALL_STORES
    start: str = field(default_factory=year_start_period)
    end: str = field(default_factory=current_period)
    top_n: int = DEFAULT_TOP_N
    include_empty: bool = False

    @classmethod
    def defaults(cls, today: Optional[date] = None) -> "DashboardFilters":
        return cls(start=year_start_period(today), end=current_period(today))

    def with_changes(self, **changes: Any) -> "DashboardFilters":
        if "top_n" in changes:
            changes["top_n"] = normalize_top_n(changes["top_n"])
        return replace(self, **changes)

    def fetch_params(self, limit: int) -> dict:
        return {"store_id": self.store_id, "start": self.start, "end": self.end, "limit": int(limit)}
