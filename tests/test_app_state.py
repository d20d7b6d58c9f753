from datetime import date

import pytest

from core.app_state import (
    DEFAULT_VIEW,
    LAST_VIEW_KEY,
    VIEW_DASHBOARD,
    VIEW_LEDGER,
    AppState,
    DashboardFilters,
    JsonFilePreferences,
    MemoryPreferences,
)
from core.services.aggregation import DEFAULT_TOP_N
from core.services.sales import ALL_STORES


def test_active_view_read_from_preferences():
    state = AppState(MemoryPreferences({LAST_VIEW_KEY: VIEW_LEDGER}))
    assert state.active_view == VIEW_LEDGER


@pytest.mark.parametrize("stored", [None, "", "reports", 3])
def test_unknown_stored_view_falls_back_to_default(stored):
    state = AppState(MemoryPreferences({LAST_VIEW_KEY: stored}))
    assert state.active_view == DEFAULT_VIEW


def test_set_active_view_writes_only_on_change():
    prefs = MemoryPreferences()
    state = AppState(prefs)

    assert state.set_active_view(DEFAULT_VIEW) is False
    assert prefs.writes == 0

    assert state.set_active_view(VIEW_DASHBOARD) is True
    assert state.set_active_view(VIEW_DASHBOARD) is False
    assert prefs.writes == 1
    assert prefs.values[LAST_VIEW_KEY] == VIEW_DASHBOARD


def test_set_active_view_rejects_unknown():
    state = AppState(MemoryPreferences())
    with pytest.raises(ValueError):
        state.set_active_view("reports")


def test_json_preferences_survive_restart(tmp_path):
    path = tmp_path / "nested" / "preferences.json"
    AppState(JsonFilePreferences(path)).set_active_view(VIEW_LEDGER)
    assert path.exists()

    assert AppState(JsonFilePreferences(path)).active_view == VIEW_LEDGER


def test_json_preferences_ignore_garbage(tmp_path):
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")
    prefs = JsonFilePreferences(path)
    assert prefs.get(LAST_VIEW_KEY, "x") == "x"

    prefs.set(LAST_VIEW_KEY, VIEW_LEDGER)
    assert prefs.get(LAST_VIEW_KEY) == VIEW_LEDGER


def test_dashboard_filter_defaults():
    f = DashboardFilters.defaults(date(2024, 5, 20))
    assert f.store_id == ALL_STORES
    assert (f.start, f.end) == ("2024-01", "2024-05")
    assert f.top_n == DEFAULT_TOP_N
    assert f.include_empty is False


def test_dashboard_filters_normalize_top_n():
    f = DashboardFilters.defaults(date(2024, 5, 20))
    assert f.with_changes(top_n="").top_n == DEFAULT_TOP_N
    assert f.with_changes(top_n="5").top_n == 5
    assert f.with_changes(top_n=-2).top_n == 1
    # untouched fields survive
    assert f.with_changes(store_id=3).start == "2024-01"


def test_dashboard_fetch_params():
    f = DashboardFilters.defaults(date(2024, 5, 20)).with_changes(store_id=3)
    assert f.fetch_params(2000) == {"store_id": 3, "start": "2024-01", "end": "2024-05", "limit": 2000}
