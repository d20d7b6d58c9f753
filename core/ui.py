from __future__ import annotations

import sqlite3
from typing import Optional

import pandas as pd
import plotly.express as px
import streamlit as st

from core.app_state import AppState, JsonFilePreferences
from core.config import Settings, get_settings
from core.db import try_get_conn

APP_STATE_KEY = "chip_sales_app_state"


def yen(n) -> str:
    return f"¥{float(n or 0):,.0f}"


def get_app_state(settings: Settings) -> AppState:
    # One AppState per browser session, backed by the data directory's preferences file.
    if APP_STATE_KEY not in st.session_state:
        st.session_state[APP_STATE_KEY] = AppState(JsonFilePreferences(settings.preferences_path))
    return st.session_state[APP_STATE_KEY]


def page_setup(view: str) -> tuple[Settings, Optional[sqlite3.Connection]]:
    settings = get_settings()
    get_app_state(settings).set_active_view(view)
    conn = try_get_conn(settings.db_url)
    if conn is None:
        st.warning(f"Database is not reachable at `{settings.db_url}`. Check the data directory or CHIP_SALES_DB_URL.")
    return settings, conn


def rows_frame(rows: list[dict], columns: Optional[list[str]] = None) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if columns is not None:
        df = df.reindex(columns=columns)
    return df


def bar_chart(items: list[dict], x: str, y: str, *, title: str, y_title: str, money: bool = False) -> None:
    if not items:
        st.caption("No data for the current filters.")
        return
    df = pd.DataFrame(items)
    df[x] = df[x].astype(str)
    # Bars keep the order of `items` (ranking order for top-N charts).
    fig = px.bar(df, x=x, y=y, title=title, text_auto=",.0f" if money else True)
    fig.update_layout(yaxis_title=y_title, xaxis_title=None, xaxis_type="category")
    st.plotly_chart(fig, use_container_width=True)
