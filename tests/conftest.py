# tests/conftest.py
# ---------------------------------------------------------------------
# - Every test gets a fresh in-memory SQLite store with the app schema
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON (same as the app)
# - No Streamlit runtime: only core/ modules are exercised
# ---------------------------------------------------------------------

from __future__ import annotations

import sqlite3

import pytest

from core.db import connect, ensure_schema


@pytest.fixture()
def conn():
    con = connect(":memory:")
    ensure_schema(con)
    try:
        yield con
    finally:
        con.close()


@pytest.fixture()
def make_store(conn):
    def _make(name: str) -> int:
        cur = conn.execute("INSERT INTO stores (name) VALUES (?)", (name,))
        conn.commit()
        return int(cur.lastrowid)

    return _make


@pytest.fixture()
def make_sale(conn):
    """Insert a sale directly, with an explicit created_at so ordering is deterministic."""

    def _make(created_at: str, *, chip_type="A", price_total=1000.0, store_id=None, **extra) -> int:
        cols = {"created_at": created_at, "chip_type": chip_type, "price_total": price_total, "store_id": store_id}
        cols.update(extra)
        names = ", ".join(cols)
        marks = ", ".join("?" for _ in cols)
        cur = conn.execute(f"INSERT INTO sales ({names}) VALUES ({marks})", tuple(cols.values()))
        conn.commit()
        return int(cur.lastrowid)

    return _make


@pytest.fixture()
def table_count(conn: sqlite3.Connection):
    def _count(table: str) -> int:
        return int(conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])

    return _count
