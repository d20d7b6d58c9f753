from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import streamlit as st

from core.loggers import get_logger
from core.schema import SCHEMA_SQL

log = get_logger(__name__)


def connect(db_url: Union[str, Path]) -> sqlite3.Connection:
    target = str(db_url)
    conn = sqlite3.connect(target, check_same_thread=False, uri=target.startswith("file:"))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@st.cache_resource
def get_conn(db_url: str) -> sqlite3.Connection:
    conn = connect(db_url)
    ensure_schema(conn)
    return conn


def try_get_conn(db_url: str) -> Optional[sqlite3.Connection]:
    """
    Open (or reuse) the store connection without failing the page.

    A broken endpoint leaves the app usable: views render empty and every
    data operation reports the failure when it runs.
    """
    try:
        return get_conn(db_url)
    except sqlite3.Error as e:
        log.warning("could not open store at %s: %s", db_url, e)
        return None


def ensure_schema(conn: sqlite3.Connection) -> None:
    # Idempotent: every statement is CREATE ... IF NOT EXISTS
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last)


def xr(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    # Write statement; RETURNING rows (if any) must be read before the commit.
    try:
        cur = conn.execute(sql, tuple(params))
        rows = cur.fetchall()
        cur.close()
    except sqlite3.Error:
        conn.rollback()
        raise
    conn.commit()
    return rows
