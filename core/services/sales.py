from __future__ import annotations

import sqlite3
from typing import Any, Mapping, Optional, Union

from core.db import q, xr
from core.loggers import get_logger
from core.results import NOT_FOUND, Result, StoreError, require_conn, trapped
from core.utils import blank_to_none, period_is_valid, to_number

log = get_logger(__name__)

ALL_STORES = "ALL"
DEFAULT_LIMIT = 500

SIZE_CLASSES = ("S", "M", "L")
SIZE_DIGITS = {"S": "26569", "M": "15458", "L": "04347"}

# Columns replaced as a whole by update_sale
MUTABLE_COLUMNS = (
    "chip_type",
    "chip_number",
    "size_cls",
    "size_digits",
    "price_total",
    "store_id",
    "manual_month",
    "note",
)

_SALE_SELECT = """
    SELECT s.id, s.created_at, s.month, s.manual_month,
           s.chip_type, s.chip_number, s.size_cls, s.size_digits,
           s.price_total, s.store_id, st.name AS store_name, s.note
    FROM sales s
    LEFT JOIN stores st ON st.id = s.store_id
"""


def display_period(row: Mapping[str, Any]) -> Optional[str]:
    return row.get("manual_month") or row.get("month")


def digits_for_size(size_cls: Optional[str]) -> str:
    return SIZE_DIGITS.get(str(size_cls or "").strip().upper(), "")


def _store_id_or_none(v: Any) -> Optional[int]:
    v = blank_to_none(v)
    if v is None:
        return None
    return int(v)


def _size_cls_or_none(v: Any) -> Optional[str]:
    v = blank_to_none(v)
    return str(v).upper() if v is not None else None


def normalize_sale(payload: Mapping[str, Any]) -> dict:
    """
    Column values for an insert/full update.

    Price becomes a number and blank optional fields become None so the
    store clears them. The month override may be passed as "manual_month"
    or "month"; a non-blank override that is not YYYY-MM raises ValueError.
    """
    manual_month = payload.get("manual_month")
    if manual_month is None:
        manual_month = payload.get("month")
    if not period_is_valid(manual_month, allow_blank=True):
        raise ValueError(f"Month override must be YYYY-MM, got {manual_month!r}.")
    return {
        "chip_type": payload.get("chip_type"),
        "chip_number": blank_to_none(payload.get("chip_number")),
        "size_cls": _size_cls_or_none(payload.get("size_cls")),
        "size_digits": blank_to_none(payload.get("size_digits")),
        "price_total": to_number(payload.get("price_total")),
        "store_id": _store_id_or_none(payload.get("store_id")),
        "manual_month": blank_to_none(manual_month),
        "note": blank_to_none(payload.get("note")),
    }


def _get_sale(conn: sqlite3.Connection, sale_id: int) -> Optional[dict]:
    rows = q(conn, _SALE_SELECT + " WHERE s.id=?", (int(sale_id),))
    return dict(rows[0]) if rows else None


@trapped("submit_sale", log=log)
def submit_sale(conn: Optional[sqlite3.Connection], payload: Mapping[str, Any]) -> dict:
    conn = require_conn(conn)
    values = normalize_sale(payload)
    cols = ", ".join(MUTABLE_COLUMNS)
    marks = ", ".join("?" for _ in MUTABLE_COLUMNS)
    rows = xr(
        conn,
        f"INSERT INTO sales ({cols}) VALUES ({marks}) RETURNING id",
        tuple(values[c] for c in MUTABLE_COLUMNS),
    )
    sale_id = int(rows[0]["id"])
    log.info("submitted sale %s (%s, %.0f)", sale_id, values["chip_type"], values["price_total"])
    return _get_sale(conn, sale_id)


@trapped("fetch_rows", empty=list, log=log)
def fetch_rows(
    conn: Optional[sqlite3.Connection],
    *,
    store_id: Union[int, str, None] = ALL_STORES,
    start: str = "",
    end: str = "",
    limit: int = DEFAULT_LIMIT,
) -> list[dict]:
    """
    Sales newest-first, at most `limit` rows.

    start/end are inclusive YYYY-MM bounds on the reporting month; store_id
    "ALL" (or None/blank) disables the store filter. Malformed bounds fail
    instead of silently matching the wrong rows.
    """
    for bound in (start, end):
        if not period_is_valid(bound, allow_blank=True):
            raise ValueError(f"Period bounds must be YYYY-MM, got {bound!r}.")

    where = []
    params: list[Any] = []

    if start:
        where.append("s.month >= ?")
        params.append(str(start))
    if end:
        where.append("s.month <= ?")
        params.append(str(end))
    if store_id not in (None, "", ALL_STORES):
        where.append("s.store_id = ?")
        params.append(int(store_id))

    sql = _SALE_SELECT
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY s.created_at DESC, s.id DESC LIMIT ?"
    params.append(int(limit))

    rows = q(require_conn(conn), sql, params)
    return [dict(r) for r in rows]


@trapped("update_sale", log=log)
def update_sale(conn: Optional[sqlite3.Connection], sale_id: int, patch: Mapping[str, Any]):
    conn = require_conn(conn)
    values = normalize_sale(patch)
    assignments = ", ".join(f"{c}=?" for c in MUTABLE_COLUMNS)
    rows = xr(
        conn,
        f"UPDATE sales SET {assignments} WHERE id=? RETURNING id",
        tuple(values[c] for c in MUTABLE_COLUMNS) + (int(sale_id),),
    )
    if not rows:
        return Result.failure(StoreError(f"Sale {sale_id} not found.", kind=NOT_FOUND))
    log.info("updated sale %s", sale_id)
    return _get_sale(conn, int(sale_id))


@trapped("delete_sale", log=log)
def delete_sale(conn: Optional[sqlite3.Connection], sale_id: int) -> None:
    xr(require_conn(conn), "DELETE FROM sales WHERE id=?", (int(sale_id),))
    log.info("deleted sale %s", sale_id)
