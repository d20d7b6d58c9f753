from __future__ import annotations

import sqlite3
from typing import Optional

from core.db import q, xr
from core.loggers import get_logger
from core.results import NOT_FOUND, Result, StoreError, require_conn, trapped

log = get_logger(__name__)

STORE_IN_USE_MESSAGE = (
    "This store still has sales records. Reassign those sales to another store "
    "or delete them first, then delete the store."
)


def _clean_name(name: Optional[str]) -> str:
    s = str(name or "").strip()
    if not s:
        raise ValueError("Store name is required.")
    return s


@trapped("list_stores", empty=list, log=log)
def list_stores(conn: Optional[sqlite3.Connection]) -> list[dict]:
    rows = q(require_conn(conn), "SELECT id, name FROM stores ORDER BY name ASC, id ASC")
    return [dict(r) for r in rows]


@trapped("create_store", log=log)
def create_store(conn: Optional[sqlite3.Connection], name: str) -> dict:
    rows = xr(
        require_conn(conn),
        "INSERT INTO stores (name) VALUES (?) RETURNING id, name",
        (_clean_name(name),),
    )
    store = dict(rows[0])
    log.info("created store %s (%s)", store["id"], store["name"])
    return store


@trapped("update_store", log=log)
def update_store(conn: Optional[sqlite3.Connection], store_id: int, name: str):
    rows = xr(
        require_conn(conn),
        "UPDATE stores SET name=? WHERE id=? RETURNING id, name",
        (_clean_name(name), int(store_id)),
    )
    if not rows:
        return Result.failure(StoreError(f"Store {store_id} not found.", kind=NOT_FOUND))
    store = dict(rows[0])
    log.info("renamed store %s to %s", store["id"], store["name"])
    return store


@trapped("delete_store", log=log)
def delete_store(conn: Optional[sqlite3.Connection], store_id: int) -> None:
    """
    Delete a store by id.

    Fails with kind="constraint" while any sale still references the store;
    the store list is left untouched in that case.
    """
    xr(require_conn(conn), "DELETE FROM stores WHERE id=?", (int(store_id),))
    log.info("deleted store %s", store_id)


def delete_failure_message(result: Result) -> str:
    if result.error is not None and result.error.is_constraint_violation:
        return STORE_IN_USE_MESSAGE
    return result.message
