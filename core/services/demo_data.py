from __future__ import annotations

import random
import sqlite3
from datetime import date

from core.config import CHIP_TYPES
from core.db import ensure_schema, q, x
from core.loggers import get_logger
from core.services.sales import SIZE_CLASSES, SIZE_DIGITS

log = get_logger(__name__)

DEFAULT_STORES = ["Matoeru Kanazawa", "Matoeru Toyama", "Online Shop"]
CHIP_NUMBERS = ["101", "102", "115", "208", "230", "312"]
PRICES = [2800, 3200, 3500, 4200]


def upsert_reference_data(conn: sqlite3.Connection) -> None:
    ensure_schema(conn)
    for name in DEFAULT_STORES:
        x(conn, "INSERT OR IGNORE INTO stores(name) VALUES (?)", (name,))


def wipe_all(conn: sqlite3.Connection) -> None:
    # Keep schema, delete data (order matters for FKs).
    for t in ["sales", "stores"]:
        conn.execute(f"DELETE FROM {t};")
    conn.commit()
    log.info("wiped all sales and stores")


def _months_back(today: date, n: int) -> list[str]:
    out = []
    y, m = today.year, today.month
    for _ in range(n):
        out.append(f"{y:04d}-{m:02d}")
        m -= 1
        if m == 0:
            y, m = y - 1, 12
    return out


def load_demo_data(conn: sqlite3.Connection, *, seed: int = 7, n_sales: int = 120, today: date | None = None) -> int:
    """
    Seed a few stores and `n_sales` sales spread over the last six months.

    created_at is written explicitly (mid-month, one minute apart) so demo
    rows land in past periods; returns the number of sales inserted.
    """
    rnd = random.Random(seed)
    upsert_reference_data(conn)

    stores = q(conn, "SELECT id FROM stores ORDER BY id")
    months = _months_back(today or date.today(), 6)

    for i in range(n_sales):
        period = rnd.choice(months)
        size_cls = rnd.choice(SIZE_CLASSES + ("",))
        conn.execute(
            """
            INSERT INTO sales (
                created_at, chip_type, chip_number, size_cls, size_digits,
                price_total, store_id, note
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                f"{period}-15T{9 + (i // 60) % 10:02d}:{i % 60:02d}:00.000Z",
                rnd.choice(CHIP_TYPES),
                rnd.choice(CHIP_NUMBERS + [None]),
                size_cls or None,
                SIZE_DIGITS.get(size_cls),
                float(rnd.choice(PRICES)),
                int(rnd.choice(stores)["id"]),
                None,
            ),
        )
    conn.commit()
    log.info("loaded %s demo sales", n_sales)
    return n_sales
