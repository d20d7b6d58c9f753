from datetime import date

from core.services.demo_data import DEFAULT_STORES, load_demo_data, upsert_reference_data, wipe_all
from core.services.sales import fetch_rows


def test_upsert_reference_data_is_idempotent(conn, table_count):
    upsert_reference_data(conn)
    upsert_reference_data(conn)
    assert table_count("stores") == len(DEFAULT_STORES)


def test_load_demo_data_spreads_over_six_months(conn, table_count):
    n = load_demo_data(conn, n_sales=40, today=date(2024, 3, 20))
    assert n == 40
    assert table_count("sales") == 40

    rows = fetch_rows(conn, start="2023-10", end="2024-03").data
    assert len(rows) == 40
    assert all(r["store_name"] in DEFAULT_STORES for r in rows)
    assert all(r["price_total"] > 0 for r in rows)


def test_load_demo_data_is_reproducible(conn):
    load_demo_data(conn, n_sales=10, seed=3, today=date(2024, 3, 20))
    first = [(r["chip_type"], r["price_total"]) for r in fetch_rows(conn).data]
    wipe_all(conn)
    load_demo_data(conn, n_sales=10, seed=3, today=date(2024, 3, 20))
    second = [(r["chip_type"], r["price_total"]) for r in fetch_rows(conn).data]
    assert first == second


def test_wipe_all(conn, table_count):
    load_demo_data(conn, n_sales=5, today=date(2024, 3, 20))
    wipe_all(conn)
    assert table_count("sales") == 0
    assert table_count("stores") == 0
