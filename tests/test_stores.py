from core.results import CONFLICT, CONSTRAINT, NOT_FOUND
from core.services.stores import (
    STORE_IN_USE_MESSAGE,
    create_store,
    delete_failure_message,
    delete_store,
    list_stores,
    update_store,
)


def test_list_stores_sorted_by_name(conn, make_store):
    make_store("Toyama")
    make_store("Kanazawa")
    make_store("Online")

    res = list_stores(conn)
    assert res.ok
    assert [s["name"] for s in res.data] == ["Kanazawa", "Online", "Toyama"]


def test_list_stores_without_connection_is_empty_failure():
    res = list_stores(None)
    assert not res.ok
    assert res.data == []
    assert res.error.message


def test_create_store_returns_assigned_id(conn):
    res = create_store(conn, "  Kanazawa  ")
    assert res.ok
    assert res.data["name"] == "Kanazawa"
    assert isinstance(res.data["id"], int)


def test_create_store_duplicate_name_surfaces_store_message(conn):
    assert create_store(conn, "Kanazawa").ok
    res = create_store(conn, "Kanazawa")
    assert not res.ok
    assert res.error.kind == CONFLICT
    assert "UNIQUE" in res.error.message


def test_create_store_blank_name_fails(conn):
    res = create_store(conn, "   ")
    assert not res.ok


def test_update_store_renames(conn, make_store):
    sid = make_store("Old")
    res = update_store(conn, sid, "New")
    assert res.ok
    assert res.data == {"id": sid, "name": "New"}
    assert [s["name"] for s in list_stores(conn).data] == ["New"]


def test_update_store_missing_id(conn):
    res = update_store(conn, 999, "Nope")
    assert not res.ok
    assert res.error.kind == NOT_FOUND


def test_delete_store_without_sales(conn, make_store):
    sid = make_store("Empty")
    res = delete_store(conn, sid)
    assert res.ok
    assert list_stores(conn).data == []


def test_delete_store_with_sales_is_constraint_violation(conn, make_store, make_sale):
    sid = make_store("Busy")
    make_sale("2024-01-10T10:00:00.000Z", store_id=sid)

    res = delete_store(conn, sid)
    assert not res.ok
    assert res.error.kind == CONSTRAINT
    assert res.error.is_constraint_violation
    assert delete_failure_message(res) == STORE_IN_USE_MESSAGE
    # store list unchanged
    assert [s["id"] for s in list_stores(conn).data] == [sid]


def test_delete_failure_message_for_other_errors():
    res = delete_store(None, 1)
    assert not res.ok
    assert not res.error.is_constraint_violation
    assert delete_failure_message(res) == res.message
