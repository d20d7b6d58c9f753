from core.forms import begin_submit, new_form, on_field_changed, on_size_class_changed, submit_succeeded
from core.services.aggregation import aggregate_by_size_class, count_by_type, total_revenue
from core.services.sales import fetch_rows, submit_sale


def test_entered_sale_reaches_ledger_and_dashboard(conn, make_store, make_sale):
    s1 = make_store("S1")
    older = make_sale("2024-01-01T10:00:00.000Z", chip_type="B", price_total=500.0)

    form = new_form(["A", "B"])
    form = on_field_changed(form, "store_id", s1)
    form = on_size_class_changed(form, "M")
    form = on_field_changed(form, "price_total", "3200")
    form = begin_submit(form)

    res = submit_sale(conn, form.to_payload())
    assert res.ok
    form = submit_succeeded(form)
    assert form.price_total == "" and form.store_id == s1

    sale = res.data
    assert sale["size_digits"] == "15458"
    assert sale["month"] == sale["created_at"][:7]

    # ledger: newest first
    rows = fetch_rows(conn).data
    assert [r["id"] for r in rows] == [sale["id"], older]
    assert rows[0]["store_name"] == "S1"

    # dashboard
    assert total_revenue(rows) == 3700
    assert count_by_type(rows) == [{"name": "A", "count": 1}, {"name": "B", "count": 1}]
    m = next(b for b in aggregate_by_size_class(rows) if b["size"] == "M")
    assert m == {"size": "M", "count": 1, "revenue": 3200.0}

    # store filter narrows both
    only_s1 = fetch_rows(conn, store_id=s1).data
    assert total_revenue(only_s1) == 3200
