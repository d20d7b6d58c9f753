"""
KPI and chart data derived from an already-filtered list of sale rows.

Every function is a single pass over the rows; nothing is cached between
calls. Bucket lists keep first-seen order so ties in top_n() fall back to
the order the rows came in.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from core.services.sales import SIZE_CLASSES
from core.utils import amount

EMPTY_LABEL = "(not set)"
DEFAULT_TOP_N = 20

Row = Mapping[str, Any]


def total_count(rows: Iterable[Row]) -> int:
    return sum(1 for _ in rows)


def total_revenue(rows: Iterable[Row]) -> float:
    return sum(amount(r.get("price_total")) for r in rows)


def count_by_type(rows: Iterable[Row]) -> list[dict]:
    counts: dict[Any, int] = {}
    for r in rows:
        key = r.get("chip_type")
        counts[key] = counts.get(key, 0) + 1
    return [{"name": name, "count": n} for name, n in counts.items()]


def _aggregate_by(rows: Iterable[Row], field: str, *, include_empty: bool) -> list[dict]:
    buckets: dict[str, dict] = {}
    for r in rows:
        raw = r.get(field)
        key = str(raw).strip() if raw is not None else ""
        if not key:
            if not include_empty:
                continue
            key = EMPTY_LABEL
        b = buckets.get(key)
        if b is None:
            b = buckets[key] = {field: key, "count": 0, "revenue": 0.0}
        b["count"] += 1
        b["revenue"] += amount(r.get("price_total"))
    return list(buckets.values())


def aggregate_by_chip_number(rows: Iterable[Row], include_empty: bool = False) -> list[dict]:
    return _aggregate_by(rows, "chip_number", include_empty=include_empty)


def aggregate_by_size_digits(rows: Iterable[Row], include_empty: bool = False) -> list[dict]:
    return _aggregate_by(rows, "size_digits", include_empty=include_empty)


def aggregate_by_size_class(rows: Iterable[Row]) -> list[dict]:
    rows = list(rows)
    out = []
    for size in SIZE_CLASSES:
        matched = [r for r in rows if r.get("size_cls") == size]
        out.append({"size": size, "count": len(matched), "revenue": total_revenue(matched)})
    return out


def normalize_top_n(value: Any, default: int = DEFAULT_TOP_N) -> int:
    # Non-numeric or zero falls back to the default; anything else is clamped to >= 1.
    try:
        n = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    if n == 0:
        return default
    return max(1, n)


def top_n(items: Iterable[Mapping[str, Any]], field: str, n: Optional[Any] = None) -> list:
    if field not in ("count", "revenue"):
        raise ValueError(f"Unknown ranking field: {field!r}")
    limit = normalize_top_n(n)
    # sorted() is stable: equal values keep their aggregation order
    return sorted(items, key=lambda b: b[field], reverse=True)[:limit]
