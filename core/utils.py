from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

PERIOD_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def current_period(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"{d.year:04d}-{d.month:02d}"


def year_start_period(today: Optional[date] = None) -> str:
    d = today or date.today()
    return f"{d.year:04d}-01"


def period_is_valid(v: Any, allow_blank: bool = True) -> bool:
    """YYYY-MM with month 01-12. Blank passes only when allow_blank."""
    # Periods compare as strings, so "2024-2" would sort after "2024-12".
    s = "" if v is None else str(v).strip()
    if not s:
        return allow_blank
    return PERIOD_RE.match(s) is not None


def blank_to_none(v: Any) -> Any:
    """Blank strings become None so the store clears the column instead of keeping ''."""
    if v is None:
        return None
    if isinstance(v, str):
        s = v.strip()
        return s if s else None
    return v


def to_number(v: Any) -> float:
    """
    Coerce a price-like value to a float.

    None and blank strings coerce to 0; anything else that float() rejects
    raises ValueError.
    """
    if v is None:
        return 0.0
    if isinstance(v, str):
        s = v.strip().replace(",", "")
        if not s:
            return 0.0
        return float(s)
    if isinstance(v, bool):
        raise ValueError("Price must be a number.")
    return float(v)


def amount(v: Any) -> float:
    # Aggregation-side reading of price_total: missing/null/garbage counts as 0.
    if v is None:
        return 0.0
    try:
        return float(v)
    except (TypeError, ValueError):
        return 0.0
