from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

from core.services.sales import digits_for_size
from core.utils import period_is_valid, to_number

IDLE = "idle"
SUBMITTING = "submitting"

# Fields settable through on_field_changed (size fields have their own transitions)
PLAIN_FIELDS = ("chip_type", "chip_number", "price_total", "store_id", "manual_month", "note")


@dataclass(frozen=True)
class SaleForm:
    chip_type: str = ""
    chip_number: str = ""
    size_cls: str = ""
    size_digits: str = ""
    price_total: Any = ""
    store_id: Any = None
    manual_month: str = ""
    note: str = ""
    status: str = IDLE
    error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.status == SUBMITTING

    def to_payload(self) -> dict:
        return {
            "chip_type": self.chip_type,
            "chip_number": self.chip_number,
            "size_cls": self.size_cls,
            "size_digits": self.size_digits,
            "price_total": self.price_total,
            "store_id": self.store_id,
            "manual_month": self.manual_month,
            "note": self.note,
        }


def new_form(chip_types: Sequence[str]) -> SaleForm:
    return SaleForm(chip_type=chip_types[0] if chip_types else "")


def on_size_class_changed(form: SaleForm, size_cls: Optional[str]) -> SaleForm:
    """The only transition that derives size_digits from the lookup table."""
    cls = str(size_cls or "").strip().upper()
    return replace(form, size_cls=cls, size_digits=digits_for_size(cls))


def on_size_digits_edited(form: SaleForm, size_digits: Optional[str]) -> SaleForm:
    return replace(form, size_digits=str(size_digits or ""))


def on_field_changed(form: SaleForm, field: str, value: Any) -> SaleForm:
    if field not in PLAIN_FIELDS:
        raise ValueError(f"Unknown form field: {field!r}")
    return replace(form, **{field: value})


def missing_fields(form: SaleForm, store_required: bool) -> list[str]:
    missing = []
    if form.price_total is None or str(form.price_total).strip() == "":
        missing.append("price_total")
    if store_required and form.store_id in (None, ""):
        missing.append("store_id")
    return missing


def price_is_valid(form: SaleForm) -> bool:
    try:
        return to_number(form.price_total) >= 0
    except (TypeError, ValueError):
        return False


def month_is_valid(form: SaleForm) -> bool:
    return period_is_valid(form.manual_month, allow_blank=True)


def begin_submit(form: SaleForm) -> SaleForm:
    if form.busy:
        raise ValueError("A submission is already in progress.")
    return replace(form, status=SUBMITTING, error=None)


def submit_succeeded(form: SaleForm) -> SaleForm:
    # Per-transaction fields are cleared; defaults (type, store, size class, month) stay.
    return replace(
        form,
        price_total="",
        chip_number="",
        note="",
        size_digits=digits_for_size(form.size_cls),
        status=IDLE,
        error=None,
    )


def submit_failed(form: SaleForm, error: str) -> SaleForm:
    return replace(form, status=IDLE, error=str(error))
