"""
ui/utils/inputs.py
------------------
Turns entry-form text into engine values. The engine assumes numbers; all
sanitising of typed text happens here.
"""

from __future__ import annotations
import math

from engine.records import Batch, DailyRecord, to_number

# Column order of the editable batch grid
BATCH_EDIT_FIELDS: tuple[str, ...] = (
    "page_name", "product_name", "total_orders", "return_percent",
    "sale_price", "purchase_cost", "page_ad_spend_foreign", "dollar_rate",
    "page_salary", "delivery_charge_per_unit", "packaging_cost_per_unit",
    "manual_adjustment", "cod_fee_percent",
)


def _cell_number(raw) -> float:
    number = to_number(raw)
    return 0.0 if math.isnan(number) else number


def clean_number(raw) -> float:
    """Typed text → float. Blank, non-numeric, NaN or negative → 0."""
    number = to_number(raw)
    return number if number > 0 else 0.0


def _clean_name(raw) -> str:
    # Non-text cells (None, NaN) count as blank
    name = raw.strip() if isinstance(raw, str) else ""
    return name or "General"


def build_batches(
    product_rows: list[dict],
    *,
    page_name: str,
    return_percent: float,
    dollar_rate: float,
    delivery_charge: float,
    packaging_cost: float,
    cod_percent: float,
) -> list[Batch]:
    """
    One Batch per product row with a quantity. Rows with no quantity are
    dropped; a blank product name becomes "General".

    Page ad spend and salary are left at 0: the merger fills in the page
    delta when the batches are submitted.
    """
    batches = []
    for row in product_rows:
        qty = int(clean_number(row.get("qty")))
        if qty <= 0:
            continue
        batches.append(Batch(
            page_name                = page_name,
            product_name             = _clean_name(row.get("name")),
            total_orders             = qty,
            return_percent           = return_percent,
            sale_price               = clean_number(row.get("sale")),
            purchase_cost            = clean_number(row.get("buy")),
            dollar_rate              = dollar_rate or None,
            delivery_charge_per_unit = delivery_charge,
            packaging_cost_per_unit  = packaging_cost,
            cod_fee_percent          = cod_percent,
        ))
    return batches


def batch_rows(record: DailyRecord) -> list[dict]:
    """One row per batch: its id plus every editable field."""
    return [
        {"id": b.id, **{f: getattr(b, f) for f in BATCH_EDIT_FIELDS}}
        for b in record.batches
    ]


def _clean_cell(field: str, raw, current):
    if raw == current:
        return current
    if field == "page_name":
        # A page cannot be blanked out from the grid
        return raw.strip() if isinstance(raw, str) and raw.strip() else current
    if field == "product_name":
        return _clean_name(raw)
    if field == "total_orders":
        return int(clean_number(raw))
    if field == "dollar_rate":
        return _cell_number(raw) or None
    return _cell_number(raw)


def batch_changes(record: DailyRecord, edited_rows: list[dict]) -> dict[str, dict]:
    """
    Compare grid rows against the stored batches.

    Returns {batch id: {field: new value}} for rows that differ, ready for
    engine.orchestrator.edit_batch. Unknown ids are ignored.
    """
    changes: dict[str, dict] = {}
    for row in edited_rows:
        batch = record.find_batch(str(row.get("id")))
        if batch is None:
            continue
        diff = {}
        for field in BATCH_EDIT_FIELDS:
            current = getattr(batch, field)
            value = _clean_cell(field, row.get(field), current)
            if value != current:
                diff[field] = value
        if diff:
            changes[batch.id] = diff
    return changes
