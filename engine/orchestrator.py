"""
engine/orchestrator.py
----------------------
Read → merge → allocate → write workflows used by the entry form and the
cost manager.

Pipeline (submit_batch)
-----------------------
    Step 1 → store.read_day(date)
    Step 2 → merger.merge_batches()        delta against the page's stored totals
    Step 3 → allocator.allocate()          per-batch shares, profit, summary
    Step 4 → store.write_day(record)       full overwrite of the date

Every other workflow is the same shape with Step 2 replaced by a direct edit
(globals, one batch, or a deletion). The record written is always freshly
allocated, so readers can trust its summary.

`store` is any object with read_day / write_day / read_all
(see engine.store.JsonDayStore).

No Streamlit imports. Pure Python.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from engine.allocator import allocate, summary_is_consistent
from engine.merger    import apply_global_updates, merge_batches
from engine.records   import EDITABLE_BATCH_FIELDS, Batch, DailyRecord

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _require_day(store, date: str) -> DailyRecord:
    day = store.read_day(date)
    if day is None:
        raise LookupError(f"No records found for {date}.")
    return day


def _persist(store, record: DailyRecord) -> DailyRecord:
    allocated = allocate(record)
    store.write_day(allocated)
    return allocated


# ─────────────────────────────────────────────────────────────────────────────
# Workflows
# ─────────────────────────────────────────────────────────────────────────────

def submit_batch(
    store,
    date: str,
    page_name: str,
    batches: list[Batch],
    global_updates: dict | None = None,
    *,
    page_ad_total: float | None = None,
    page_salary_total: float | None = None,
) -> DailyRecord:
    """
    Record one entry-form submission for page_name on date.

    page_ad_total / page_salary_total are the page's cumulative figures for
    the day as the user states them; only the difference from what is
    already stored is added.

    Raises:
        ValueError: blank page name, or the batches total zero orders.
    """
    page_name = (page_name or "").strip()
    if not page_name:
        logger.warning(f"Rejected submission for {date}: no page selected")
        raise ValueError("Please select a page name.")
    if sum(b.total_orders for b in batches) <= 0:
        logger.warning(f"Rejected submission for {date} / {page_name}: no orders")
        raise ValueError("Please enter at least one product with a quantity.")

    merged = merge_batches(
        store.read_day(date),
        batches,
        page_name,
        global_updates,
        date              = date,
        page_ad_total     = page_ad_total,
        page_salary_total = page_salary_total,
    )
    record = _persist(store, merged)
    logger.info(
        f"Added {len(batches)} batch(es) for {page_name} on {date}; "
        f"day profit now {record.summary.total_profit:,.2f}"
    )
    return record


def update_day_costs(store, date: str, global_updates: dict) -> DailyRecord:
    """
    Overwrite a day's shared totals (rate, management salary, office cost,
    bonus) and reallocate.

    Raises:
        LookupError: nothing recorded for date, so nothing to distribute over.
    """
    day = _require_day(store, date)
    record = _persist(store, apply_global_updates(day, global_updates))
    logger.info(f"Updated shared costs for {date}")
    return record


def edit_batch(store, date: str, batch_id: str, **changes) -> DailyRecord:
    """
    Edit one batch's raw inputs (e.g. total_orders=12, return_percent=15)
    and reallocate the whole day.

    Raises:
        LookupError: unknown date or batch id.
        TypeError:   a change names a derived or unknown field.
    """
    unknown = set(changes) - EDITABLE_BATCH_FIELDS
    if unknown:
        raise TypeError(f"Not editable batch field(s): {', '.join(sorted(unknown))}")

    day = _require_day(store, date)
    if day.find_batch(batch_id) is None:
        raise LookupError(f"No batch {batch_id} on {date}.")

    batches = [replace(b, **changes) if b.id == batch_id else b for b in day.batches]
    record = _persist(store, replace(day, batches=batches))
    logger.info(f"Edited batch {batch_id} on {date}: {sorted(changes)}")
    return record


def delete_batch(store, date: str, batch_id: str) -> DailyRecord:
    """
    Remove one batch and reallocate what remains.

    Raises:
        LookupError: unknown date or batch id.
    """
    day = _require_day(store, date)
    if day.find_batch(batch_id) is None:
        raise LookupError(f"No batch {batch_id} on {date}.")

    remaining = [b for b in day.batches if b.id != batch_id]
    record = _persist(store, replace(day, batches=remaining))
    logger.info(f"Deleted batch {batch_id} on {date}")
    return record


def recompute_all(store) -> int:
    """Reallocate and rewrite every stored day whose summary is stale."""
    repaired = 0
    for day in store.read_all():
        if summary_is_consistent(day):
            continue
        logger.warning(f"Stale summary on {day.date}; recomputing")
        _persist(store, day)
        repaired += 1
    return repaired
