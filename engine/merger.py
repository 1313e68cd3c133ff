"""
engine/merger.py
----------------
Folds a newly submitted batch set for one page into a day's record.

The entry form asks for a page's *cumulative* ad spend and salary for the
day ("this page has spent $80 today"), not the increment since the last
submission. Appending that figure as-is would count the earlier part twice,
so the merger records only the delta:

    delta_ad     = stated page ad total     − Σ ad already stored for the page
    delta_salary = stated page salary total − Σ salary already stored for the page

The delta (possibly negative, for a downward correction) is split across the
new batches by their order weight. Day-wide fields are overwritten, not
accumulated.

The returned record is NOT allocated. Callers pass it through
engine.allocator.allocate() before persisting.

No Streamlit imports. Pure Python.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from config.settings import get_default_dollar_rate
from engine.records import Batch, DailyRecord

logger = logging.getLogger(__name__)

_GLOBAL_FIELDS = ("total_management_salary", "total_office_cost", "total_daily_bonus")


# ─────────────────────────────────────────────────────────────────────────────
# Internal helpers
# ─────────────────────────────────────────────────────────────────────────────

def _new_day(date: str, global_updates: dict) -> DailyRecord:
    return DailyRecord(
        date                    = date,
        dollar_rate             = float(global_updates.get("dollar_rate") or get_default_dollar_rate()),
        total_management_salary = float(global_updates.get("total_management_salary") or 0.0),
        total_office_cost       = float(global_updates.get("total_office_cost") or 0.0),
        total_daily_bonus       = float(global_updates.get("total_daily_bonus") or 0.0),
    )


def apply_global_updates(day: DailyRecord, global_updates: dict) -> DailyRecord:
    changes: dict = {}
    # A zero rate means "not provided"
    if global_updates.get("dollar_rate"):
        changes["dollar_rate"] = float(global_updates["dollar_rate"])
    for name in _GLOBAL_FIELDS:
        if global_updates.get(name) is not None:
            changes[name] = float(global_updates[name])
    return replace(day, **changes) if changes else day


def _split_delta(new_batches: list[Batch], delta_ad: float, delta_salary: float) -> list[Batch]:
    total_new_orders = sum(b.total_orders for b in new_batches)
    split = []
    for i, b in enumerate(new_batches):
        if total_new_orders:
            weight = b.total_orders / total_new_orders
        else:
            weight = 1.0 if i == 0 else 0.0
        split.append(replace(
            b,
            page_ad_spend_foreign = delta_ad * weight,
            page_salary           = delta_salary * weight,
        ))
    return split


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def page_totals(day: DailyRecord | None, page_name: str) -> tuple[float, float]:
    """(ad spend in dollars, salary) already recorded today for page_name."""
    if day is None:
        return 0.0, 0.0
    rows = day.page_batches(page_name)
    return (
        sum(b.page_ad_spend_foreign for b in rows),
        sum(b.page_salary for b in rows),
    )


def merge_batches(
    day: DailyRecord | None,
    new_batches: list[Batch],
    page_name: str,
    global_updates: dict | None = None,
    *,
    date: str | None = None,
    page_ad_total: float | None = None,
    page_salary_total: float | None = None,
) -> DailyRecord:
    """
    Merge new_batches for page_name into day, recording only the page delta.

    Args:
        day               : Stored record for the date, or None for a new day.
        new_batches       : Rows being submitted. Not modified.
        page_name         : Page the rows belong to (overrides their pageName).
        global_updates    : Optional dollar_rate / total_management_salary /
                            total_office_cost / total_daily_bonus overwrites.
        date              : Required when day is None.
        page_ad_total     : User-stated cumulative dollar ad spend for the page.
                            None → Σ of the new batches' own pageAdSpendForeign.
        page_salary_total : Same, for page salary.

    Returns:
        DailyRecord: merged and unallocated.
    """
    global_updates = global_updates or {}

    if day is None:
        if date is None:
            raise ValueError("merge_batches needs a date when no day record exists")
        day = _new_day(date, global_updates)
        logger.debug(f"Creating day record for {date}")
    else:
        day = apply_global_updates(day, global_updates)

    stated_ad = (page_ad_total if page_ad_total is not None
                 else sum(b.page_ad_spend_foreign for b in new_batches))
    stated_salary = (page_salary_total if page_salary_total is not None
                     else sum(b.page_salary for b in new_batches))

    existing_ad, existing_salary = page_totals(day, page_name)
    delta_ad     = stated_ad - existing_ad
    delta_salary = stated_salary - existing_salary

    logger.debug(
        f"{day.date} / {page_name}: ad {existing_ad:,.2f} → {stated_ad:,.2f} "
        f"(Δ {delta_ad:,.2f}), salary {existing_salary:,.2f} → {stated_salary:,.2f} "
        f"(Δ {delta_salary:,.2f})"
    )

    incoming = [replace(b, page_name=page_name) for b in new_batches]
    incoming = _split_delta(incoming, delta_ad, delta_salary)

    return replace(day, batches=[*day.batches, *incoming])
