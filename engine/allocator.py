"""
engine/allocator.py
-------------------
Shared-cost allocation and per-batch profit for one calendar day.

Every shared cost is spread by order volume:

    Day-wide   (management salary, office cost, daily bonus)
        unit share = day total / Σ totalOrders of the day

    Page-level (ad spend in dollars, page salary)
        batch share = Σ page values × (batch orders / page orders)
        page with zero orders → each batch keeps its own stored value

    Page shares are apportioned in whole millionths: cumulative order
    weights are rounded half up, so a page's shares always add back to
    exactly the page total.

Per batch:
    returnCount    = round_half_up(totalOrders × returnPercent / 100)
    deliveredCount = totalOrders − returnCount
    opsTotal       = ad (local) + salary + mgmt + office + bonus
                     + delivery + packing          [all ordered units]
    codTotal       = salePrice × codFeePercent / 100 × deliveredCount
    returnLoss     = (opsTotal / totalOrders + unit COD) × returnCount
                     [unit COD only when RETURN_LOSS_INCLUDES_COD]
    totalCost      = purchaseCost × deliveredCount + opsTotal + codTotal
                     + manualAdjustment
    netProfit      = salePrice × deliveredCount − totalCost

Return loss is diagnostic only; it is never subtracted from net profit.

The page-level ad spend and salary written back onto each batch are the
per-batch shares. A second pass sees the same page total in millionths and
the same orders, so it reproduces the same output bit for bit.

No Streamlit imports. Pure Python.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from fractions import Fraction

from config.settings import get_return_loss_includes_cod
from engine.records import Batch, DailyRecord, DaySummary

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Internal helpers
# ─────────────────────────────────────────────────────────────────────────────

def _safe_div(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator else 0.0


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves towards +∞ (2.5 → 3, −2.5 → −2)."""
    return int(math.floor(x + 0.5))


def return_split(total_orders: float, return_percent: float) -> tuple[int, float]:
    """Split ordered units into (returnCount, deliveredCount)."""
    return_count = round_half_up(total_orders * return_percent / 100.0)
    return return_count, total_orders - return_count


_SHARE_SCALE = 10 ** 6    # page shares are stored in whole millionths


def _to_units(value: float) -> int:
    return round_half_up(value * _SHARE_SCALE)


def _apportion(total_units: int, orders: list[float]) -> list[int]:
    """
    Split total_units by order weight into integer parts that sum to
    total_units exactly. Exact fractions keep the split independent of
    float rounding.
    """
    page_orders = sum(Fraction(o) for o in orders)
    parts, cum, placed = [], Fraction(0), 0
    for o in orders:
        cum += Fraction(o)
        upto = math.floor(total_units * cum / page_orders + Fraction(1, 2))
        parts.append(upto - placed)
        placed = upto
    return parts


def _page_shares(batches: list[Batch]) -> list[tuple[float, float, float]]:
    """(weight, ad share, salary share) for every batch, in batch order."""
    by_page: dict[str, list[int]] = {}
    for i, b in enumerate(batches):
        by_page.setdefault(b.page_name, []).append(i)

    shares: list[tuple[float, float, float]] = [(0.0, 0.0, 0.0)] * len(batches)
    for idx in by_page.values():
        rows = [batches[i] for i in idx]
        page_orders = sum(b.total_orders for b in rows)
        if not page_orders:
            # Cost-only correction rows: nothing to weigh against
            for i, b in zip(idx, rows):
                shares[i] = (1.0, b.page_ad_spend_foreign, b.page_salary)
            continue

        orders = [b.total_orders for b in rows]
        ad_parts  = _apportion(sum(_to_units(b.page_ad_spend_foreign) for b in rows), orders)
        sal_parts = _apportion(sum(_to_units(b.page_salary) for b in rows), orders)
        for i, b, ad, sal in zip(idx, rows, ad_parts, sal_parts):
            shares[i] = (b.total_orders / page_orders, ad / _SHARE_SCALE, sal / _SHARE_SCALE)
    return shares


def _effective_rate(batch: Batch, record: DailyRecord) -> float:
    return batch.dollar_rate or record.dollar_rate or 0.0


def _breakdown(
    batch: Batch,
    record: DailyRecord,
    share: tuple[float, float, float],
    unit_mgmt: float,
    unit_office: float,
    unit_bonus: float,
    include_cod: bool,
) -> dict:
    """Every intermediate figure for one batch."""
    orders = batch.total_orders
    weight, ad_share, sal_share = share

    rate = _effective_rate(batch, record)
    ad_local = ad_share * rate

    return_count, delivered_count = return_split(orders, batch.return_percent)

    delivery_total = batch.delivery_charge_per_unit * orders
    packing_total  = batch.packaging_cost_per_unit * orders
    mgmt_total     = unit_mgmt * orders
    office_total   = unit_office * orders
    bonus_total    = unit_bonus * orders

    ops_total = (ad_local + sal_share + mgmt_total + office_total + bonus_total
                 + delivery_total + packing_total)
    unit_ops  = _safe_div(ops_total, orders)

    unit_cod  = batch.sale_price * batch.cod_fee_percent / 100.0
    cod_total = unit_cod * delivered_count

    return_loss = (unit_ops + (unit_cod if include_cod else 0.0)) * return_count

    cogs_delivered = batch.purchase_cost * delivered_count
    total_cost     = cogs_delivered + ops_total + cod_total + batch.manual_adjustment
    total_revenue  = batch.sale_price * delivered_count

    return {
        "weight":          weight,
        "ad_share":        ad_share,
        "salary_share":    sal_share,
        "effective_rate":  rate,
        "ad_cost_local":   ad_local,
        "return_count":    return_count,
        "delivered_count": delivered_count,
        "delivery_total":  delivery_total,
        "packing_total":   packing_total,
        "mgmt_total":      mgmt_total,
        "office_total":    office_total,
        "bonus_total":     bonus_total,
        "ops_total":       ops_total,
        "unit_ops_cost":   unit_ops,
        "unit_cod":        unit_cod,
        "cod_total":       cod_total,
        "return_loss":     return_loss,
        "cogs_delivered":  cogs_delivered,
        "total_cost":      total_cost,
        "total_revenue":   total_revenue,
        "net_profit":      total_revenue - total_cost,
    }


def _iter_breakdowns(record: DailyRecord, include_cod: bool):
    total_day_orders = sum(b.total_orders for b in record.batches)
    unit_mgmt   = _safe_div(record.total_management_salary, total_day_orders)
    unit_office = _safe_div(record.total_office_cost, total_day_orders)
    unit_bonus  = _safe_div(record.total_daily_bonus, total_day_orders)
    shares = _page_shares(record.batches)

    for b, share in zip(record.batches, shares):
        yield b, _breakdown(
            b, record, share,
            unit_mgmt, unit_office, unit_bonus, include_cod,
        )


def _resolve_flag(include_cod_in_return_loss: bool | None) -> bool:
    if include_cod_in_return_loss is None:
        return get_return_loss_includes_cod()
    return include_cod_in_return_loss


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def summarize(batches: list[Batch]) -> DaySummary:
    """Aggregate already-allocated batches into the cached day summary."""
    return DaySummary(
        total_profit      = sum(b.computed_net_profit for b in batches),
        total_orders      = sum(b.total_orders for b in batches),
        total_return_loss = sum(b.computed_return_loss for b in batches),
        total_delivered   = sum(return_split(b.total_orders, b.return_percent)[1] for b in batches),
        total_sales       = sum(b.computed_total_sales for b in batches),
    )


def summary_is_consistent(record: DailyRecord) -> bool:
    """False when the cached summary is missing or disagrees with the batches."""
    return record.summary is not None and record.summary == summarize(record.batches)


def allocate(
    record: DailyRecord,
    *,
    include_cod_in_return_loss: bool | None = None,
) -> DailyRecord:
    """
    Recompute every batch's distributed costs and profit, and the day summary.

    Args:
        record                     : The day to allocate. Not modified.
        include_cod_in_return_loss : Count the nominal COD fee of returned
                                     units as return loss. None reads the
                                     RETURN_LOSS_INCLUDES_COD setting.

    Returns:
        DailyRecord: a new record with per-batch shares and derived fields.
    """
    include_cod = _resolve_flag(include_cod_in_return_loss)

    batches = [
        replace(
            b,
            page_ad_spend_foreign = bd["ad_share"],
            page_salary           = bd["salary_share"],
            computed_net_profit   = bd["net_profit"],
            computed_return_loss  = bd["return_loss"],
            computed_total_sales  = bd["total_revenue"],
        )
        for b, bd in _iter_breakdowns(record, include_cod)
    ]

    summary = summarize(batches)
    logger.debug(
        f"Allocated {record.date}: {len(batches)} batches, "
        f"{summary.total_orders} orders, profit {summary.total_profit:,.2f}"
    )
    return replace(record, batches=batches, summary=summary)


def batch_breakdown(
    record: DailyRecord,
    *,
    include_cod_in_return_loss: bool | None = None,
) -> list[dict]:
    """
    Per-batch intermediate figures for the day sheet view.

    Each row carries the batch identity (id, page, product, orders) plus
    every figure the allocator derives on the way to net profit.
    """
    include_cod = _resolve_flag(include_cod_in_return_loss)
    return [
        {
            "id":           b.id,
            "page_name":    b.page_name,
            "product_name": b.product_name,
            "total_orders": b.total_orders,
            **bd,
        }
        for b, bd in _iter_breakdowns(record, include_cod)
    ]
