"""
engine/reports.py
-----------------
Read-side aggregates over stored day records.

These are display re-derivations only. Net profit, return loss and sales
always come from the allocator's cached batch fields; counts and cost lines
are re-derived with the same formulas the allocator uses, so the figures
here agree with every day's summary. A record whose cached summary is stale
is reallocated before it is read.

Public API
----------
    filter_records(records, month=None, day=None) -> list[DailyRecord]
    batches_frame(records)   -> pd.DataFrame   one row per batch
    overview_stats(records)  -> dict           headline KPIs
    daily_series(records)    -> pd.DataFrame   date, profit, orders
    page_profit(records)     -> pd.DataFrame   page, profit
    profit_matrix(records)   -> pd.DataFrame   date × page net profit + total
    cost_breakdown(records)  -> dict           totals per cost line
"""

from __future__ import annotations

import logging

import pandas as pd

from engine.allocator import allocate, return_split, summary_is_consistent
from engine.records import DailyRecord

logger = logging.getLogger(__name__)

_FRAME_COLUMNS = [
    "date", "page_name", "product_name", "total_orders", "return_count",
    "delivered_count", "sale_price", "purchase_cost", "ad_spend_foreign",
    "effective_rate", "ad_cost_local", "page_salary", "delivery_total",
    "packing_total", "cod_total", "net_profit", "return_loss", "total_sales",
]


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _trusted(records: list[DailyRecord]) -> list[DailyRecord]:
    out = []
    for r in records:
        if not summary_is_consistent(r):
            logger.warning(f"Stale summary on {r.date}; reallocating for display")
            r = allocate(r)
        out.append(r)
    return out


def filter_records(
    records: list[DailyRecord],
    month: str | None = None,
    day: str | None = None,
) -> list[DailyRecord]:
    """
    Keep one day (YYYY-MM-DD) or one month (YYYY-MM); newest first.
    A day filter wins over a month filter.
    """
    if day:
        kept = [r for r in records if r.date == day]
    elif month:
        kept = [r for r in records if r.date.startswith(month)]
    else:
        kept = list(records)
    return sorted(kept, key=lambda r: r.date, reverse=True)


def batches_frame(records: list[DailyRecord]) -> pd.DataFrame:
    """Flatten records into one row per batch with re-derived cost lines."""
    rows = []
    for rec in _trusted(records):
        for b in rec.batches:
            return_count, delivered = return_split(b.total_orders, b.return_percent)
            rate = b.dollar_rate or rec.dollar_rate or 0.0
            rows.append({
                "date":             rec.date,
                "page_name":        b.page_name,
                "product_name":     b.product_name,
                "total_orders":     b.total_orders,
                "return_count":     return_count,
                "delivered_count":  delivered,
                "sale_price":       b.sale_price,
                "purchase_cost":    b.purchase_cost,
                "ad_spend_foreign": b.page_ad_spend_foreign,
                "effective_rate":   rate,
                "ad_cost_local":    b.page_ad_spend_foreign * rate,
                "page_salary":      b.page_salary,
                "delivery_total":   b.delivery_charge_per_unit * b.total_orders,
                "packing_total":    b.packaging_cost_per_unit * b.total_orders,
                "cod_total":        b.sale_price * b.cod_fee_percent / 100.0 * delivered,
                "net_profit":       b.computed_net_profit,
                "return_loss":      b.computed_return_loss,
                "total_sales":      b.computed_total_sales,
            })
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


# ─────────────────────────────────────────────────────────────────────────────
# Aggregates
# ─────────────────────────────────────────────────────────────────────────────

def overview_stats(records: list[DailyRecord]) -> dict:
    """Total profit, delivered / returned units and their sale value, return loss."""
    df = batches_frame(records)
    if df.empty:
        return {
            "total_profit": 0.0, "delivered_count": 0, "delivered_value": 0.0,
            "returned_count": 0, "returned_value": 0.0, "return_loss": 0.0,
        }
    return {
        "total_profit":    float(df["net_profit"].sum()),
        "delivered_count": int(df["delivered_count"].sum()),
        "delivered_value": float((df["delivered_count"] * df["sale_price"]).sum()),
        "returned_count":  int(df["return_count"].sum()),
        "returned_value":  float((df["return_count"] * df["sale_price"]).sum()),
        "return_loss":     float(df["return_loss"].sum()),
    }


def daily_series(records: list[DailyRecord]) -> pd.DataFrame:
    """Net profit and orders per date, oldest first."""
    trusted = _trusted(records)
    df = pd.DataFrame(
        [{"date": r.date,
          "profit": r.summary.total_profit,
          "orders": r.summary.total_orders} for r in trusted],
        columns=["date", "profit", "orders"],
    )
    return df.sort_values("date").reset_index(drop=True)


def page_profit(records: list[DailyRecord]) -> pd.DataFrame:
    """Net profit per page across all given days, best first."""
    df = batches_frame(records)
    out = (
        df.groupby("page_name", as_index=False)["net_profit"].sum()
          .rename(columns={"page_name": "page", "net_profit": "profit"})
    )
    return out.sort_values("profit", ascending=False).reset_index(drop=True)


def profit_matrix(records: list[DailyRecord]) -> pd.DataFrame:
    """
    Pivot: one row per date (newest first), one column per page (sorted),
    cells = net profit, plus a `total` column. Pages absent on a date are 0.
    """
    df = batches_frame(records)
    if df.empty:
        return pd.DataFrame(columns=["total"])
    matrix = df.pivot_table(
        index="date", columns="page_name", values="net_profit",
        aggfunc="sum", fill_value=0.0,
    )
    matrix = matrix.reindex(sorted(matrix.columns), axis=1)
    matrix.columns.name = None
    matrix["total"] = matrix.sum(axis=1)
    return matrix.sort_index(ascending=False)


def cost_breakdown(records: list[DailyRecord]) -> dict:
    """
    Totals per cost line across the given days.

    cogs_processed is purchase cost over all ordered units (goods handled),
    not only the delivered units charged against profit.
    """
    trusted = _trusted(records)
    df = batches_frame(trusted)

    mgmt   = float(sum(r.total_management_salary for r in trusted))
    office = float(sum(r.total_office_cost for r in trusted))
    bonus  = float(sum(r.total_daily_bonus for r in trusted))

    def col(name: str) -> float:
        return float(df[name].sum())

    page_salary = col("page_salary")

    return {
        "cogs_processed":    float((df["purchase_cost"] * df["total_orders"]).sum()),
        "ad_cost_local":     col("ad_cost_local"),
        "page_salary":       page_salary,
        "management_salary": mgmt,
        "total_salary":      page_salary + mgmt,
        "bonus":             bonus,
        "office":            office,
        "cod":               col("cod_total"),
        "delivery":          col("delivery_total"),
        "packing":           col("packing_total"),
        "return_loss":       col("return_loss"),
        "sales":             col("total_sales"),
        "net_profit":        col("net_profit"),
        "orders":            int(col("total_orders")),
        "delivered":         int(col("delivered_count")),
    }
