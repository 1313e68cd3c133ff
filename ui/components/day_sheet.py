"""
ui/components/day_sheet.py
--------------------------
Summary metrics, per-batch table and the editable batch grid for one day.
"""

from __future__ import annotations
import pandas as pd
import streamlit as st

from engine.allocator import batch_breakdown
from engine.records   import DailyRecord
from ui.utils.inputs  import batch_changes, batch_rows


def render_day_summary(record: DailyRecord) -> None:
    """Four headline metrics from the record's cached summary."""
    s = record.summary
    if s is None:
        return
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Net Profit",  f"৳{s.total_profit:,.0f}")
    c2.metric("Orders",      f"{s.total_orders:,}")
    c3.metric("Delivered",   f"{s.total_delivered:,}")
    c4.metric("Return Loss", f"৳{s.total_return_loss:,.0f}")


def render_day_sheet(record: DailyRecord) -> None:
    """
    Per-batch table: order split, distributed shared costs and profit.
    Figures come from the allocator's breakdown so they match the summary.
    """
    if not record.batches:
        st.caption("No batches recorded for this date yet.")
        return

    rows = []
    for r in batch_breakdown(record):
        rows.append({
            "Page":        r["page_name"],
            "Product":     r["product_name"],
            "Orders":      r["total_orders"],
            "Delivered":   r["delivered_count"],
            "Returned":    r["return_count"],
            "Ad $":        f"{r['ad_share']:,.2f}",
            "Ad ৳":        f"{r['ad_cost_local']:,.0f}",
            "Ops ৳":       f"{r['ops_total']:,.0f}",
            "COD ৳":       f"{r['cod_total']:,.0f}",
            "Return Loss": f"{r['return_loss']:,.0f}",
            "Sales ৳":     f"{r['total_revenue']:,.0f}",
            "Profit ৳":    f"{r['net_profit']:,.0f}",
        })

    st.dataframe(pd.DataFrame(rows), width="stretch", hide_index=True)

    with st.expander("📊 Shared costs for the day"):
        a, b, c, d = st.columns(4)
        a.metric("Dollar rate",       f"{record.dollar_rate:,.2f}")
        b.metric("Management salary", f"৳{record.total_management_salary:,.0f}")
        c.metric("Office cost",       f"৳{record.total_office_cost:,.0f}")
        d.metric("Daily bonus",       f"৳{record.total_daily_bonus:,.0f}")


_EDIT_LABELS = {
    "page_name":                "Page",
    "product_name":             "Product",
    "total_orders":             "Orders",
    "return_percent":           "Return %",
    "sale_price":               "Sale ৳",
    "purchase_cost":            "Buy ৳",
    "page_ad_spend_foreign":    "Ad $ share",
    "dollar_rate":              "Rate",
    "page_salary":              "Salary share ৳",
    "delivery_charge_per_unit": "Delivery ৳",
    "packaging_cost_per_unit":  "Packing ৳",
    "manual_adjustment":        "Hazira/Adj ৳",
    "cod_fee_percent":          "COD %",
}


def render_batch_editor(record: DailyRecord, key: str) -> dict[str, dict]:
    """
    Editable grid of every batch's raw inputs. Returns the pending changes
    per batch id; the caller decides when to save them.
    """
    if not record.batches:
        return {}

    with st.expander("✏️ Edit batches"):
        st.caption("Blank rate = use the day rate. Shares are re-weighted on save.")
        df = pd.DataFrame(batch_rows(record)).set_index("id")
        edited = st.data_editor(
            df,
            num_rows="fixed",
            width="stretch",
            hide_index=True,
            key=key,
            column_config=_EDIT_LABELS,
        )
    return batch_changes(record, edited.reset_index().to_dict("records"))
