"""
ui/components/reports_panel.py
------------------------------
Month/day filtered overview: headline KPIs, profit trend, per-page profit,
the date × page profit sheet and the cost breakdown.
"""

from __future__ import annotations
import streamlit as st

from engine.records import DailyRecord
from engine.reports import (
    cost_breakdown,
    daily_series,
    filter_records,
    overview_stats,
    page_profit,
    profit_matrix,
)


def _pick_filters(records: list[DailyRecord]) -> tuple[str | None, str | None]:
    months = sorted({r.date[:7] for r in records}, reverse=True)
    f1, f2 = st.columns(2)
    month = f1.selectbox("Month", options=["All"] + months, key="report_month")
    month = None if month == "All" else month

    days = [r.date for r in filter_records(records, month=month)]
    day = f2.selectbox("Day", options=["All"] + days, key="report_day")
    return month, None if day == "All" else day


def render_overview(stats: dict) -> None:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Net Profit",  f"৳{stats['total_profit']:,.0f}")
    c2.metric("Delivered",   f"{stats['delivered_count']:,}",
              help=f"Sale value ৳{stats['delivered_value']:,.0f}")
    c3.metric("Returned",    f"{stats['returned_count']:,}",
              help=f"Sale value ৳{stats['returned_value']:,.0f}")
    c4.metric("Return Loss", f"৳{stats['return_loss']:,.0f}")


def render_cost_breakdown(totals: dict) -> None:
    """Where the money went across the filtered days."""
    with st.expander("💸 Cost breakdown"):
        a, b, c = st.columns(3)
        a.metric("Goods processed", f"৳{totals['cogs_processed']:,.0f}")
        a.metric("Ads (local)",     f"৳{totals['ad_cost_local']:,.0f}")
        a.metric("Salaries",        f"৳{totals['total_salary']:,.0f}",
                 help=f"Page ৳{totals['page_salary']:,.0f} · "
                      f"management ৳{totals['management_salary']:,.0f}")
        b.metric("Delivery",        f"৳{totals['delivery']:,.0f}")
        b.metric("Packing",         f"৳{totals['packing']:,.0f}")
        b.metric("COD",             f"৳{totals['cod']:,.0f}")
        c.metric("Office",          f"৳{totals['office']:,.0f}")
        c.metric("Bonus",           f"৳{totals['bonus']:,.0f}")
        c.metric("Sales",           f"৳{totals['sales']:,.0f}")


def render_reports(records: list[DailyRecord]) -> None:
    if not records:
        st.caption("No days recorded yet.")
        return

    month, day = _pick_filters(records)
    selected = filter_records(records, month=month, day=day)

    render_overview(overview_stats(selected))

    t1, t2 = st.columns(2)
    with t1:
        st.markdown("**Daily profit**")
        st.line_chart(daily_series(selected).set_index("date")["profit"])
    with t2:
        st.markdown("**Profit by page**")
        st.bar_chart(page_profit(selected).set_index("page")["profit"])

    st.markdown("**Profit sheet**")
    st.dataframe(profit_matrix(selected).round(0), width="stretch")

    render_cost_breakdown(cost_breakdown(selected))
