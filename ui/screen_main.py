"""
ui/screen_main.py
-----------------
Single-page side-by-side layout.
Left:  batch entry form (page, product rows, page costs, day-wide costs).
Right: the selected day's allocated sheet, batch edits and removal.
Below: filtered reports across all stored days.

This file only owns the page layout and the orchestrator calls.
All rendering logic lives in ui/components/.
All input helpers live in ui/utils/.

Pre-filled inputs are keyed on the date, page and stored value they show,
so switching page or date (or a change in what is stored) re-seeds them.
"""

from __future__ import annotations
from datetime import date as _date

import pandas as pd
import streamlit as st

from config.settings             import get_entry_defaults
from engine.merger               import page_totals
from engine.orchestrator         import (
    delete_batch,
    edit_batch,
    recompute_all,
    submit_batch,
    update_day_costs,
)
from engine.store                import JsonDayStore
from ui.components.day_sheet     import render_batch_editor, render_day_sheet, render_day_summary
from ui.components.reports_panel import render_reports
from ui.utils.inputs             import build_batches, clean_number

_EMPTY_ROW = {"name": "", "qty": "0", "sale": "0", "buy": "0"}


def _flash(message: str) -> None:
    """Queue a success notice for the next run (st.rerun drops this one)."""
    st.session_state["flash"] = message


def _bump_form_version() -> None:
    st.session_state["form_version"] = st.session_state.get("form_version", 0) + 1


def render_home() -> None:
    store = JsonDayStore()
    defaults = get_entry_defaults()
    version = st.session_state.get("form_version", 0)

    notice = st.session_state.pop("flash", None)
    if notice:
        st.success(notice)

    left, right = st.columns([1, 1], gap="large")

    # ── LEFT PANEL ────────────────────────────────────────────────────────────
    with left:
        st.markdown("### 📝 New Batch")

        day_str = st.date_input("Date", value=_date.today(), key="entry_date").isoformat()
        day = store.read_day(day_str)

        pages = store.list_page_names()
        page_name = st.selectbox("Page", options=[""] + pages, key="entry_page")
        with st.expander("Manage pages"):
            new_page = st.text_input("New page name", key="new_page_name")
            if st.button("Add page", key="btn_add_page") and new_page.strip():
                store.save_page_name(new_page)
                _flash(f"Added page {new_page.strip()}.")
                st.rerun()
            gone = st.selectbox("Page to remove", options=[""] + pages, key=f"remove_page_{len(pages)}")
            if st.button("Remove page", key="btn_remove_page") and gone:
                store.delete_page_name(gone)
                _flash(f"Removed page {gone}. Its recorded batches are kept.")
                st.rerun()

        # ── Product rows ──────────────────────────────────────────────────────
        st.markdown("**Products**")
        if not st.session_state.get("product_rows"):
            st.session_state["product_rows"] = [dict(_EMPTY_ROW)]
        edited = st.data_editor(
            pd.DataFrame(st.session_state["product_rows"]),
            num_rows="dynamic",
            width="stretch",
            hide_index=True,
            key=f"product_editor_{version}",
            column_config={
                "name": "Product",
                "qty":  "Qty",
                "sale": "Sale price",
                "buy":  "Buy price",
            },
        )
        product_rows = edited.fillna("").to_dict("records")

        # ── Page costs (cumulative for the day) ──────────────────────────────
        recorded_ad, recorded_sal = page_totals(day, page_name) if page_name else (0.0, 0.0)
        day_rate = day.dollar_rate if day else defaults["dollar_rate"]
        st.markdown("**Page costs (total for today)**")
        st.caption(f"Already recorded today: ${recorded_ad:,.2f} ads · ৳{recorded_sal:,.0f} salary")
        pc1, pc2, pc3 = st.columns(3)
        ad_total = clean_number(pc1.text_input(
            "Ad spend $", value=f"{recorded_ad:g}",
            key=f"ad_total_{day_str}_{page_name}_{recorded_ad:g}",
        ))
        rate = clean_number(pc2.text_input(
            "Dollar rate", value=f"{day_rate:g}",
            key=f"rate_{day_str}_{day_rate:g}",
        ))
        salary_total = clean_number(pc3.text_input(
            "Page salary ৳", value=f"{recorded_sal:g}",
            key=f"sal_total_{day_str}_{page_name}_{recorded_sal:g}",
        ))

        # ── Logistics ─────────────────────────────────────────────────────────
        lc1, lc2, lc3, lc4 = st.columns(4)
        return_pct = clean_number(lc1.text_input("Return %",    value=f"{defaults['return_percent']:g}"))
        delivery   = clean_number(lc2.text_input("Delivery ৳",  value=f"{defaults['delivery_charge']:g}"))
        packing    = clean_number(lc3.text_input("Packing ৳",   value=f"{defaults['packaging_cost']:g}"))
        cod_pct    = clean_number(lc4.text_input("COD %",       value=f"{defaults['cod_percent']:g}"))

        # ── Day-wide costs ────────────────────────────────────────────────────
        mgmt_now   = day.total_management_salary if day else 0.0
        office_now = day.total_office_cost if day else 0.0
        bonus_now  = day.total_daily_bonus if day else 0.0
        with st.expander("🏢 Day-wide costs", expanded=day is None):
            gc1, gc2, gc3 = st.columns(3)
            mgmt   = clean_number(gc1.text_input("Mgmt salary ৳", value=f"{mgmt_now:g}",
                                                 key=f"mgmt_{day_str}_{mgmt_now:g}"))
            office = clean_number(gc2.text_input("Office cost ৳", value=f"{office_now:g}",
                                                 key=f"office_{day_str}_{office_now:g}"))
            bonus  = clean_number(gc3.text_input("Daily bonus ৳", value=f"{bonus_now:g}",
                                                 key=f"bonus_{day_str}_{bonus_now:g}"))
        global_updates = {
            "dollar_rate":             rate,
            "total_management_salary": mgmt,
            "total_office_cost":       office,
            "total_daily_bonus":       bonus,
        }

        b1, b2 = st.columns(2)
        if b1.button("💾 Add Batch", type="primary", width="stretch", key="btn_submit"):
            try:
                batches = build_batches(
                    product_rows,
                    page_name       = page_name,
                    return_percent  = return_pct,
                    dollar_rate     = rate,
                    delivery_charge = delivery,
                    packaging_cost  = packing,
                    cod_percent     = cod_pct,
                )
                record = submit_batch(
                    store, day_str, page_name, batches, global_updates,
                    page_ad_total     = ad_total,
                    page_salary_total = salary_total,
                )
                st.session_state["last_record"] = record
                st.session_state["product_rows"] = [dict(_EMPTY_ROW)]
                _bump_form_version()
                _flash("Batch added.")
                st.rerun()
            except Exception as exc:
                st.error(f"**Could not add batch:** {exc}")

        if b2.button("🔄 Update day costs only", width="stretch", key="btn_costs"):
            try:
                st.session_state["last_record"] = update_day_costs(store, day_str, global_updates)
                _flash("Day costs updated.")
                st.rerun()
            except Exception as exc:
                st.error(f"**Could not update costs:** {exc}")

    # ── RIGHT PANEL ───────────────────────────────────────────────────────────
    with right:
        st.markdown(f"### 📊 Day Sheet · {day_str}")
        if day is None:
            st.caption("Nothing recorded for this date yet.")
        else:
            render_day_summary(day)
            render_day_sheet(day)

            edits = render_batch_editor(day, key=f"batch_editor_{day_str}_{version}")
            if edits and st.button("💾 Save edits", key="btn_save_edits"):
                try:
                    for batch_id, changes in edits.items():
                        st.session_state["last_record"] = edit_batch(store, day_str, batch_id, **changes)
                    _bump_form_version()
                    _flash(f"Saved edits to {len(edits)} batch(es).")
                    st.rerun()
                except Exception as exc:
                    st.error(f"**Could not save edits:** {exc}")

            with st.expander("🗑️ Remove a batch"):
                labels = {
                    f"{b.page_name} · {b.product_name} · {b.total_orders} orders (#{b.id[:6]})": b.id
                    for b in day.batches
                }
                choice = st.selectbox("Batch", options=list(labels), key=f"delete_choice_{version}")
                if st.button("Delete batch", key="btn_delete") and choice:
                    try:
                        st.session_state["last_record"] = delete_batch(store, day_str, labels[choice])
                        _bump_form_version()
                        _flash("Batch deleted.")
                        st.rerun()
                    except Exception as exc:
                        st.error(f"**Could not delete batch:** {exc}")

    # ── REPORTS ───────────────────────────────────────────────────────────────
    st.divider()
    h1, h2 = st.columns([3, 1])
    h1.markdown("### 📈 Reports")
    if h2.button("🔁 Recompute stored days", width="stretch", key="btn_recompute"):
        repaired = recompute_all(store)
        _flash(f"Recomputed {repaired} day(s) with stale totals.")
        st.rerun()
    render_reports(store.read_all())
