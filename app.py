"""
app.py
------
Page Profit Ledger: daily batch entry with live day sheet.
Left: entry form. Right: the selected day's allocated sheet.

Run with:
    streamlit run app.py
"""

import logging

import streamlit as st

logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="Page Profit Ledger",
    page_icon="📒",
    layout="wide",
    initial_sidebar_state="collapsed",
    menu_items={
        "Get Help": None,
        "Report a bug": None,
        "About": "**Page Profit Ledger** — daily cost allocation per marketing page",
    },
)

# ── Session state defaults ──────────────────────────────────────────────────
DEFAULTS: dict = {
    "product_rows": None,
    "last_record":  None,
    "form_version": 0,
}
for key, val in DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = val

# ── Header ───────────────────────────────────────────────────────────────────
st.markdown("## 📒 Page Profit Ledger")
st.caption("Daily batches · shared cost allocation · net profit per page")
st.divider()

# ── Single page ──────────────────────────────────────────────────────────────
from ui.screen_main import render_home
render_home()
