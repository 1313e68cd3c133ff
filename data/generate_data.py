"""
Seeds data/daily_records.json with two weeks of sample batches.

Run from the repository root:
    python -m data.generate_data
"""
import logging
from datetime import date, timedelta
from pathlib import Path

import numpy as np

from engine.orchestrator import submit_batch
from engine.records import Batch
from engine.store import JsonDayStore

rng = np.random.default_rng(42)

# ──────────────────────────────────────────────────────────────────────────────
# Config: pages and the products each one sells
# ──────────────────────────────────────────────────────────────────────────────
PAGE_CONFIG = {
    "Page A": {
        "ad_dollar": 60, "salary": 800,
        "products": {
            "Product 1": {"sale": 1200, "buy": 450, "base": 25},
            "Combo A":   {"sale": 1500, "buy": 620, "base": 12},
        },
    },
    "Page B": {
        "ad_dollar": 35, "salary": 500,
        "products": {
            "Hair Oil 200ml": {"sale": 650, "buy": 210, "base": 30},
        },
    },
    "Health Zone": {
        "ad_dollar": 80, "salary": 1000,
        "products": {
            "Herbal Tea":    {"sale": 890,  "buy": 300, "base": 18},
            "Protein Combo": {"sale": 2400, "buy": 1350, "base": 8},
        },
    },
}

DAYS = 14
OUT_PATH = Path(__file__).parent / "daily_records.json"


def generate_data():
    store = JsonDayStore(OUT_PATH)
    start = date.today() - timedelta(days=DAYS)

    for d in range(DAYS):
        day = (start + timedelta(days=d)).isoformat()
        globals_ = {
            "dollar_rate":             float(rng.choice([122, 124, 126])),
            "total_management_salary": 1500.0,
            "total_office_cost":       700.0,
            "total_daily_bonus":       float(rng.choice([0, 200, 300])),
        }
        for page, cfg in PAGE_CONFIG.items():
            ad_scale = rng.uniform(0.8, 1.25)
            batches = [
                Batch(
                    page_name                = page,
                    product_name             = name,
                    total_orders             = max(1, int(p["base"] * ad_scale + rng.normal(0, p["base"] * 0.2))),
                    return_percent           = float(rng.choice([15, 20, 25])),
                    sale_price               = p["sale"],
                    purchase_cost            = p["buy"],
                    delivery_charge_per_unit = 90,
                    packaging_cost_per_unit  = 6,
                    cod_fee_percent          = 1,
                )
                for name, p in cfg["products"].items()
            ]
            submit_batch(
                store, day, page, batches, globals_,
                page_ad_total     = round(cfg["ad_dollar"] * ad_scale, 2),
                page_salary_total = cfg["salary"],
            )

    print(f"Dataset generated: {DAYS} days across {len(PAGE_CONFIG)} pages → {OUT_PATH}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    generate_data()
