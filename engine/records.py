"""
engine/records.py
-----------------
Value types shared by the allocator, the batch merger and the store.

    Batch       : one page + product entry recorded for a calendar date
    DaySummary  : cached day aggregate, always derived from the batches
    DailyRecord : one record per calendar date (the unit of persistence)

Persisted schema
----------------
to_dict() / from_dict() use the camelCase field names below. These names are
the compatibility surface for anything written to disk:

    date, dollarRate, totalManagementSalary, totalOfficeCost, totalDailyBonus,
    batches[], summary{totalProfit, totalOrders, totalReturnLoss,
                       totalDelivered, totalSales}

from_dict() coerces numeric strings to numbers and treats anything else
(blank, None, free text) as 0, so hand-edited or older files load cleanly.

No Streamlit imports. Pure Python.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


# ─────────────────────────────────────────────────────────────────────────────
# Field maps (python attribute → persisted key)
# ─────────────────────────────────────────────────────────────────────────────

_BATCH_FIELDS: dict[str, str] = {
    "id":                       "id",
    "page_name":                "pageName",
    "product_name":             "productName",
    "total_orders":             "totalOrders",
    "return_percent":           "returnPercent",
    "sale_price":               "salePrice",
    "purchase_cost":            "purchaseCost",
    "page_ad_spend_foreign":    "pageAdSpendForeign",
    "dollar_rate":              "dollarRate",
    "page_salary":              "pageSalary",
    "delivery_charge_per_unit": "deliveryChargePerUnit",
    "packaging_cost_per_unit":  "packagingCostPerUnit",
    "manual_adjustment":        "manualAdjustment",
    "cod_fee_percent":          "codFeePercent",
    "computed_net_profit":      "computedNetProfit",
    "computed_return_loss":     "computedReturnLoss",
    "computed_total_sales":     "computedTotalSales",
}

_TEXT_FIELDS = frozenset({"id", "page_name", "product_name"})

# Raw inputs a caller may edit directly; derived fields are allocator-only.
EDITABLE_BATCH_FIELDS = frozenset(_BATCH_FIELDS) - {
    "id", "computed_net_profit", "computed_return_loss", "computed_total_sales",
}

_SUMMARY_FIELDS: dict[str, str] = {
    "total_profit":      "totalProfit",
    "total_orders":      "totalOrders",
    "total_return_loss": "totalReturnLoss",
    "total_delivered":   "totalDelivered",
    "total_sales":       "totalSales",
}


def new_id() -> str:
    return uuid.uuid4().hex


def to_number(value: Any) -> float:
    """
    Coerce a loosely typed value into a float.

    Numbers pass through, numeric strings are parsed, everything else is 0.
    Booleans are not treated as numbers.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip().replace(",", ""))
        except ValueError:
            return 0.0
    return 0.0


def _to_count(value: Any) -> int | float:
    number = to_number(value)
    return int(number) if number.is_integer() else number


# ─────────────────────────────────────────────────────────────────────────────
# Dataclasses
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Batch:
    page_name:                str
    product_name:             str   = ""
    total_orders:             int   = 0
    return_percent:           float = 0.0    # 0–100, not clamped
    sale_price:               float = 0.0    # per unit, local currency
    purchase_cost:            float = 0.0    # per unit, local currency
    page_ad_spend_foreign:    float = 0.0    # page-level, foreign currency
    dollar_rate:              float | None = None  # per-batch override
    page_salary:              float = 0.0    # page-level, local currency
    delivery_charge_per_unit: float = 0.0
    packaging_cost_per_unit:  float = 0.0
    manual_adjustment:        float = 0.0    # flat deduction ("hazira/bonus")
    cod_fee_percent:          float = 0.0    # % of sale price, delivered only
    computed_net_profit:      float = 0.0
    computed_return_loss:     float = 0.0
    computed_total_sales:     float = 0.0
    id:                       str   = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _BATCH_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "Batch":
        kwargs: dict[str, Any] = {}
        for attr, key in _BATCH_FIELDS.items():
            if key not in data:
                continue
            raw = data[key]
            if attr in _TEXT_FIELDS:
                kwargs[attr] = "" if raw is None else str(raw)
            elif attr == "total_orders":
                kwargs[attr] = _to_count(raw)
            elif attr == "dollar_rate":
                kwargs[attr] = to_number(raw) if raw not in (None, "") else None
            else:
                kwargs[attr] = to_number(raw)
        kwargs.setdefault("page_name", "")
        if not kwargs.get("id"):
            kwargs["id"] = new_id()
        return cls(**kwargs)


@dataclass
class DaySummary:
    total_profit:      float = 0.0
    total_orders:      int   = 0
    total_return_loss: float = 0.0
    total_delivered:   int   = 0
    total_sales:       float = 0.0

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in _SUMMARY_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "DaySummary":
        return cls(
            total_profit      = to_number(data.get("totalProfit")),
            total_orders      = _to_count(data.get("totalOrders")),
            total_return_loss = to_number(data.get("totalReturnLoss")),
            total_delivered   = _to_count(data.get("totalDelivered")),
            total_sales       = to_number(data.get("totalSales")),
        )


@dataclass
class DailyRecord:
    date:                    str            # YYYY-MM-DD, primary key
    dollar_rate:             float = 0.0    # default local units per dollar
    total_management_salary: float = 0.0
    total_office_cost:       float = 0.0
    total_daily_bonus:       float = 0.0
    batches:                 list[Batch] = field(default_factory=list)
    summary:                 DaySummary | None = None
    id:                      str = field(default_factory=new_id)

    def page_batches(self, page_name: str) -> list[Batch]:
        return [b for b in self.batches if b.page_name == page_name]

    def find_batch(self, batch_id: str) -> Batch | None:
        return next((b for b in self.batches if b.id == batch_id), None)

    def to_dict(self) -> dict:
        return {
            "id":                    self.id,
            "date":                  self.date,
            "dollarRate":            self.dollar_rate,
            "totalManagementSalary": self.total_management_salary,
            "totalOfficeCost":       self.total_office_cost,
            "totalDailyBonus":       self.total_daily_bonus,
            "batches":               [b.to_dict() for b in self.batches],
            "summary":               self.summary.to_dict() if self.summary else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DailyRecord":
        summary = data.get("summary")
        return cls(
            id                      = str(data.get("id") or new_id()),
            date                    = str(data["date"]),
            dollar_rate             = to_number(data.get("dollarRate")),
            total_management_salary = to_number(data.get("totalManagementSalary")),
            total_office_cost       = to_number(data.get("totalOfficeCost")),
            total_daily_bonus       = to_number(data.get("totalDailyBonus")),
            batches                 = [Batch.from_dict(b) for b in data.get("batches") or []],
            summary                 = DaySummary.from_dict(summary) if summary else None,
        )
