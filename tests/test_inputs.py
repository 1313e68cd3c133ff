import math

import pytest

from engine.allocator import allocate
from engine.orchestrator import edit_batch
from engine.records import EDITABLE_BATCH_FIELDS, Batch, DailyRecord
from ui.utils.inputs import BATCH_EDIT_FIELDS, batch_changes, batch_rows, build_batches, clean_number

_LOGISTICS = dict(
    page_name="Page A", return_percent=20, dollar_rate=126,
    delivery_charge=90, packaging_cost=6, cod_percent=1,
)


@pytest.mark.parametrize("raw, expected", [
    ("12", 12.0),
    (" 1,250.5 ", 1250.5),
    ("", 0.0),
    ("abc", 0.0),
    (None, 0.0),
    ("-40", 0.0),
    (7, 7.0),
])
def test_clean_number(raw, expected):
    assert clean_number(raw) == expected


def test_rows_without_quantity_are_dropped():
    rows = [
        {"name": "Combo", "qty": "3", "sale": "1500", "buy": "620"},
        {"name": "Empty", "qty": "0", "sale": "100", "buy": "50"},
        {"name": "Junk", "qty": "x", "sale": "100", "buy": "50"},
    ]
    batches = build_batches(rows, **_LOGISTICS)
    assert [b.product_name for b in batches] == ["Combo"]
    b = batches[0]
    assert b.total_orders == 3
    assert b.sale_price == 1500
    assert b.purchase_cost == 620
    assert b.page_name == "Page A"
    assert b.delivery_charge_per_unit == 90
    assert b.page_ad_spend_foreign == 0


@pytest.mark.parametrize("name", ["", "   ", None, math.nan])
def test_blank_name_becomes_general(name):
    batches = build_batches([{"name": name, "qty": "2"}], **_LOGISTICS)
    assert batches[0].product_name == "General"


def test_zero_rate_means_use_day_rate():
    batches = build_batches([{"name": "A", "qty": "1"}], **{**_LOGISTICS, "dollar_rate": 0})
    assert batches[0].dollar_rate is None


def test_clean_number_treats_nan_as_blank():
    assert clean_number(math.nan) == 0.0


def _day():
    return allocate(DailyRecord(
        date="2025-06-01", dollar_rate=120,
        batches=[
            Batch(page_name="Page A", product_name="Combo", total_orders=10,
                  sale_price=500, purchase_cost=200, page_ad_spend_foreign=12.5),
            Batch(page_name="Page A", product_name="Oil", total_orders=4,
                  sale_price=650, dollar_rate=118),
        ],
    ))


def test_edit_grid_covers_every_editable_field():
    assert set(BATCH_EDIT_FIELDS) == EDITABLE_BATCH_FIELDS
    rows = batch_rows(_day())
    assert [set(r) for r in rows] == [EDITABLE_BATCH_FIELDS | {"id"}] * 2


def test_untouched_grid_has_no_changes():
    day = _day()
    rows = batch_rows(day)
    # The grid hands missing rates back as NaN
    rows[0]["dollar_rate"] = math.nan
    assert batch_changes(day, rows) == {}


def test_grid_edits_become_batch_changes():
    day = _day()
    rows = batch_rows(day)
    rows[0]["manual_adjustment"] = "150"
    rows[0]["total_orders"] = 12.0
    rows[1]["dollar_rate"] = ""
    rows[1]["page_name"] = "  "
    rows.append({"id": "not-a-batch", "total_orders": 3})

    changes = batch_changes(day, rows)
    assert changes == {
        day.batches[0].id: {"manual_adjustment": 150.0, "total_orders": 12},
        day.batches[1].id: {"dollar_rate": None},
    }


def test_grid_edit_flows_into_profit(store):
    day = _day()
    store.write_day(day)
    rows = batch_rows(day)
    rows[0]["manual_adjustment"] = 150

    (batch_id, changes), = batch_changes(day, rows).items()
    after = edit_batch(store, day.date, batch_id, **changes)
    assert after.batches[0].manual_adjustment == 150
    assert after.summary.total_profit == pytest.approx(day.summary.total_profit - 150)
