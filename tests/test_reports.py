import pytest

from engine.allocator import allocate
from engine.records import Batch, DailyRecord
from engine.reports import (
    batches_frame,
    cost_breakdown,
    daily_series,
    filter_records,
    overview_stats,
    page_profit,
    profit_matrix,
)


def _records():
    d1 = allocate(DailyRecord(
        date="2025-07-01", dollar_rate=100, total_management_salary=200,
        batches=[
            Batch(page_name="Page A", total_orders=10, return_percent=20, sale_price=500,
                  purchase_cost=200, page_ad_spend_foreign=10, delivery_charge_per_unit=90,
                  cod_fee_percent=1),
            Batch(page_name="Page B", total_orders=10, return_percent=10, sale_price=300,
                  purchase_cost=100),
        ],
    ))
    d2 = allocate(DailyRecord(
        date="2025-08-02", dollar_rate=100, total_office_cost=50,
        batches=[Batch(page_name="Page A", total_orders=5, sale_price=400, purchase_cost=150)],
    ))
    return [d1, d2]


def test_filter_records():
    records = _records()
    assert [r.date for r in filter_records(records)] == ["2025-08-02", "2025-07-01"]
    assert [r.date for r in filter_records(records, month="2025-07")] == ["2025-07-01"]
    assert [r.date for r in filter_records(records, month="2025-07", day="2025-08-02")] == ["2025-08-02"]
    assert filter_records(records, day="2025-01-01") == []


def test_batches_frame_rows():
    df = batches_frame(_records())
    assert len(df) == 3
    first = df.iloc[0]
    assert first["return_count"] == 2
    assert first["delivered_count"] == 8
    assert first["ad_cost_local"] == pytest.approx(1000)
    assert first["cod_total"] == pytest.approx(5 * 8)


def test_overview_agrees_with_summaries():
    records = _records()
    stats = overview_stats(records)
    assert stats["total_profit"] == pytest.approx(sum(r.summary.total_profit for r in records))
    assert stats["return_loss"] == pytest.approx(sum(r.summary.total_return_loss for r in records))
    assert stats["delivered_count"] == sum(r.summary.total_delivered for r in records)
    assert stats["returned_count"] == 2 + 1
    assert stats["returned_value"] == pytest.approx(2 * 500 + 1 * 300)


def test_overview_of_nothing():
    assert overview_stats([])["total_profit"] == 0.0


def test_daily_series_and_page_profit():
    records = _records()
    series = daily_series(records)
    assert list(series["date"]) == ["2025-07-01", "2025-08-02"]
    assert list(series["orders"]) == [20, 5]

    pages = page_profit(records)
    assert set(pages["page"]) == {"Page A", "Page B"}
    assert pages["profit"].sum() == pytest.approx(sum(r.summary.total_profit for r in records))


def test_profit_matrix():
    records = _records()
    matrix = profit_matrix(records)
    assert list(matrix.columns) == ["Page A", "Page B", "total"]
    assert list(matrix.index) == ["2025-08-02", "2025-07-01"]
    assert matrix.loc["2025-08-02", "Page B"] == 0
    for r in records:
        assert matrix.loc[r.date, "total"] == pytest.approx(r.summary.total_profit)


def test_cost_breakdown():
    records = _records()
    totals = cost_breakdown(records)
    assert totals["cogs_processed"] == pytest.approx(10 * 200 + 10 * 100 + 5 * 150)
    assert totals["ad_cost_local"] == pytest.approx(1000)
    assert totals["management_salary"] == 200
    assert totals["office"] == 50
    assert totals["total_salary"] == pytest.approx(200)
    assert totals["delivery"] == pytest.approx(900)
    assert totals["cod"] == pytest.approx(40)
    assert totals["orders"] == 25
    assert totals["net_profit"] == pytest.approx(sum(r.summary.total_profit for r in records))


def test_stale_records_are_reallocated_for_display():
    raw = DailyRecord(
        date="2025-07-05", dollar_rate=100,
        batches=[Batch(page_name="Page A", total_orders=4, sale_price=100)],
    )
    assert overview_stats([raw])["total_profit"] == pytest.approx(400)
    assert daily_series([raw])["profit"].iloc[0] == pytest.approx(400)
