import json

from engine.allocator import allocate
from engine.records import Batch, DailyRecord
from engine.store import DEFAULT_PAGE_NAMES, JsonDayStore


def _record(date="2025-06-01"):
    return allocate(DailyRecord(
        date=date, dollar_rate=126, total_management_salary=500,
        batches=[Batch(page_name="Page A", product_name="Combo A", total_orders=12,
                       return_percent=20, sale_price=1500, purchase_cost=620,
                       page_ad_spend_foreign=30, dollar_rate=124)],
    ))


def test_missing_file_reads_empty(store):
    assert store.read_all() == []
    assert store.read_day("2025-06-01") is None
    assert store.list_page_names() == DEFAULT_PAGE_NAMES


def test_write_and_read_back(store):
    record = _record()
    store.write_day(record)
    assert store.read_day(record.date) == record
    assert store.read_all() == [record]


def test_write_replaces_same_date(store):
    store.write_day(_record())
    store.write_day(_record("2025-06-02"))
    replacement = _record()
    store.write_day(replacement)

    days = store.read_all()
    assert sorted(d.date for d in days) == ["2025-06-01", "2025-06-02"]
    assert store.read_day("2025-06-01").id == replacement.id


def test_file_uses_camel_case_schema(store):
    store.write_day(_record())
    raw = json.loads(store.path.read_text(encoding="utf-8"))
    day = raw["days"][0]

    assert set(day) == {
        "id", "date", "dollarRate", "totalManagementSalary", "totalOfficeCost",
        "totalDailyBonus", "batches", "summary",
    }
    assert {"pageName", "productName", "totalOrders", "returnPercent", "salePrice",
            "purchaseCost", "pageAdSpendForeign", "dollarRate", "pageSalary",
            "deliveryChargePerUnit", "packagingCostPerUnit", "manualAdjustment",
            "codFeePercent", "computedNetProfit", "computedReturnLoss",
            "computedTotalSales"} <= set(day["batches"][0])
    assert set(day["summary"]) == {
        "totalProfit", "totalOrders", "totalReturnLoss", "totalDelivered", "totalSales",
    }


def test_loose_values_are_coerced(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps([{
        "date": "2025-06-03",
        "dollarRate": "126",
        "totalManagementSalary": "",
        "batches": [{
            "pageName": "Page B",
            "totalOrders": "8",
            "salePrice": "650.5",
            "purchaseCost": "abc",
            "dollarRate": None,
        }],
    }]), encoding="utf-8")

    day = JsonDayStore(path).read_day("2025-06-03")
    assert day.dollar_rate == 126
    assert day.total_management_salary == 0
    assert day.summary is None
    b = day.batches[0]
    assert b.total_orders == 8
    assert isinstance(b.total_orders, int)
    assert b.sale_price == 650.5
    assert b.purchase_cost == 0
    assert b.dollar_rate is None
    assert b.id


def test_page_names(store):
    store.save_page_name("  Skin Care ")
    store.save_page_name("Skin Care")
    store.save_page_name("")
    assert store.list_page_names() == DEFAULT_PAGE_NAMES + ["Skin Care"]

    store.delete_page_name("Page B")
    assert "Page B" not in store.list_page_names()


def test_default_path_from_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("PAGE_LEDGER_DATA_PATH", str(tmp_path / "nested" / "days.json"))
    s = JsonDayStore()
    s.write_day(_record())
    assert (tmp_path / "nested" / "days.json").is_file()
