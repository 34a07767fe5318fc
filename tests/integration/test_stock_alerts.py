from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import InternalError
from app.services.alerts.stock_alert_service import (
    list_low_stock_alerts,
    low_stock_summary,
)
from tests.factories import (
    add_sales,
    create_category,
    create_company,
    create_inventory,
    create_supplier,
    create_warehouse,
    low_stock_item,
)

AS_OF = date(2026, 3, 31)


@pytest.fixture
async def tenant(db):
    company = await create_company(db)
    warehouse = await create_warehouse(db, company, name="Main Warehouse")
    await db.commit()
    return company, warehouse


async def _alerts(db, company, **kwargs):
    return await list_low_stock_alerts(db, company_id=company.id, as_of=AS_OF, **kwargs)


def _by_sku(result) -> dict:
    return {a.sku: a for a in result.alerts}


async def test_threshold_resolution(db, tenant):
    company, wh = tenant
    gadgets = await create_category(db, "Gadgets", low_stock_threshold=20)

    await low_stock_item(db, company, wh, AS_OF, 4, sku="OVR", category_id=gadgets.id, low_stock_threshold=5)
    await low_stock_item(db, company, wh, AS_OF, 12, sku="CAT", category_id=gadgets.id)
    await low_stock_item(db, company, wh, AS_OF, 12, sku="OVR-HIGH", category_id=gadgets.id, low_stock_threshold=5)
    await low_stock_item(db, company, wh, AS_OF, 10, sku="DEFAULT")
    await low_stock_item(db, company, wh, AS_OF, 11, sku="DEFAULT-HIGH")
    await db.commit()

    alerts = _by_sku(await _alerts(db, company))

    assert set(alerts) == {"OVR", "CAT", "DEFAULT"}
    assert alerts["OVR"].threshold == 5
    assert alerts["CAT"].threshold == 20
    assert alerts["DEFAULT"].threshold == 10


async def test_category_without_threshold_falls_back_to_default(db, tenant):
    company, wh = tenant
    misc = await create_category(db, "Misc")

    await low_stock_item(db, company, wh, AS_OF, 9, sku="MISC", category_id=misc.id)
    await db.commit()

    alerts = _by_sku(await _alerts(db, company))
    assert alerts["MISC"].threshold == 10


async def test_available_stock_subtracts_reserved(db, tenant):
    company, wh = tenant
    await low_stock_item(db, company, wh, AS_OF, 20, reserved_quantity=15, sku="RSV")
    await low_stock_item(db, company, wh, AS_OF, 20, reserved_quantity=5, sku="FREE")
    await db.commit()

    alerts = _by_sku(await _alerts(db, company))

    assert set(alerts) == {"RSV"}
    assert alerts["RSV"].current_stock == 5


async def test_products_without_recent_sales_are_excluded(db, tenant):
    company, wh = tenant
    await low_stock_item(db, company, wh, AS_OF, 0, sku="STALE", sales_days_ago=(45,))
    await low_stock_item(db, company, wh, AS_OF, 0, sku="NEVER", sales_days_ago=())
    await low_stock_item(db, company, wh, AS_OF, 0, sku="RECENT", sales_days_ago=(2,))
    await db.commit()

    result = await _alerts(db, company)

    assert [a.sku for a in result.alerts] == ["RECENT"]
    assert result.total_alerts == 1


async def test_sales_window_is_inclusive(db, tenant):
    company, wh = tenant
    await low_stock_item(db, company, wh, AS_OF, 3, sku="EDGE", sales_days_ago=(30,))
    await low_stock_item(db, company, wh, AS_OF, 3, sku="OUTSIDE", sales_days_ago=(31,))
    await db.commit()

    assert set(_by_sku(await _alerts(db, company))) == {"EDGE"}


async def test_sales_in_another_warehouse_do_not_count(db, tenant):
    company, wh = tenant
    second = await create_warehouse(db, company, name="Overflow")
    product, _ = await low_stock_item(db, company, wh, AS_OF, 2, sku="SPLIT", sales_days_ago=())
    await create_inventory(db, product, second, 2)
    await add_sales(db, product, second, AS_OF, [1])
    await db.commit()

    result = await _alerts(db, company)

    assert [(a.sku, a.warehouse_name) for a in result.alerts] == [("SPLIT", "Overflow")]


async def test_inactive_and_foreign_rows_are_excluded(db, tenant):
    company, wh = tenant
    closed = await create_warehouse(db, company, is_active=False)
    other = await create_company(db)
    other_wh = await create_warehouse(db, other)

    await low_stock_item(db, company, wh, AS_OF, 1, sku="RETIRED", is_active=False)
    await low_stock_item(db, company, closed, AS_OF, 1, sku="CLOSED-WH")
    await low_stock_item(db, other, other_wh, AS_OF, 1, sku="OTHER-CO")
    await low_stock_item(db, company, wh, AS_OF, 1, sku="MINE")
    await db.commit()

    result = await _alerts(db, company)

    assert [a.sku for a in result.alerts] == ["MINE"]
    assert result.alerts[0].warehouse_id == wh.id
    assert result.alerts[0].warehouse_name == "Main Warehouse"


async def test_days_until_stockout(db, tenant):
    company, wh = tenant
    # 5 units on each of 10 days -> 5/day
    await low_stock_item(
        db, company, wh, AS_OF, 100,
        sku="STEADY", low_stock_threshold=150,
        sales_days_ago=range(1, 11), quantity_sold=5,
    )
    await low_stock_item(db, company, wh, AS_OF, 0, sku="EMPTY", sales_days_ago=(1, 2), quantity_sold=3)
    await low_stock_item(db, company, wh, AS_OF, 8, sku="IDLE", sales_days_ago=(1, 2), quantity_sold=0)
    await low_stock_item(db, company, wh, AS_OF, 7, sku="SLOW", sales_days_ago=(1, 4, 9), quantity_sold=2)
    await db.commit()

    alerts = _by_sku(await _alerts(db, company))

    assert alerts["STEADY"].days_until_stockout == 20
    assert alerts["EMPTY"].days_until_stockout == 0
    assert alerts["IDLE"].days_until_stockout == 90
    assert alerts["SLOW"].days_until_stockout == 3


async def test_supplier_contact(db, tenant):
    company, wh = tenant
    active = await create_supplier(
        db, name="Acme Parts", contact_email="buy@acme.example", lead_time_days=12
    )
    dormant = await create_supplier(db, is_active=False)

    await low_stock_item(db, company, wh, AS_OF, 1, sku="SUPPLIED", supplier_id=active.id)
    await low_stock_item(db, company, wh, AS_OF, 1, sku="DORMANT", supplier_id=dormant.id)
    await low_stock_item(db, company, wh, AS_OF, 1, sku="ORPHAN")
    await db.commit()

    alerts = _by_sku(await _alerts(db, company))

    supplier = alerts["SUPPLIED"].supplier
    assert supplier.id == active.id
    assert supplier.name == "Acme Parts"
    assert supplier.contact_email == "buy@acme.example"
    assert supplier.lead_time_days == 12
    assert alerts["DORMANT"].supplier is None
    assert alerts["ORPHAN"].supplier is None


async def test_alerts_ordered_by_available_stock(db, tenant):
    company, wh = tenant
    for stock in (7, 0, 3):
        await low_stock_item(db, company, wh, AS_OF, stock, sku=f"S{stock}")
    await db.commit()

    result = await _alerts(db, company)

    assert [a.current_stock for a in result.alerts] == [0, 3, 7]


async def test_pagination(db, tenant):
    company, wh = tenant
    for stock in range(25):
        await low_stock_item(
            db, company, wh, AS_OF, stock,
            sku=f"P{stock:02d}", low_stock_threshold=100,
        )
    await db.commit()

    result = await _alerts(db, company, page=2, page_size=10)

    assert [a.current_stock for a in result.alerts] == list(range(10, 20))
    assert result.total_alerts == 25
    assert result.pagination.current_page == 2
    assert result.pagination.total_pages == 3
    assert result.pagination.total_items == 25
    assert result.pagination.limit == 10

    last = await _alerts(db, company, page=3, page_size=10)
    assert len(last.alerts) == 5


async def test_no_alerts(db, tenant):
    company, _ = tenant

    result = await _alerts(db, company)

    assert result.alerts == []
    assert result.total_alerts == 0
    assert result.pagination.total_pages == 0
    assert result.metadata.criteria.company_id == company.id
    assert result.metadata.criteria.recent_sales_period_days == 30


async def test_summary_rolls_up_by_category(db, tenant):
    company, wh = tenant
    electronics = await create_category(db, "Electronics")
    tools = await create_category(db, "Tools")

    for stock in (0, 3, 8):
        await low_stock_item(db, company, wh, AS_OF, stock, category_id=electronics.id)
    await low_stock_item(db, company, wh, AS_OF, 6, category_id=tools.id)
    await low_stock_item(db, company, wh, AS_OF, 2)
    # Above threshold, contributes nothing
    await low_stock_item(db, company, wh, AS_OF, 50, category_id=tools.id)
    await db.commit()

    result = await low_stock_summary(db, company_id=company.id, as_of=AS_OF)
    rows = {s.category: s for s in result.summary}

    assert [s.category for s in result.summary] == ["Electronics", "Tools", "Uncategorized"]

    electronics_row = rows["Electronics"]
    assert electronics_row.total_alerts == 3
    assert electronics_row.out_of_stock == 1
    assert electronics_row.critical_alerts == 2
    assert electronics_row.average_stock_level == Decimal("3.67")

    assert rows["Tools"].total_alerts == 1
    assert rows["Tools"].critical_alerts == 0
    assert rows["Uncategorized"].critical_alerts == 1
    assert rows["Uncategorized"].average_stock_level == Decimal("2.00")


async def test_storage_failure_surfaces_as_internal_error(db, tenant, monkeypatch):
    company, _ = tenant

    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT ...", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "execute", broken_execute)

    with pytest.raises(InternalError) as exc:
        await _alerts(db, company)
    assert exc.value.status_code == 500
    assert "disk" not in exc.value.message

    with pytest.raises(InternalError):
        await low_stock_summary(db, company_id=company.id, as_of=AS_OF)
