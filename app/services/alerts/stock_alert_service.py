# app/services/alerts/stock_alert_service.py

import time
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select, func, case, distinct, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import LOW_STOCK_DEFAULT_THRESHOLD, RECENT_SALES_WINDOW_DAYS
from app.core.exceptions import InternalError
from app.models.inventory.inventory_models import InventoryRecord
from app.models.inventory.warehouse_models import Warehouse
from app.models.masters.category_models import ProductCategory
from app.models.masters.product_models import Product
from app.models.masters.supplier_models import Supplier
from app.models.sales.sales_models import SalesFact
from app.schemas.alerts.low_stock_schemas import (
    AlertCriteria,
    AlertMetadata,
    CategoryAlertSummary,
    LowStockAlert,
    LowStockAlertList,
    LowStockSummary,
    SupplierContact,
)
from app.services.alerts.stock_projection import (
    CRITICAL_STOCK_LEVEL,
    average_daily_sales,
    days_until_stockout,
    resolve_threshold,
    sales_window_start,
)
from app.utils.decimal_utils import to_decimal
from app.utils.logger import get_logger
from app.utils.response import build_pagination

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"

# =====================================================
# SHARED EXPRESSIONS
# =====================================================
available_stock = InventoryRecord.quantity - InventoryRecord.reserved_quantity

effective_threshold = func.coalesce(
    Product.low_stock_threshold,
    ProductCategory.low_stock_threshold,
    LOW_STOCK_DEFAULT_THRESHOLD,
)


def evaluation_date() -> date:
    return datetime.now(timezone.utc).date()


def _recent_sales_exists(since: date):
    return (
        select(SalesFact.id)
        .where(
            SalesFact.product_id == Product.id,
            SalesFact.warehouse_id == Warehouse.id,
            SalesFact.sale_date >= since,
        )
        .exists()
    )


def _low_stock_select(*columns, company_id: int, since: date):
    """
    Active (product, warehouse) inventory pairs of one company that sit at or
    below their effective threshold and sold something since `since`.
    """
    return (
        select(*columns)
        .select_from(InventoryRecord)
        .join(Product, Product.id == InventoryRecord.product_id)
        .join(Warehouse, Warehouse.id == InventoryRecord.warehouse_id)
        .outerjoin(ProductCategory, ProductCategory.id == Product.category_id)
        .outerjoin(
            Supplier,
            and_(Supplier.id == Product.supplier_id, Supplier.is_active.is_(True)),
        )
        .where(
            Product.company_id == company_id,
            Warehouse.company_id == company_id,
            Product.is_active.is_(True),
            Warehouse.is_active.is_(True),
            available_stock <= effective_threshold,
            _recent_sales_exists(since),
        )
    )


async def _sales_velocity(
    db: AsyncSession,
    pairs: list[tuple[int, int]],
    since: date,
) -> dict[tuple[int, int], tuple[int, int]]:
    """(product_id, warehouse_id) -> (units sold, distinct sale days) in the window."""
    if not pairs:
        return {}

    product_ids = {p for p, _ in pairs}
    warehouse_ids = {w for _, w in pairs}

    stmt = (
        select(
            SalesFact.product_id,
            SalesFact.warehouse_id,
            func.sum(SalesFact.quantity_sold).label("units_sold"),
            func.count(distinct(SalesFact.sale_date)).label("active_days"),
        )
        .where(
            SalesFact.sale_date >= since,
            SalesFact.product_id.in_(product_ids),
            SalesFact.warehouse_id.in_(warehouse_ids),
        )
        .group_by(SalesFact.product_id, SalesFact.warehouse_id)
    )

    wanted = set(pairs)
    velocity = {}
    for r in (await db.execute(stmt)).all():
        key = (r.product_id, r.warehouse_id)
        if key in wanted:
            velocity[key] = (int(r.units_sold or 0), int(r.active_days or 0))
    return velocity


def _map_alert(row, units_sold: int, active_days: int) -> LowStockAlert:
    current_stock = int(row.current_stock)
    supplier = None
    if row.supplier_id is not None:
        supplier = SupplierContact(
            id=row.supplier_id,
            name=row.supplier_name,
            contact_email=row.supplier_contact_email,
            lead_time_days=row.supplier_lead_time,
        )

    return LowStockAlert(
        product_id=row.product_id,
        product_name=row.product_name,
        sku=row.sku,
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse_name,
        current_stock=current_stock,
        threshold=resolve_threshold(row.product_threshold, row.category_threshold),
        days_until_stockout=days_until_stockout(
            current_stock,
            average_daily_sales(units_sold, active_days),
        ),
        supplier=supplier,
    )


# =====================================================
# LOW STOCK ALERTS
# =====================================================
async def list_low_stock_alerts(
    db: AsyncSession,
    *,
    company_id: int,
    page: int = 1,
    page_size: int = 100,
    as_of: Optional[date] = None,
) -> LowStockAlertList:
    t0 = time.perf_counter()
    since = sales_window_start(as_of or evaluation_date())

    data_stmt = (
        _low_stock_select(
            Product.id.label("product_id"),
            Product.name.label("product_name"),
            Product.sku.label("sku"),
            Product.low_stock_threshold.label("product_threshold"),
            ProductCategory.low_stock_threshold.label("category_threshold"),
            Warehouse.id.label("warehouse_id"),
            Warehouse.name.label("warehouse_name"),
            available_stock.label("current_stock"),
            Supplier.id.label("supplier_id"),
            Supplier.name.label("supplier_name"),
            Supplier.contact_email.label("supplier_contact_email"),
            Supplier.lead_time_days.label("supplier_lead_time"),
            company_id=company_id,
            since=since,
        )
        .order_by(available_stock.asc(), Product.id.asc(), Warehouse.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    count_stmt = select(func.count()).select_from(
        _low_stock_select(
            InventoryRecord.id, company_id=company_id, since=since
        ).subquery()
    )

    try:
        rows = (await db.execute(data_stmt)).all()
        total = await db.scalar(count_stmt) or 0
        velocity = await _sales_velocity(
            db, [(r.product_id, r.warehouse_id) for r in rows], since
        )
    except SQLAlchemyError:
        logger.exception(
            "Low-stock alert query failed", extra={"company_id": company_id}
        )
        raise InternalError("Failed to retrieve low-stock alerts")

    alerts = [
        _map_alert(r, *velocity.get((r.product_id, r.warehouse_id), (0, 0)))
        for r in rows
    ]

    logger.info(
        "Low-stock alerts computed",
        extra={
            "company_id": company_id,
            "total": total,
            "rows": len(alerts),
            "page": page,
            "t_total": round(time.perf_counter() - t0, 4),
        },
    )

    return LowStockAlertList(
        alerts=alerts,
        total_alerts=total,
        pagination=build_pagination(page, page_size, total),
        metadata=AlertMetadata(
            generated_at=datetime.now(timezone.utc),
            criteria=AlertCriteria(
                recent_sales_period_days=RECENT_SALES_WINDOW_DAYS,
                company_id=company_id,
            ),
        ),
    )


# =====================================================
# CATEGORY ROLLUP
# =====================================================
async def low_stock_summary(
    db: AsyncSession,
    *,
    company_id: int,
    as_of: Optional[date] = None,
) -> LowStockSummary:
    since = sales_window_start(as_of or evaluation_date())

    alert_count = func.count(InventoryRecord.id)

    stmt = (
        _low_stock_select(
            ProductCategory.name.label("category"),
            alert_count.label("total_alerts"),
            func.sum(case((available_stock == 0, 1), else_=0)).label("out_of_stock"),
            func.sum(
                case((available_stock <= CRITICAL_STOCK_LEVEL, 1), else_=0)
            ).label("critical_alerts"),
            func.avg(available_stock).label("average_stock_level"),
            company_id=company_id,
            since=since,
        )
        .group_by(ProductCategory.name)
    )

    try:
        rows = (await db.execute(stmt)).all()
    except SQLAlchemyError:
        logger.exception(
            "Low-stock summary query failed", extra={"company_id": company_id}
        )
        raise InternalError("Failed to retrieve low-stock summary")

    summary = [
        CategoryAlertSummary(
            category=r.category or UNCATEGORIZED,
            total_alerts=int(r.total_alerts),
            out_of_stock=int(r.out_of_stock or 0),
            critical_alerts=int(r.critical_alerts or 0),
            average_stock_level=to_decimal(r.average_stock_level),
        )
        for r in rows
    ]
    summary.sort(key=lambda s: (-s.total_alerts, s.category))

    logger.info(
        "Low-stock summary computed",
        extra={"company_id": company_id, "categories": len(summary)},
    )

    return LowStockSummary(
        summary=summary,
        generated_at=datetime.now(timezone.utc),
    )
