"""Load the sample tenant data used for local development.

    python -m app.scripts.seed_db
"""
from datetime import date, timedelta
from decimal import Decimal
import asyncio

from app.core.db import AsyncSessionLocal, atomic, init_models
from app.models import (
    Company,
    Warehouse,
    Supplier,
    ProductCategory,
    Product,
    InventoryRecord,
    SalesFact,
)
from app.utils.logger import get_logger

logger = get_logger(__name__)

# (product index, warehouse index, qty sold, days ago, revenue)
SAMPLE_SALES = [
    (0, 0, 5, 1, "1499.95"),
    (0, 0, 3, 3, "899.97"),
    (0, 0, 2, 7, "599.98"),
    (0, 0, 4, 10, "1199.96"),
    (0, 0, 6, 15, "1799.94"),
    (1, 0, 10, 2, "999.90"),
    (1, 0, 8, 5, "799.92"),
    (1, 0, 12, 8, "1199.88"),
    (2, 0, 3, 1, "149.97"),
    (2, 0, 2, 4, "99.98"),
    (2, 0, 5, 12, "249.95"),
]


async def seed():
    await init_models()
    today = date.today()

    async with AsyncSessionLocal() as session:
        async with atomic(session):
            acme = Company(name="Acme Corporation", email="admin@acme.com", phone="+1-555-0123")
            globaltech = Company(name="Global Tech Solutions", email="contact@globaltech.com", phone="+1-555-0456")
            session.add_all([acme, globaltech])
            await session.flush()

            warehouses = [
                Warehouse(company_id=acme.id, name="Main Warehouse", manager_name="John Manager", manager_email="john@acme.com"),
                Warehouse(company_id=acme.id, name="Secondary Warehouse", manager_name="Jane Supervisor", manager_email="jane@acme.com"),
                Warehouse(company_id=globaltech.id, name="Central Hub", manager_name="Bob Coordinator", manager_email="bob@globaltech.com"),
            ]
            suppliers = [
                Supplier(name="Widget Supplier Corp", contact_email="orders@widgetsupplier.com", payment_terms="Net 30"),
                Supplier(name="Parts & Components Inc", contact_email="sales@partscomponents.com", payment_terms="Net 15"),
                Supplier(name="Industrial Materials Ltd", contact_email="info@industrial.com", payment_terms="Net 45"),
            ]
            categories = [
                ProductCategory(name="Electronics", description="Electronic components and devices", low_stock_threshold=15),
                ProductCategory(name="Hardware", description="Physical hardware components", low_stock_threshold=10),
                ProductCategory(name="Software", description="Software licenses and digital products", low_stock_threshold=5),
                ProductCategory(name="Accessories", description="Additional accessories and add-ons", low_stock_threshold=20),
            ]
            session.add_all(warehouses + suppliers + categories)
            await session.flush()

            products = [
                Product(company_id=acme.id, category_id=categories[0].id, supplier_id=suppliers[0].id, name="Widget Pro 2000", sku="WID-PRO-2000", price=Decimal("299.99"), cost=Decimal("150.00"), low_stock_threshold=20),
                Product(company_id=acme.id, category_id=categories[0].id, supplier_id=suppliers[0].id, name="Standard Widget", sku="WID-STD-100", price=Decimal("99.99"), cost=Decimal("50.00"), low_stock_threshold=30),
                Product(company_id=acme.id, category_id=categories[1].id, supplier_id=suppliers[1].id, name="Premium Connector", sku="CON-PREM-50", price=Decimal("49.99"), cost=Decimal("25.00"), low_stock_threshold=15),
                Product(company_id=acme.id, category_id=categories[2].id, supplier_id=suppliers[2].id, name="Software License Pro", sku="SWL-PRO-2023", price=Decimal("999.99"), cost=Decimal("500.00"), low_stock_threshold=5),
            ]
            session.add_all(products)
            await session.flush()

            session.add_all([
                InventoryRecord(product_id=products[0].id, warehouse_id=warehouses[0].id, quantity=150, reserved_quantity=10),
                InventoryRecord(product_id=products[0].id, warehouse_id=warehouses[1].id, quantity=75, reserved_quantity=5),
                InventoryRecord(product_id=products[1].id, warehouse_id=warehouses[0].id, quantity=300, reserved_quantity=20),
                InventoryRecord(product_id=products[2].id, warehouse_id=warehouses[0].id, quantity=45, reserved_quantity=5),
                InventoryRecord(product_id=products[3].id, warehouse_id=warehouses[0].id, quantity=25, reserved_quantity=2),
            ])

            session.add_all([
                SalesFact(
                    product_id=products[p].id,
                    warehouse_id=warehouses[w].id,
                    quantity_sold=qty,
                    sale_date=today - timedelta(days=days_ago),
                    revenue=Decimal(revenue),
                )
                for p, w, qty, days_ago, revenue in SAMPLE_SALES
            ])

    logger.info("Sample data loaded")
    print("Sample data loaded!")


if __name__ == "__main__":
    asyncio.run(seed())
