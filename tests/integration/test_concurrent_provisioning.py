import asyncio

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.constants.error_codes import ErrorCode
from app.core.db import Base, enable_sqlite_foreign_keys
from app.core.exceptions import ConflictError
from app.models import InventoryMovement, InventoryRecord, Product
from app.schemas.auth.auth_schemas import CallerIdentity
from app.schemas.masters.product_schemas import ProductCreate
from app.services.masters.product_service import create_product
from tests.factories import create_company, create_warehouse


@pytest.fixture
async def file_sessions(tmp_path):
    """One connection per session, so two units of work really overlap."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'provisioning.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 15},
    )
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def test_simultaneous_submissions_of_one_sku(file_sessions):
    async with file_sessions() as db:
        company = await create_company(db)
        warehouse = await create_warehouse(db, company)
        await db.commit()

    payload = ProductCreate(
        name="Widget A",
        sku="WID-RACE",
        price="19.99",
        warehouse_id=warehouse.id,
        initial_quantity=10,
    )
    caller = CallerIdentity(user_id=1, company_id=company.id)

    async def submit():
        async with file_sessions() as db:
            return await create_product(db, payload, caller)

    results = await asyncio.gather(submit(), submit(), return_exceptions=True)

    created = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, Exception)]
    assert len(created) == 1
    assert len(rejected) == 1
    assert isinstance(rejected[0], ConflictError)
    assert rejected[0].error_code == ErrorCode.PRODUCT_SKU_EXISTS

    async with file_sessions() as db:
        assert await db.scalar(select(func.count(Product.id))) == 1
        assert await db.scalar(select(func.count(InventoryRecord.id))) == 1
        assert await db.scalar(select(func.count(InventoryMovement.id))) == 1
