# app/services/masters/product_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.db import atomic
from app.models.inventory.inventory_models import InventoryRecord
from app.models.inventory.inventory_movement_models import InventoryMovement
from app.models.inventory.warehouse_models import Warehouse
from app.models.masters.category_models import ProductCategory
from app.models.masters.product_models import Product
from app.models.masters.supplier_models import Supplier
from app.models.enums.inventory_movement_type import InventoryMovementType
from app.schemas.auth.auth_schemas import CallerIdentity
from app.schemas.masters.product_schemas import (
    ProductCreate,
    ProductCreatedOut,
    ProductInventoryOut,
    ProductListData,
    ProductOut,
    WarehouseRef,
)
from app.core.exceptions import (
    AppException,
    ConflictError,
    InternalError,
    InvalidReferenceError,
)
from app.constants.error_codes import ErrorCode
from app.constants.inventory_reference_type import InventoryReferenceType
from app.utils.logger import get_logger
from app.utils.response import build_pagination

logger = get_logger(__name__)

# Columns written to the product row; the rest of ProductCreate places stock
PRODUCT_FIELDS = {
    "name",
    "sku",
    "description",
    "price",
    "cost",
    "weight",
    "dimensions",
    "category_id",
    "supplier_id",
    "low_stock_threshold",
}


# ---------------- LOOKUPS ----------------
async def _active_warehouse(
    db: AsyncSession, warehouse_id: int, company_id: int
) -> Warehouse | None:
    return await db.scalar(
        select(Warehouse).where(
            Warehouse.id == warehouse_id,
            Warehouse.company_id == company_id,
            Warehouse.is_active.is_(True),
        )
    )


async def _sku_exists(db: AsyncSession, sku: str) -> bool:
    # Platform-wide: SKUs are unique across every company
    return (
        await db.scalar(select(Product.id).where(Product.sku == sku))
    ) is not None


async def _inventory_exists(
    db: AsyncSession, product_id: int, warehouse_id: int
) -> bool:
    return (
        await db.scalar(
            select(InventoryRecord.id).where(
                InventoryRecord.product_id == product_id,
                InventoryRecord.warehouse_id == warehouse_id,
            )
        )
    ) is not None


async def _check_optional_references(db: AsyncSession, payload: ProductCreate):
    if payload.category_id is not None:
        category = await db.scalar(
            select(ProductCategory.id).where(
                ProductCategory.id == payload.category_id
            )
        )
        if category is None:
            raise InvalidReferenceError(
                "Product category not found",
                ErrorCode.CATEGORY_NOT_FOUND,
            )

    if payload.supplier_id is not None:
        supplier = await db.scalar(
            select(Supplier.id).where(
                Supplier.id == payload.supplier_id,
                Supplier.is_active.is_(True),
            )
        )
        if supplier is None:
            raise InvalidReferenceError(
                "Supplier not found or inactive",
                ErrorCode.SUPPLIER_NOT_FOUND,
            )


def _map_created(
    product: Product, record: InventoryRecord
) -> ProductCreatedOut:
    return ProductCreatedOut(
        id=product.id,
        company_id=product.company_id,
        name=product.name,
        sku=product.sku,
        price=product.price,
        category_id=product.category_id,
        supplier_id=product.supplier_id,
        low_stock_threshold=product.low_stock_threshold,
        warehouse_id=record.warehouse_id,
        initial_quantity=record.quantity,
        inventory_id=record.id,
    )


def _integrity_error_to_app_error(exc: IntegrityError, sku: str) -> AppException:
    """Name the constraint a failed flush hit, for SQLite and Postgres drivers alike."""
    detail = str(exc.orig).lower()

    if "foreign key" in detail:
        return InvalidReferenceError(
            "Referenced category, supplier or warehouse no longer exists",
        )

    if "uq_inventory_product_warehouse" in detail or "inventory.product_id" in detail:
        return ConflictError(
            "Inventory record for this product-warehouse combination already exists",
            ErrorCode.INVENTORY_EXISTS,
        )

    if "sku" in detail:
        return ConflictError(
            f"Product with SKU '{sku}' already exists",
            ErrorCode.PRODUCT_SKU_EXISTS,
        )

    return ConflictError("A record with this information already exists")


# ---------------- CREATE ----------------
async def create_product(
    db: AsyncSession,
    payload: ProductCreate,
    caller: CallerIdentity,
) -> ProductCreatedOut:
    """
    Create a product with its first inventory record and audit movement.

    All three rows commit together or not at all. Any rejection raised inside
    the unit rolls back whatever was already flushed.
    """
    company_id = caller.company_id
    log_ctx = {
        "company_id": company_id,
        "sku": payload.sku,
        "warehouse_id": payload.warehouse_id,
    }

    try:
        async with atomic(db):
            warehouse = await _active_warehouse(
                db, payload.warehouse_id, company_id
            )
            if warehouse is None:
                logger.warning("Warehouse rejected", extra=log_ctx)
                raise InvalidReferenceError(
                    "Warehouse not found or does not belong to your company",
                    ErrorCode.WAREHOUSE_NOT_FOUND,
                )

            await _check_optional_references(db, payload)

            if await _sku_exists(db, payload.sku):
                logger.warning("Duplicate SKU rejected", extra=log_ctx)
                raise ConflictError(
                    f"Product with SKU '{payload.sku}' already exists",
                    ErrorCode.PRODUCT_SKU_EXISTS,
                )

            product = Product(
                **payload.model_dump(include=PRODUCT_FIELDS),
                company_id=company_id,
                is_active=True,
            )
            db.add(product)
            await db.flush()

            # Re-checked after the product insert so a racing duplicate
            # submission cannot slip a second record in
            if await _inventory_exists(db, product.id, payload.warehouse_id):
                logger.warning("Duplicate inventory rejected", extra=log_ctx)
                raise ConflictError(
                    "Inventory record for this product-warehouse combination already exists",
                    ErrorCode.INVENTORY_EXISTS,
                )

            record = InventoryRecord(
                product_id=product.id,
                warehouse_id=payload.warehouse_id,
                quantity=payload.initial_quantity,
                reserved_quantity=0,
            )
            db.add(record)
            await db.flush()

            db.add(
                InventoryMovement(
                    inventory_id=record.id,
                    movement_type=InventoryMovementType.in_,
                    quantity=payload.initial_quantity,
                    previous_quantity=0,
                    new_quantity=payload.initial_quantity,
                    reference_type=InventoryReferenceType.INITIAL_STOCK.value,
                    reference_id=str(product.id),
                    notes="Initial stock entry for new product",
                    user_id=caller.user_id,
                )
            )
            await db.flush()

    except AppException:
        raise

    except IntegrityError as exc:
        # A concurrent writer got past a pre-check before this insert landed
        error = _integrity_error_to_app_error(exc, payload.sku)
        logger.warning(
            "Constraint hit during product creation",
            extra={**log_ctx, "error_code": error.error_code.value},
        )
        raise error

    except SQLAlchemyError:
        logger.exception("Product creation failed", extra=log_ctx)
        raise InternalError("Failed to create product")

    logger.info(
        "Product created",
        extra={**log_ctx, "product_id": product.id, "actor_id": caller.user_id},
    )
    return _map_created(product, record)


# ---------------- LIST ----------------
def _map_product(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        sku=product.sku,
        name=product.name,
        description=product.description,
        price=product.price,
        cost=product.cost,
        category_id=product.category_id,
        supplier_id=product.supplier_id,
        low_stock_threshold=product.low_stock_threshold,
        is_active=product.is_active,
        created_at=product.created_at,
        inventory=[
            ProductInventoryOut(
                warehouse=WarehouseRef(id=r.warehouse.id, name=r.warehouse.name),
                quantity=r.quantity,
                reserved_quantity=r.reserved_quantity,
                available_quantity=r.available_quantity,
                last_updated=r.last_updated,
            )
            for r in product.inventory_records
        ],
    )


async def list_products(
    *,
    db: AsyncSession,
    company_id: int,
    search: str | None,
    page: int,
    page_size: int,
) -> ProductListData:
    filters = [
        Product.company_id == company_id,
        Product.is_active.is_(True),
    ]

    if search:
        filters.append(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.sku.ilike(f"%{search}%"),
            )
        )

    stmt = (
        select(Product)
        .where(*filters)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    count_stmt = select(func.count()).select_from(
        select(Product.id).where(*filters).subquery()
    )

    products = (await db.execute(stmt)).scalars().all()
    total = await db.scalar(count_stmt) or 0

    logger.info(
        "Products listed",
        extra={"company_id": company_id, "total": total, "page": page},
    )

    return ProductListData(
        products=[_map_product(p) for p in products],
        pagination=build_pagination(page, page_size, total),
    )
