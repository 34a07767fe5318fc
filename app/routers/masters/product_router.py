# app/routers/masters/product_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.auth.auth_schemas import CallerIdentity
from app.schemas.masters.product_schemas import (
    ProductCreate,
    ProductCreatedOut,
    ProductListData,
)
from app.services.masters.product_service import (
    create_product,
    list_products,
)
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_caller
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/api/products", tags=["Products"])
logger = get_logger(__name__)

PRODUCT_WRITE_ROLES = ["admin", "manager", "user"]


@router.post(
    "",
    response_model=APIResponse[ProductCreatedOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_product_api(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(require_role(PRODUCT_WRITE_ROLES)),
):
    logger.info("Create product", extra={"sku": payload.sku, "company_id": caller.company_id})
    product = await create_product(db, payload, caller)
    return success_response("Product created successfully", product)


@router.get("", response_model=APIResponse[ProductListData])
async def list_products_api(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_current_caller),
    search: str | None = Query(None, description="Search by name or SKU"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
):
    data = await list_products(
        db=db,
        company_id=caller.company_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    return success_response("Products fetched successfully", data)
