# app/routers/alerts/alert_router.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.alerts.low_stock_schemas import LowStockAlertList, LowStockSummary
from app.schemas.auth.auth_schemas import CallerIdentity
from app.services.alerts.stock_alert_service import (
    list_low_stock_alerts,
    low_stock_summary,
)
from app.utils.check_roles import require_company_access
from app.utils.response import APIResponse, success_response

router = APIRouter(
    prefix="/api/companies/{company_id}/alerts",
    tags=["Alerts"],
)


# =========================
# LOW STOCK ALERTS
# =========================
@router.get(
    "/low-stock",
    response_model=APIResponse[LowStockAlertList],
)
async def low_stock_alerts_api(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(require_company_access),
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
):
    data = await list_low_stock_alerts(
        db,
        company_id=caller.company_id,
        page=page,
        page_size=page_size,
    )
    return success_response("Low stock alerts fetched successfully", data)


# =========================
# CATEGORY SUMMARY
# =========================
@router.get(
    "/low-stock/summary",
    response_model=APIResponse[LowStockSummary],
)
async def low_stock_summary_api(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(require_company_access),
):
    data = await low_stock_summary(db, company_id=caller.company_id)
    return success_response("Low stock summary fetched successfully", data)
