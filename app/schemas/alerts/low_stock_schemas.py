# app/schemas/alerts/low_stock_schemas.py

from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from app.utils.response import Pagination


class SupplierContact(BaseModel):
    id: int
    name: str
    contact_email: Optional[str]
    lead_time_days: Optional[int]


class LowStockAlert(BaseModel):
    product_id: int
    product_name: str
    sku: str
    warehouse_id: int
    warehouse_name: str
    current_stock: int
    threshold: int
    days_until_stockout: int
    supplier: Optional[SupplierContact] = None


class AlertCriteria(BaseModel):
    recent_sales_period_days: int
    company_id: int


class AlertMetadata(BaseModel):
    generated_at: datetime
    criteria: AlertCriteria


class LowStockAlertList(BaseModel):
    alerts: List[LowStockAlert]
    total_alerts: int
    pagination: Pagination
    metadata: AlertMetadata


class CategoryAlertSummary(BaseModel):
    category: str
    total_alerts: int
    out_of_stock: int
    critical_alerts: int
    average_stock_level: Decimal


class LowStockSummary(BaseModel):
    summary: List[CategoryAlertSummary]
    generated_at: datetime
