# app/schemas/masters/product_schemas.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from app.utils.response import Pagination


class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    sku: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    cost: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    weight: Optional[Decimal] = Field(default=None, gt=0, max_digits=8, decimal_places=2)
    dimensions: Optional[str] = Field(default=None, max_length=100)
    category_id: Optional[int] = Field(default=None, gt=0)
    supplier_id: Optional[int] = Field(default=None, gt=0)
    low_stock_threshold: int = Field(default=10, ge=0)

    # Initial stock placement
    warehouse_id: int = Field(gt=0)
    initial_quantity: int = Field(ge=0)


class ProductCreatedOut(BaseModel):
    id: int
    company_id: int
    name: str
    sku: str
    price: Decimal
    category_id: Optional[int]
    supplier_id: Optional[int]
    low_stock_threshold: Optional[int]
    warehouse_id: int
    initial_quantity: int
    inventory_id: int


class WarehouseRef(BaseModel):
    id: int
    name: str


class ProductInventoryOut(BaseModel):
    warehouse: WarehouseRef
    quantity: int
    reserved_quantity: int
    available_quantity: int
    last_updated: Optional[datetime]


class ProductOut(BaseModel):
    id: int
    sku: str
    name: str
    description: Optional[str]
    price: Decimal
    cost: Optional[Decimal]
    category_id: Optional[int]
    supplier_id: Optional[int]
    low_stock_threshold: Optional[int]
    is_active: bool
    created_at: datetime
    inventory: List[ProductInventoryOut]


class ProductListData(BaseModel):
    products: List[ProductOut]
    pagination: Pagination
