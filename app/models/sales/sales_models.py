from sqlalchemy import Column, Integer, Date, Numeric, ForeignKey, DateTime, Index
from sqlalchemy.sql import func
from app.core.db import Base


class SalesFact(Base):
    """Units sold for a (product, warehouse, date); loaded by external ingestion."""

    __tablename__ = "sales_data"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False)
    quantity_sold = Column(Integer, nullable=False)
    sale_date = Column(Date, nullable=False, index=True)
    revenue = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_sales_product_warehouse_date", "product_id", "warehouse_id", "sale_date"),
        Index("ix_sales_warehouse_date", "warehouse_id", "sale_date"),
    )

    def __repr__(self):
        return f"<SalesFact product_id={self.product_id} warehouse_id={self.warehouse_id} date={self.sale_date} qty={self.quantity_sold}>"
