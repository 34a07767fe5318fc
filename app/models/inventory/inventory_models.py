from sqlalchemy import Column, Integer, ForeignKey, DateTime, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base


class InventoryRecord(Base):
    """Stock ledger line for one (product, warehouse) pair."""

    __tablename__ = "inventory"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    reserved_quantity = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    product = relationship("Product", back_populates="inventory_records", lazy="noload")
    warehouse = relationship("Warehouse", back_populates="inventory_records", lazy="selectin")
    movements = relationship("InventoryMovement", back_populates="inventory_record", lazy="noload")

    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
        CheckConstraint("reserved_quantity >= 0", name="ck_inventory_reserved_non_negative"),
        Index("ix_inventory_low_stock", "product_id", "quantity"),
    )

    @property
    def available_quantity(self) -> int:
        return self.quantity - self.reserved_quantity

    def __repr__(self):
        return f"<InventoryRecord product_id={self.product_id} warehouse_id={self.warehouse_id} qty={self.quantity} reserved={self.reserved_quantity}>"
