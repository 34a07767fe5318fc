from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveMixin


class Product(Base, TimestampMixin, ActiveMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("product_categories.id", ondelete="SET NULL"), nullable=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    # Unique across the whole platform, not per company
    sku = Column(String(100), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=True)
    weight = Column(Numeric(8, 2), nullable=True)
    dimensions = Column(String(100), nullable=True)
    low_stock_threshold = Column(Integer, nullable=True)

    company = relationship("Company", back_populates="products", lazy="noload")
    category = relationship("ProductCategory", back_populates="products", lazy="selectin")
    supplier = relationship("Supplier", back_populates="products", lazy="selectin")
    inventory_records = relationship("InventoryRecord", back_populates="product", lazy="selectin")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint("low_stock_threshold IS NULL OR low_stock_threshold >= 0", name="ck_product_threshold_non_negative"),
        Index("ix_product_company_active", "company_id", "is_active"),
    )

    def __repr__(self):
        return f"<Product id={self.id} sku={self.sku} name={self.name}>"
