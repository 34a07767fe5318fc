from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveMixin


class Warehouse(Base, TimestampMixin, ActiveMixin):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    manager_name = Column(String(255), nullable=True)
    manager_email = Column(String(255), nullable=True)

    company = relationship("Company", back_populates="warehouses", lazy="noload")
    inventory_records = relationship("InventoryRecord", back_populates="warehouse", lazy="noload")

    __table_args__ = (Index("ix_warehouse_company_active", "company_id", "is_active"),)

    def __repr__(self):
        return f"<Warehouse id={self.id} company_id={self.company_id} name={self.name}>"
