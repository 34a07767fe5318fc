from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveMixin


class Supplier(Base, TimestampMixin, ActiveMixin):
    """Platform-wide reorder contact; not scoped to a company."""

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    payment_terms = Column(String(100), nullable=True)
    lead_time_days = Column(Integer, nullable=False, default=7)

    products = relationship("Product", back_populates="supplier", lazy="noload")

    def __repr__(self):
        return f"<Supplier id={self.id} name={self.name} lead_time={self.lead_time_days}>"
