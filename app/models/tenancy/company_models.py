from sqlalchemy import Column, Integer, String, Text, Enum
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, ActiveMixin
from app.models.enums.subscription_plan import SubscriptionPlan


class Company(Base, TimestampMixin, ActiveMixin):
    """Tenant boundary. Every warehouse and product belongs to exactly one company."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    subscription_plan = Column(Enum(SubscriptionPlan), nullable=False, default=SubscriptionPlan.basic)

    warehouses = relationship("Warehouse", back_populates="company", lazy="noload")
    products = relationship("Product", back_populates="company", lazy="noload")

    def __repr__(self):
        return f"<Company id={self.id} name={self.name} active={self.is_active}>"
