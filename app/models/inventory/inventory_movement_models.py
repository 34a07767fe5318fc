from sqlalchemy import Column, Integer, String, Text, Enum, ForeignKey, DateTime, Index, event
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.db import Base
from app.models.enums.inventory_movement_type import InventoryMovementType


class InventoryMovementImmutableError(Exception):
    pass


class InventoryMovement(Base):
    """Append-only audit entry for a change to an inventory record."""

    __tablename__ = "inventory_movements"

    id = Column(Integer, primary_key=True)
    inventory_id = Column(Integer, ForeignKey("inventory.id", ondelete="CASCADE"), nullable=False, index=True)
    movement_type = Column(
        Enum(InventoryMovementType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    reference_id = Column(String(100), nullable=True)
    reference_type = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    inventory_record = relationship("InventoryRecord", back_populates="movements", lazy="noload")

    __table_args__ = (Index("ix_inventory_movement_reference", "reference_type", "reference_id"),)

    def __repr__(self):
        return f"<InventoryMovement id={self.id} inventory_id={self.inventory_id} type={self.movement_type} qty={self.quantity} ref={self.reference_type}:{self.reference_id}>"


@event.listens_for(InventoryMovement, "before_update")
def _block_movement_update(mapper, connection, target):
    raise InventoryMovementImmutableError(
        f"InventoryMovement {target.id} is immutable and cannot be updated"
    )


@event.listens_for(InventoryMovement, "before_delete")
def _block_movement_delete(mapper, connection, target):
    raise InventoryMovementImmutableError(
        f"InventoryMovement {target.id} is immutable and cannot be deleted"
    )
