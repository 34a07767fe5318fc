from sqlalchemy import Column, Boolean, DateTime
from sqlalchemy.sql import func


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        onupdate=func.now()
    )


class ActiveMixin:
    """Soft-deactivation flag; rows are never hard-deleted."""

    is_active = Column(Boolean, default=True, nullable=False, index=True)
