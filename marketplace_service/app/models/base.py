from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Naive UTC timestamp, the form every model column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MarketplaceBase(DeclarativeBase):
    """Base class for all Marketplace Service database models."""

    pass


class MarketplaceBaseModel(MarketplaceBase):
    """Base model with common fields for Marketplace Service."""

    __abstract__ = True
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=utc_now,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
