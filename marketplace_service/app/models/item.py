from sqlalchemy import TEXT, Boolean, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import MarketplaceBaseModel


class Item(MarketplaceBaseModel):
    __tablename__ = "items"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    category_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True
    )  # Reference to categories.id (no FK)
    vendor_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )  # Reference to vendors.id, NULL means admin-owned
    image: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    prices: Mapped[list["ItemPrice"]] = relationship(
        "ItemPrice",
        back_populates="item",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ItemPrice.id",
    )


class ItemPrice(MarketplaceBaseModel):
    __tablename__ = "item_prices"

    item_id: Mapped[int] = mapped_column(
        ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    item: Mapped["Item"] = relationship("Item", back_populates="prices")
