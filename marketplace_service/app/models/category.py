from typing import Any

from sqlalchemy import JSON, TEXT, Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MarketplaceBaseModel


class Category(MarketplaceBaseModel):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True
    )  # Reference by id, deletes are not blocked by children
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    path: Mapped[list[Any]] = mapped_column(JSON, default=list, nullable=False)
    image: Mapped[str | None] = mapped_column(String(512), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
