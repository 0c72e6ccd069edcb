from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MarketplaceBaseModel


class AdminRole(Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class Admin(MarketplaceBaseModel):
    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=AdminRole.ADMIN.value, nullable=False
    )
