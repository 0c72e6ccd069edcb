from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel

AdminRoleLiteral = Literal["admin", "superadmin"]


class AdminCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: AdminRoleLiteral = "admin"

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class AdminRoleUpdate(CamelModel):
    role: AdminRoleLiteral


class AdminResponse(CamelModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
