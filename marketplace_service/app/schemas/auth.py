from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .common import CamelModel


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SetupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class HealthResponse(CamelModel):
    status: str
    message: str
    service: str
    version: str
    timestamp: str
    checks: dict = {}
