from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import CamelModel, EntitySummary


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: bool = True


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    parent: Optional[EntitySummary] = None
    level: int
    path: List[int]
    ancestors: Optional[List[EntitySummary]] = None
    image: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryFilters(BaseModel):
    """Whitelisted list filters for categories."""

    search: Optional[str] = None
    parent_id: Optional[int] = None
    root_only: bool = False
    is_active: Optional[bool] = None
    sort_by: str = "createdAt"
    order: str = "desc"
