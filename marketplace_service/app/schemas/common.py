from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON with the admin frontend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class ListResponse(BaseModel, Generic[DataT]):
    success: bool = True
    count: int
    data: List[DataT]


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class PaginatedResponse(BaseModel, Generic[DataT]):
    success: bool = True
    count: int
    data: List[DataT]
    pagination: Pagination


class EntitySummary(CamelModel):
    """Populated reference: the referenced record's id and display name."""

    id: Optional[int] = None
    name: Optional[str] = None
