import math
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for every DTO: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit) if limit else 0)


class PageParams(BaseModel):
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PageParams:
    """Shared `page`/`limit` query parameters for list endpoints."""
    return PageParams(page=page, limit=limit)


class ApiResponse(CamelModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None
    pagination: Optional[Pagination] = None

    @model_serializer(mode="wrap")
    def _drop_unset_keys(self, handler):
        payload = handler(self)
        # `data` is always present on success; the other keys only when populated
        return {
            key: value for key, value in payload.items()
            if value is not None or (key == "data" and self.success)
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-serializable, camelCase values."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def ok(cls, data: Any = None, pagination: Optional[Pagination] = None, message: Optional[str] = None) -> Dict[str, Any]:
        return cls(success=True, data=data, pagination=pagination, message=message).to_dict()

    @classmethod
    def fail(cls, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        return cls(success=False, message=message, errors=errors).to_dict()
