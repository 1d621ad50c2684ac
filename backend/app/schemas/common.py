"""
Shared schema base classes and response envelopes.

JSON field names are camelCase on the wire; Python attributes stay snake_case.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope: ``{"success": true, "data": ...}``."""
    success: bool = True
    data: Optional[T] = None


class ListResponse(CamelModel, Generic[T]):
    """Success envelope for collections."""
    success: bool = True
    count: int
    data: List[T]

    @classmethod
    def of(cls, items: List[T]) -> "ListResponse[T]":
        return cls(count=len(items), data=items)


class MessageResponse(CamelModel):
    success: bool = True
    message: str
