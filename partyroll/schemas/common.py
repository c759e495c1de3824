"""
Common schemas used across the application.
"""
from typing import Any, Generic, TypeVar, Optional
from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list response."""
    page: int
    perPage: int
    totalItems: int
    totalPages: int
    items: list[T]


class MessageResponse(BaseModel):
    """Simple message response."""
    message: str


class CountResponse(BaseModel):
    count: int


class HealthResponse(BaseModel):
    """Health check response."""
    code: int = 200
    message: str = "API is healthy."


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""
    error: str
    details: Optional[Any] = None


class MemberSummary(BaseModel):
    """Minimal member info embedded in card and recipient responses."""
    id: str
    full_name: str
    membership_id: str
    nrc_number: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


def reject_nulls(model: BaseModel, fields: tuple[str, ...]) -> BaseModel:
    """Raise if any of ``fields`` was sent explicitly as null."""
    nulls = [name for name in fields if name in model.model_fields_set and getattr(model, name) is None]
    if nulls:
        raise ValueError(f"{', '.join(nulls)} cannot be null")
    return model
