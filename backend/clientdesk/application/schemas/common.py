"""Response envelope shared by every endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, message, data}`` wrapper."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PaginatedResponse(ApiResponse[T], Generic[T]):
    pagination: PaginationMeta


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str | None = None
