"""
Pagination utilities for consistent pagination across the API.

This module provides helper functions and models for implementing
offset-based pagination with the ``{"pagination": {...}}`` envelope.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
import math

from worklink.core.config import settings


def calculate_offset(page: int, limit: int) -> int:
    """
    Calculate database offset from page number and limit.

    Args:
        page: Page number (1-indexed)
        limit: Number of items per page

    Returns:
        Database offset (0-indexed)

    Example:
        >>> calculate_offset(1, 10)
        0
        >>> calculate_offset(3, 10)
        20
    """
    if page < 1:
        raise ValueError("Page must be >= 1")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    """
    Calculate total number of pages given total items and page size.

    Example:
        >>> calculate_total_pages(25, 10)
        3
        >>> calculate_total_pages(0, 10)
        0
    """
    if total < 0:
        raise ValueError("Total must be >= 0")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    if total == 0:
        return 0

    return math.ceil(total / limit)


class PaginationParams(BaseModel):
    """
    Pagination query parameters with validation.

    Attributes:
        page: Page number (1-indexed, default: 1)
        limit: Items per page (1..max_page_size, default: default_page_size)
    """
    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=settings.default_page_size, ge=1, description="Items per page")

    @field_validator('limit')
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v > settings.max_page_size:
            raise ValueError(f'limit must be <= {settings.max_page_size}')
        return v

    @property
    def offset(self) -> int:
        return calculate_offset(self.page, self.limit)


class PaginationMeta(BaseModel):
    """
    Metadata for paginated responses.

    Serialized as ``{page, limit, total, totalPages, hasNextPage, hasPrevPage}``.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_params(cls, params: PaginationParams, total: int) -> "PaginationMeta":
        total_pages = calculate_total_pages(total, params.limit)
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_next_page=params.page < total_pages,
            has_prev_page=params.page > 1,
        )
