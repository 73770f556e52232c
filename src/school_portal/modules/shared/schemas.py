"""
Shared Schemas

Pagination envelope used by every admin data table, plus small helpers.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class ListResponse(BaseModel, Generic[T]):
    """A page of records plus the total matching the filters."""

    items: list[T]
    total: int
    skip: int = 0
    limit: int = DEFAULT_LIMIT


class MessageResponse(BaseModel):
    message: str


class ToggleRequest(BaseModel):
    """Body of the flag toggle endpoints (active, featured, published, primary)."""

    value: bool = Field(..., description="New flag value")


def clean_string_list(values: list[str] | None) -> list[str]:
    """Trim items, drop blanks and duplicates, keep the original order."""
    seen: set[str] = set()
    cleaned = []
    for value in values or []:
        item = value.strip()
        if item and item not in seen:
            seen.add(item)
            cleaned.append(item)
    return cleaned


def clamp_pagination(skip: int, limit: int) -> tuple[int, int]:
    """Normalise skip/limit to the supported range."""
    return max(0, skip), min(max(1, limit), MAX_LIMIT)
