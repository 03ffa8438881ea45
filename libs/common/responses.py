"""Response envelope shared by every router.

All endpoints return ``{success, message, data, pagination}`` so clients can
handle list and detail responses the same way.

Usage:
    @router.get("", response_model=ApiResponse[list[RewardResponse]])
    async def list_rewards(...):
        return ApiResponse(data=items, pagination=Pagination.build(page, limit, total))
"""

import math
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        pages = math.ceil(total / limit) if limit else 0
        return cls(page=page, limit=limit, total=total, pages=pages)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    pagination: Optional[Pagination] = None


def page_offset(page: int, limit: int) -> int:
    """Translate a 1-based page number into a query offset."""
    return (max(page, 1) - 1) * limit
