# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Shared response envelope and base model.

Every endpoint answers with {success, data?, message?, pagination?}; JSON keys
are camelCase while Python attributes stay snake_case.
"""
import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Upper bound of a signed 32-bit INTEGER column; larger ids cannot exist
MAX_ID = 2_147_483_647
# Highest page whose offset still fits an INTEGER at the largest page size
MAX_PAGE = MAX_ID // 100


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class PaginationInfo(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total number of matching items")
    pages: int = Field(..., description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class DataResponse(BaseModel, Generic[T]):
    """Envelope for a single payload."""

    success: bool = True
    message: Optional[str] = None
    data: T


class ListResponse(BaseModel, Generic[T]):
    """Envelope for a list payload with optional pagination."""

    success: bool = True
    data: List[T] = Field(default_factory=list)
    pagination: Optional[PaginationInfo] = None


class MessageResponse(BaseModel):
    """Envelope for operations that return no payload."""

    success: bool = True
    message: str
