"""
guarded_api.query.pagination

Page request/result contract shared by every list endpoint.

Responsibilities:
- Normalize caller page/limit (defaults, upper clamp, lower-bound validation).
- Compute the pagination block returned with each page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from guarded_api.errors import ValidationError

# Largest OFFSET a signed 64-bit SQL integer can carry.
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int
    limit: int

    @classmethod
    def from_params(
        cls,
        page: int | None,
        limit: int | None,
        *,
        default_limit: int,
        max_limit: int,
    ) -> PageRequest:
        page = 1 if page is None else page
        limit = default_limit if limit is None else limit
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit < 1:
            raise ValidationError("limit must be >= 1")
        return cls(page=page, limit=min(limit, max_limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def beyond_store(self) -> bool:
        # No table can hold this many rows; the page is empty without asking the store.
        return self.offset > MAX_OFFSET


@dataclass(frozen=True, slots=True)
class PageInfo:
    current: int
    limit: int
    records: int
    pages: int

    @classmethod
    def of(cls, request: PageRequest, total: int) -> PageInfo:
        return cls(
            current=request.page,
            limit=request.limit,
            records=total,
            pages=math.ceil(total / request.limit),
        )
