"""
guarded_api.db.repositories.pages

Executes visibility-scoped list queries.

Responsibilities:
- Read one page of rows and the total record count for a `ScopedQuery`.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from guarded_api.query.pagination import PageInfo
from guarded_api.query.visibility import ScopedQuery


class PageReader:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def fetch(self, query: ScopedQuery) -> tuple[list[Any], PageInfo]:
        # Both statements share one session, so they run one after the other.
        rows: list[Any] = []
        if not query.page.beyond_store:
            rows = list((await self._session.execute(query.rows_statement())).scalars().all())
        total = int((await self._session.execute(query.count_statement())).scalar_one())
        return rows, PageInfo.of(query.page, total)
