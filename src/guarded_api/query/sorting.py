"""
guarded_api.query.sorting

Sort allow-lists for list endpoints.

Responsibilities:
- Accept only allow-listed sort fields.
- Fall back to a documented default field/direction for anything else.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from sqlalchemy import UnaryExpression, asc, desc


class SortDirection(enum.StrEnum):
    asc = "asc"
    desc = "desc"


@dataclass(frozen=True, slots=True)
class SortSpec:
    allowed: frozenset[str]
    default_field: str = "created_at"
    default_direction: SortDirection = SortDirection.desc

    def resolve(self, field: str | None, direction: str | None) -> tuple[str, SortDirection]:
        """
        An unknown or missing field yields exactly the default ordering, including
        the default direction. A known field keeps a valid requested direction.
        """

        if field is None or field not in self.allowed:
            return self.default_field, self.default_direction
        try:
            return field, SortDirection((direction or "").lower())
        except ValueError:
            return field, self.default_direction

    def order_by(
        self, model: type[Any], field: str, direction: SortDirection
    ) -> list[UnaryExpression[Any]]:
        column = getattr(model, field)
        primary = asc(column) if direction is SortDirection.asc else desc(column)
        # Tie-break on id so page boundaries are deterministic.
        return [primary, asc(model.id)]


# --- Module Notes -----------------------------------------------------------
# Allow-lists should only contain indexed or cheap-to-sort, non-sensitive columns.
