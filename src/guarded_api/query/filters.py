"""
guarded_api.query.filters

Typed filter spec for list endpoints.

Responsibilities:
- Collect caller-supplied filters (equality, substring search, inclusive ranges,
  null checks)
  while skipping absent values.
- Render the collected filters to SQLAlchemy predicates against an allow-listed
  set of columns.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement

from guarded_api.errors import ValidationError


@dataclass(frozen=True, slots=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class Contains:
    field: str
    value: str


@dataclass(frozen=True, slots=True)
class Between:
    field: str
    gte: Any = None
    lte: Any = None


@dataclass(frozen=True, slots=True)
class Present:
    field: str
    present: bool


Condition = Eq | Contains | Between | Present


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FilterSpec:
    """
    Immutable, chainable filter collection.

        FilterSpec().eq("status", status).contains("title", search).between("due_at", a, b)

    Every builder method ignores `None` operands and returns a new spec.
    """

    __slots__ = ("_conditions",)

    def __init__(self, conditions: Iterable[Condition] = ()) -> None:
        self._conditions: tuple[Condition, ...] = tuple(conditions)

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return self._conditions

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(c.field for c in self._conditions)

    def _with(self, condition: Condition) -> FilterSpec:
        return FilterSpec((*self._conditions, condition))

    def eq(self, field: str, value: Any) -> FilterSpec:
        if value is None:
            return self
        return self._with(Eq(field, value))

    def contains(self, field: str, value: str | None) -> FilterSpec:
        if value is None or not value.strip():
            return self
        return self._with(Contains(field, value.strip()))

    def between(self, field: str, gte: Any = None, lte: Any = None) -> FilterSpec:
        if gte is None and lte is None:
            return self
        if gte is not None and lte is not None and gte > lte:
            raise ValidationError(f"Empty range for {field!r}: lower bound is after upper bound")
        return self._with(Between(field, gte, lte))

    def present(self, field: str, value: bool | None) -> FilterSpec:
        # True: column IS NOT NULL, False: column IS NULL.
        if value is None:
            return self
        return self._with(Present(field, value))

    def without(self, *fields: str) -> FilterSpec:
        dropped = set(fields)
        return FilterSpec(c for c in self._conditions if c.field not in dropped)

    def to_clauses(self, model: type[Any], allowed: frozenset[str]) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        for cond in self._conditions:
            if cond.field not in allowed:
                raise ValidationError(f"Filtering on {cond.field!r} is not supported")
            column = getattr(model, cond.field)
            if isinstance(cond, Eq):
                clauses.append(column == cond.value)
            elif isinstance(cond, Contains):
                clauses.append(column.ilike(f"%{_escape_like(cond.value)}%", escape="\\"))
            elif isinstance(cond, Present):
                clauses.append(column.is_not(None) if cond.present else column.is_(None))
            else:
                if cond.gte is not None:
                    clauses.append(column >= cond.gte)
                if cond.lte is not None:
                    clauses.append(column <= cond.lte)
        return clauses

    def __len__(self) -> int:
        return len(self._conditions)

    def __repr__(self) -> str:
        return f"FilterSpec({list(self._conditions)!r})"


# --- Module Notes -----------------------------------------------------------
# Scope columns (owner/tenant) may appear in a spec; `query.visibility` strips or
# keeps them depending on the caller's scope before rendering.
