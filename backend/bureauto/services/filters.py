"""Search filter compilation. Pure logic, no DB dependency.

A client filter is turned into a small predicate tree (``Eq``, ``Contains``,
``Range``, ``And``, ``Or``) over a closed set of fields. The tree is
translated into SQL by ``bureauto.db.predicates``.
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any, Union

from pydantic import ValidationError

from bureauto.api.schemas import AdvertisementFilter
from bureauto.core.errors import FilterParseError
from bureauto.services.status import AdvertisementStatus


class FilterField(StrEnum):
    DESCRIPTION = "description"
    MODEL_DESCRIPTION = "model_description"
    MANUFACTURER_NAME = "manufacturer_name"
    STATUS = "status"
    VALUE = "value"
    YEAR_MANUFACTURE = "year_manufacture"
    YEAR_MODEL = "year_model"


@dataclass(frozen=True)
class Eq:
    field: FilterField
    value: Any


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match."""

    field: FilterField
    term: str


@dataclass(frozen=True)
class Range:
    """Inclusive range; a missing bound is open."""

    field: FilterField
    low: int | Decimal | None = None
    high: int | Decimal | None = None


@dataclass(frozen=True)
class And:
    clauses: tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    clauses: tuple["Predicate", ...]


Predicate = Union[Eq, Contains, Range, And, Or]

# Fields a free-text term is matched against
TERM_FIELDS: tuple[FilterField, ...] = (
    FilterField.DESCRIPTION,
    FilterField.MODEL_DESCRIPTION,
    FilterField.MANUFACTURER_NAME,
)


def parse_filters(raw: str | dict | AdvertisementFilter | None) -> AdvertisementFilter:
    """Accept a filter in any of the shapes the client sends it.

    Raises FilterParseError for invalid JSON or values that fail validation.
    """
    if raw is None:
        return AdvertisementFilter()
    if isinstance(raw, AdvertisementFilter):
        return raw
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FilterParseError(f"Filter is not valid JSON: {exc.msg}") from exc
        if not isinstance(raw, dict):
            raise FilterParseError("Filter must be a JSON object")
    try:
        return AdvertisementFilter.model_validate(raw)
    except ValidationError as exc:
        raise FilterParseError(f"Invalid filter: {exc.errors()[0]['msg']}") from exc


def compile_filters(filters: AdvertisementFilter) -> And:
    """Build the predicate for a public search.

    The result is always a conjunction led by ``status = Active``, so the
    status restriction covers every branch of a term search.
    """
    clauses: list[Predicate] = [Eq(FilterField.STATUS, AdvertisementStatus.ACTIVE)]

    if filters.term:
        clauses.append(Or(tuple(Contains(f, filters.term) for f in TERM_FIELDS)))
    if filters.brand:
        clauses.append(Eq(FilterField.MANUFACTURER_NAME, filters.brand))
    if filters.model:
        clauses.append(Eq(FilterField.MODEL_DESCRIPTION, filters.model))

    year_bounds = filters.year_bounds
    if year_bounds:
        manufacture, model = year_bounds
        clauses.append(Range(FilterField.YEAR_MANUFACTURE, low=manufacture))
        clauses.append(Range(FilterField.YEAR_MODEL, high=model))

    if filters.value_min_max:
        low, high = filters.value_min_max
        clauses.append(Range(FilterField.VALUE, low=low, high=high))

    return And(tuple(clauses))


def iter_fields(predicate: Predicate):
    """Yield every field referenced anywhere in the tree."""
    if isinstance(predicate, (And, Or)):
        for clause in predicate.clauses:
            yield from iter_fields(clause)
    else:
        yield predicate.field
