"""Translate search predicates into SQLAlchemy clauses."""

from sqlalchemy import ColumnElement, Select, and_, or_, true

from bureauto.models.advertisement import Advertisement
from bureauto.models.manufacturer import Manufacturer
from bureauto.services.filters import (
    And,
    Contains,
    Eq,
    FilterField,
    Or,
    Predicate,
    Range,
    iter_fields,
)

COLUMNS = {
    FilterField.DESCRIPTION: Advertisement.description,
    FilterField.MODEL_DESCRIPTION: Advertisement.model_description,
    FilterField.MANUFACTURER_NAME: Manufacturer.name,
    FilterField.STATUS: Advertisement.status_id,
    FilterField.VALUE: Advertisement.value,
    FilterField.YEAR_MANUFACTURE: Advertisement.year_manufacture,
    FilterField.YEAR_MODEL: Advertisement.year_model,
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def to_clause(predicate: Predicate) -> ColumnElement[bool]:
    if isinstance(predicate, And):
        return and_(*(to_clause(c) for c in predicate.clauses))
    if isinstance(predicate, Or):
        return or_(*(to_clause(c) for c in predicate.clauses))
    if isinstance(predicate, Eq):
        return COLUMNS[predicate.field] == predicate.value
    if isinstance(predicate, Contains):
        return COLUMNS[predicate.field].ilike(f"%{_escape_like(predicate.term)}%", escape="\\")
    if isinstance(predicate, Range):
        column = COLUMNS[predicate.field]
        if predicate.low is not None and predicate.high is not None:
            return column.between(predicate.low, predicate.high)
        if predicate.low is not None:
            return column >= predicate.low
        if predicate.high is not None:
            return column <= predicate.high
        return true()
    raise TypeError(f"Unsupported predicate node: {type(predicate).__name__}")


def apply_predicate(query: Select, predicate: Predicate) -> Select:
    """Add the predicate to an advertisement query, joining manufacturers when needed."""
    if FilterField.MANUFACTURER_NAME in set(iter_fields(predicate)):
        query = query.outerjoin(Manufacturer, Advertisement.manufacturer_id == Manufacturer.id)
    return query.where(to_clause(predicate))
