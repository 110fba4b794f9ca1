"""
Sort-string parsing.

Clients pass ``sort=field`` for ascending or ``sort=-field`` for descending
order, using the camelCase names exposed by the API (``-appliedAt``).
"""

from typing import Mapping

from sqlalchemy import asc, desc
from sqlalchemy.sql.elements import ColumnElement

from worklink.core.exceptions import ValidationError


def parse_sort(sort: str, allowed: Mapping[str, ColumnElement], tiebreaker: ColumnElement) -> list:
    """
    Translate a sort string into ORDER BY clauses.

    The tiebreaker column is always appended so that rows with equal sort
    keys come back in the same order on every read.

    Raises:
        ValidationError: the field is not one of ``allowed``
    """
    sort = (sort or "").strip()
    descending = sort.startswith("-")
    field = sort[1:] if descending else sort

    column = allowed.get(field)
    if column is None:
        raise ValidationError(
            "Validation failed",
            details=[{
                "field": "sort",
                "message": f"Unsupported sort field '{field}'. Allowed: {', '.join(sorted(allowed))}",
            }],
        )

    direction = desc if descending else asc
    return [direction(column), direction(tiebreaker)]
