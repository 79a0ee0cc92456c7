from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional


FieldName = Literal["minute", "hour", "dayOfTheMonth", "month", "dayOfTheWeek"]

# Position-to-name mapping of the serialized expression.
FIELDS: tuple[FieldName, ...] = ("minute", "hour", "dayOfTheMonth", "month", "dayOfTheWeek")

FIELD_ALIASES: dict[str, FieldName] = {
    "day_of_the_month": "dayOfTheMonth",
    "day_of_the_week": "dayOfTheWeek",
}

WILDCARD = "*"

Expression = dict[str, list[str]]
ExpandedExpression = dict[str, list[int]]


@dataclass(frozen=True)
class FieldBounds:
    min: int
    max: int


FIELD_BOUNDS: dict[str, FieldBounds] = {
    "minute": FieldBounds(min=0, max=59),
    "hour": FieldBounds(min=0, max=23),
    "dayOfTheMonth": FieldBounds(min=1, max=31),
    "month": FieldBounds(min=1, max=12),
    # 7 is accepted as a distinct value; folding onto Sunday=0 is left to the converter.
    "dayOfTheWeek": FieldBounds(min=0, max=7),
}


def resolve_field(name: object) -> Optional[FieldName]:
    """Return the canonical field name, or None if `name` is not a known field."""
    if not isinstance(name, str):
        return None
    if name in FIELD_BOUNDS:
        return name  # type: ignore[return-value]
    return FIELD_ALIASES.get(name)


def default_interval() -> list[str]:
    # A fresh list per call; fields must never share a default list.
    return [WILDCARD]


def is_default(tokens: list[str]) -> bool:
    return len(tokens) == 1 and tokens[0] == WILDCARD


def default_expression() -> Expression:
    return {f: default_interval() for f in FIELDS}
