from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional

from cron_builder.core.errors import (
    CronValidationError,
    InvalidFieldError,
    InvalidInputError,
    InvalidSyntaxError,
    RangeHighOutOfBoundsError,
    RangeLowOutOfBoundsError,
    TooManyFieldsError,
    ValueAboveMaximumError,
    ValueBelowMinimumError,
)
from cron_builder.core.model import FIELD_BOUNDS, FIELDS, WILDCARD, FieldName, resolve_field


# Anchored at the first character only; the numeric parse reads leading digits.
_VALID_CHARS = re.compile(r"^[0-9*-]")
_LEADING_INT = re.compile(r"\s*(\d+)")


def require_field(field: Any) -> FieldName:
    resolved = resolve_field(field)
    if resolved is None:
        raise InvalidFieldError(
            code="E_INVALID_FIELD",
            message=f"invalid field; valid options are: {', '.join(FIELDS)}",
            field=str(field),
        )
    return resolved


def validate_value(field: Any, token: Any) -> None:
    """Validate a single token against the bounds of `field`.

    Accepts `*`, a bare integer, or a `low-high` range. Values are read by their
    leading digits, so trailing junk after a valid number is not rejected here.
    """

    name = require_field(field)
    bounds = FIELD_BOUNDS[name]

    if not isinstance(token, str):
        raise InvalidInputError(
            code="E_INVALID_INPUT",
            message=f"value must be a string, got {type(token).__name__}",
            field=name,
            value=repr(token),
        )

    if not _VALID_CHARS.match(token):
        raise InvalidSyntaxError(
            code="E_INVALID_SYNTAX",
            message='only numbers 0-9, "-", and "*" chars are allowed',
            field=name,
            value=token,
        )

    if token == WILDCARD:
        return

    if "-" in token:
        ends = [n for n in (_leading_int(part) for part in token.split("-")) if n is not None]
        low = ends[0] if len(ends) > 0 else None
        high = ends[1] if len(ends) > 1 else None

        if low is None or low < bounds.min:
            raise RangeLowOutOfBoundsError(
                code="E_RANGE_LOW_OUT_OF_BOUNDS",
                message=f"bottom of range {token!r} is not valid; limit is {bounds.min}",
                field=name,
                value=token,
            )
        if high is None or high > bounds.max:
            raise RangeHighOutOfBoundsError(
                code="E_RANGE_HIGH_OUT_OF_BOUNDS",
                message=f"top of range {token!r} is not valid; limit is {bounds.max}",
                field=name,
                value=token,
            )
        return

    value = _leading_int(token)
    if value is None:
        return
    if value < bounds.min:
        raise ValueBelowMinimumError(
            code="E_VALUE_BELOW_MINIMUM",
            message=f"value {token!r} is not valid; minimum value is {bounds.min}",
            field=name,
            value=token,
        )
    if value > bounds.max:
        raise ValueAboveMaximumError(
            code="E_VALUE_ABOVE_MAXIMUM",
            message=f"value {token!r} is not valid; maximum value is {bounds.max}",
            field=name,
            value=token,
        )


def validate_string(cron_string: Any) -> None:
    """Validate an expression string of at most five space-delimited fields.

    Each comma-separated token is checked against the field at its position.
    Fewer than five fields is fine; the builder fills the rest with `*`.
    """

    parts = split_fields(cron_string)
    for i, part in enumerate(parts):
        for token in part.split(","):
            validate_value(FIELDS[i], token)


def validate_expression(expression: Any) -> None:
    """Validate a structured expression (field name -> list of tokens).

    Missing fields are allowed; more than five keys is not.
    """

    if not isinstance(expression, Mapping):
        raise InvalidInputError(
            code="E_INVALID_INPUT",
            message="expression must be a mapping of field -> list of values",
        )

    if len(expression) > len(FIELDS):
        raise TooManyFieldsError(
            code="E_TOO_MANY_FIELDS",
            message=f"invalid cron expression; limited to {len(FIELDS)} fields",
        )

    seen: set[str] = set()
    for key, tokens in expression.items():
        name = require_field(key)
        if name in seen:
            raise InvalidInputError(
                code="E_INVALID_INPUT",
                message=f"field given more than once (as {key!r} and its alias)",
                field=name,
            )
        seen.add(name)
        if not isinstance(tokens, (list, tuple)):
            raise InvalidInputError(
                code="E_INVALID_INPUT",
                message="values must be a list of strings",
                field=name,
            )
        for token in tokens:
            validate_value(name, token)


def check_string(cron_string: Any) -> list[CronValidationError]:
    """Collect every validation error in `cron_string` without raising.

    Returns an empty list when the string is valid.
    """

    try:
        parts = split_fields(cron_string)
    except CronValidationError as e:
        return [e]

    errors: list[CronValidationError] = []
    for i, part in enumerate(parts):
        for token in part.split(","):
            try:
                validate_value(FIELDS[i], token)
            except CronValidationError as e:
                errors.append(e)
    return errors


def split_fields(cron_string: Any) -> list[str]:
    if not isinstance(cron_string, str):
        raise InvalidInputError(
            code="E_INVALID_INPUT",
            message=f"cron expression must be a string, got {type(cron_string).__name__}",
        )

    parts = cron_string.split(" ")
    if len(parts) > len(FIELDS):
        raise TooManyFieldsError(
            code="E_TOO_MANY_FIELDS",
            message=f"invalid cron expression; limited to {len(FIELDS)} fields, got {len(parts)}",
            value=cron_string,
        )
    return parts


def _leading_int(text: str) -> Optional[int]:
    m = _LEADING_INT.match(text)
    if not m:
        return None
    return int(m.group(1))
