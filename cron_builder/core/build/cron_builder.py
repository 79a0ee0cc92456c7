from __future__ import annotations

import logging
from typing import Any, Optional

from cron_builder.core.config.build_options import BuildOptions
from cron_builder.core.convert.converter import CronConverter, CronConverterAdapter
from cron_builder.core.errors import InvalidInputError
from cron_builder.core.model import (
    FIELDS,
    ExpandedExpression,
    Expression,
    default_expression,
    default_interval,
    is_default,
    resolve_field,
)
from cron_builder.core.validate.validate_cron import (
    require_field,
    validate_expression,
    validate_string,
    validate_value,
)

logger = logging.getLogger(__name__)


class CronBuilder:
    """Mutable five-field cron expression.

    Every mutation is validated before anything is written, so a failed call
    leaves the expression exactly as it was.

        cron = CronBuilder()
        cron.set("minute", ["0", "30"])
        cron.add_value("hour", "9")
        cron.build()  # "0,30 9 * * *"
    """

    def __init__(
        self,
        initial_expression: Optional[str] = None,
        *,
        converter: Optional[CronConverter] = None,
    ) -> None:
        self._converter: CronConverter = converter or CronConverterAdapter()
        self._expression: Expression = default_expression()

        if initial_expression:
            validate_string(initial_expression)
            for name, part in zip(FIELDS, initial_expression.split(" ")):
                self._expression[name] = part.split(",")

    def build(
        self,
        *,
        plain: bool = True,
        output_weekday_names: bool = False,
        output_month_names: bool = False,
        output_hashes: bool = False,
    ) -> str:
        """Build the cron string from the current state.

        plain=True returns the fields as stored. plain=False hands the string to
        the converter for the short form, e.g. `* 13 * 1-6 0,1,2,3,5,6` becomes
        `* 13 * 1-6 0-3,5-6`. The name/hash flags only apply to the short form.
        """
        cron_string = " ".join(",".join(self._expression[name]) for name in FIELDS)
        if plain:
            return cron_string

        logger.debug("Compacting %r", cron_string)
        return self._converter.compact(
            cron_string,
            output_weekday_names=output_weekday_names,
            output_month_names=output_month_names,
            output_hashes=output_hashes,
        )

    def build_with(self, options: BuildOptions) -> str:
        return self.build(**options.as_kwargs())

    def add_value(self, field: str, value: str) -> None:
        """Add a value to the field. Adding a value that is already present is a no-op."""
        validate_value(field, value)
        name = require_field(field)
        tokens = self._expression[name]

        if is_default(tokens):
            self._expression[name] = [value]
        elif value not in tokens:
            tokens.append(value)
        else:
            logger.debug('"%s" already contains "%s"; no-op', name, value)

    def remove_value(self, field: str, value: str) -> None:
        """Remove every occurrence of a value. An emptied field falls back to `*`."""
        name = require_field(field)
        tokens = self._expression[name]

        if is_default(tokens):
            logger.info('The value for "%s" is already the default "*"; no-op', name)
            return

        remaining = [t for t in tokens if t != value]
        self._expression[name] = remaining or default_interval()

    def get(self, field: str, expand: bool = False) -> str | list[int]:
        """Return the field as a comma separated string, or its integer set when expanded."""
        name = require_field(field)
        if not expand:
            return ",".join(self._expression[name])
        return self.get_all(expand=True)[name]

    def get_all(self, expand: bool = False) -> Expression | ExpandedExpression:
        """Return a copy of the whole expression.

        Not expanded: field -> list of tokens; editing the result does not touch
        the builder until it is passed back through `set_all`.
        Expanded: field -> ordered list of the integers the field matches.
        """
        if not expand:
            return {name: list(self._expression[name]) for name in FIELDS}

        cron_string = self.build()
        logger.debug("Expanding %r", cron_string)
        expanded = self._converter.expand(cron_string)
        return {name: list(values) for name, values in zip(FIELDS, expanded)}

    def set(self, field: str, values: list[str]) -> str:
        """Replace the field with `values` and return them comma separated.

        Raises InvalidInputError if `values` is not a list, and a validation
        error if any single value is illegal; nothing is written in either case.
        """
        if not isinstance(values, (list, tuple)):
            raise InvalidInputError(
                code="E_INVALID_INPUT",
                message="invalid value; value must be a list of strings",
                field=str(field),
            )

        name = require_field(field)
        for item in values:
            validate_value(name, item)

        self._expression[name] = list(values) or default_interval()
        return ",".join(self._expression[name])

    def set_all(self, expression: dict[str, Any]) -> None:
        """Replace the whole expression. Missing or empty fields become `*`."""
        validate_expression(expression)

        candidate: Expression = {}
        for key, values in expression.items():
            candidate[resolve_field(key)] = list(values)  # type: ignore[index]

        for name in FIELDS:
            self._expression[name] = candidate.get(name) or default_interval()

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"CronBuilder({self.build()!r})"
