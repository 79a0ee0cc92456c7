from __future__ import annotations

from typing import Protocol

from cron_converter import Cron


class CronConverter(Protocol):
    """Expands and compacts canonical cron strings.

    The builder only talks to this interface, so tests can swap in a fake.
    """

    def expand(self, cron_string: str) -> list[list[int]]:
        """Return five ordered lists of distinct integers, one per field."""
        ...

    def compact(
        self,
        cron_string: str,
        *,
        output_weekday_names: bool = False,
        output_month_names: bool = False,
        output_hashes: bool = False,
    ) -> str:
        """Return the shortest equivalent five-field string (ranges and steps)."""
        ...


class CronConverterAdapter:
    """CronConverter backed by the `cron-converter` package.

    Day-of-week is expanded over 0-6 with 7 folded onto 0. Parse errors raised
    by the library propagate unchanged.
    """

    def expand(self, cron_string: str) -> list[list[int]]:
        cron = Cron(cron_string)
        return [list(part) for part in cron.to_list()]

    def compact(
        self,
        cron_string: str,
        *,
        output_weekday_names: bool = False,
        output_month_names: bool = False,
        output_hashes: bool = False,
    ) -> str:
        flags = {
            "output_weekday_names": output_weekday_names,
            "output_month_names": output_month_names,
            "output_hashes": output_hashes,
        }
        # The library switches an option on when its key is present, whatever the value.
        cron = Cron(options={k: True for k, v in flags.items() if v})
        cron.from_string(cron_string)
        return cron.to_string()
