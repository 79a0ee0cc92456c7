from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CronError(Exception):
    """Base error envelope. Carries a stable code so callers can branch without parsing messages."""

    code: str
    message: str
    file: Optional[str] = None
    field: Optional[str] = None
    value: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.field:
            parts.append(self.field)
        loc = ":".join(parts) if parts else "<cron>"
        return f"{loc}: {self.code}: {self.message}"


class CronLoadError(CronError):
    pass


class CronValidationError(CronError):
    pass


class InvalidFieldError(CronValidationError):
    pass


class InvalidSyntaxError(CronValidationError):
    pass


class RangeLowOutOfBoundsError(CronValidationError):
    pass


class RangeHighOutOfBoundsError(CronValidationError):
    pass


class ValueBelowMinimumError(CronValidationError):
    pass


class ValueAboveMaximumError(CronValidationError):
    pass


class TooManyFieldsError(CronValidationError):
    pass


class InvalidInputError(CronValidationError):
    pass
