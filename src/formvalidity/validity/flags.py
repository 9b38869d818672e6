"""
Native validity flags and their evaluation order.

A control reports which constraints its current value violates as a set of
flags. ``ValidityFlag`` is declared in priority order: the first violated
flag in declaration order is the one a message is synthesized for.
"""

from dataclasses import dataclass
from enum import Enum


class ValidityFlag(Enum):
    """Native constraint violation kinds, in message priority order."""

    VALUE_MISSING = "valueMissing"
    TYPE_MISMATCH = "typeMismatch"
    BAD_INPUT = "badInput"
    TOO_SHORT = "tooShort"
    TOO_LONG = "tooLong"
    RANGE_UNDERFLOW = "rangeUnderflow"
    RANGE_OVERFLOW = "rangeOverflow"
    STEP_MISMATCH = "stepMismatch"
    PATTERN_MISMATCH = "patternMismatch"
    CUSTOM_ERROR = "customError"


class ValidityStatus(Enum):
    """Outcome of the last evaluation of a control binding."""

    UNKNOWN = "unknown"  # Not evaluated since mount or reset
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidityState:
    """Immutable snapshot of the flags currently set on a control."""

    flags: frozenset[ValidityFlag] = frozenset()

    @property
    def valid(self) -> bool:
        return not self.flags

    def __contains__(self, flag: ValidityFlag) -> bool:
        return flag in self.flags

    def first(self) -> ValidityFlag | None:
        """Return the highest-priority flag that is set, if any."""
        for flag in ValidityFlag:
            if flag in self.flags:
                return flag
        return None

    @classmethod
    def of(cls, *flags: ValidityFlag) -> "ValidityState":
        return cls(flags=frozenset(flags))
