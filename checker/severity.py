"""Severity definitions for rule outcomes."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Enumerate the supported severity levels for rules."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    NOTICE = "NOTICE"

    @property
    def rank(self) -> int:
        """Return an integer ranking used for blocking threshold comparisons."""

        ordering = {
            Severity.ERROR: 2,
            Severity.WARNING: 1,
            Severity.NOTICE: 0,
        }
        return ordering[self]

    def at_least(self, threshold: "Severity") -> bool:
        return self.rank >= threshold.rank

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        """Parse a severity name case-insensitively."""

        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            choices = ", ".join(level.value.lower() for level in cls)
            raise ValueError(f"Unknown severity {value!r} (expected one of: {choices})") from None
