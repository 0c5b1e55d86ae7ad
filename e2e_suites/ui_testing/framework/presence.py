"""
================================================================================
Presence Validation
================================================================================

Checks a batch of named elements and reports every missing one at once,
rather than failing on the first absence.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Tuple

from loguru import logger

from .errors import PresenceError, is_absence


Accessor = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class PresenceReport:
    """Outcome of one validation pass, in input order."""

    checked: Tuple[str, ...]
    missing: Tuple[str, ...]

    @property
    def ok(self) -> bool:
        return not self.missing

    @property
    def present(self) -> Tuple[str, ...]:
        return tuple(name for name in self.checked if name not in self.missing)


def _is_empty(result: Any) -> bool:
    if result is None:
        return True
    if isinstance(result, (list, tuple)):
        return len(result) == 0
    return False


class PresenceValidator:
    """
    Applies an element accessor across names and collects the absent ones.

    Only "not found" failures (ElementNotFoundError or AssertionError) count
    as absence; any other error propagates unchanged.

    Usage:
        validator = PresenceValidator(page.get)
        await validator.validate_presence(["login", "password"])
    """

    def __init__(self, accessor: Accessor):
        self.accessor = accessor

    async def check(self, names: Iterable[str]) -> PresenceReport:
        """Run the accessor for every name and return the report without raising."""
        checked = tuple(names)
        missing = []

        for name in checked:
            try:
                result = await self.accessor(name)
            except Exception as e:
                if not is_absence(e):
                    raise
                logger.debug(f"Element '{name}' is absent: {e}")
                missing.append(name)
                continue

            if _is_empty(result):
                missing.append(name)

        return PresenceReport(checked=checked, missing=tuple(missing))

    async def validate_presence(self, names: Iterable[str]) -> PresenceReport:
        """
        Raises:
            PresenceError: One or more names were absent; lists all of them
        """
        report = await self.check(names)
        if not report.ok:
            logger.warning(f"Missing elements: {', '.join(report.missing)}")
            raise PresenceError(report.missing)
        return report


__all__ = [
    "PresenceReport",
    "PresenceValidator",
]
