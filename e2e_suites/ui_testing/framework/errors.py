"""
================================================================================
Framework Errors
================================================================================

Typed failures raised by the page-object framework.

Every error carries an ``ErrorKind`` tag so callers can branch on the
outcome without walking the exception hierarchy:

    kind = classify(exc)
    if kind is ErrorKind.NOT_FOUND:
        ...

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from .locator import Locator


class ErrorKind(str, Enum):
    """Outcome tags for framework failures."""

    TIMEOUT = "timeout"
    STALE_REFERENCE = "stale_reference"
    NOT_FOUND = "not_found"
    PRESENCE = "presence"
    ARGUMENT = "argument"


class UiFrameworkError(Exception):
    """Base class for all page-object framework errors."""

    kind: ErrorKind


class PageTimeoutError(UiFrameworkError, TimeoutError):
    """Raised when a readiness or condition deadline is exceeded."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, elapsed: float = 0.0, last_state: Any = None):
        super().__init__(message)
        self.elapsed = elapsed
        self.last_state = last_state


class StaleReferenceError(UiFrameworkError):
    """
    Raised when an element handle was detached from the DOM between
    resolution and use.

    ``attempts`` is set once retries are exhausted.
    """

    kind = ErrorKind.STALE_REFERENCE

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class ElementNotFoundError(UiFrameworkError):
    """Raised when a locator resolves to nothing."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        locator: Optional["Locator"] = None,
    ):
        super().__init__(message)
        self.name = name
        self.locator = locator

    @classmethod
    def for_locator(cls, locator: "Locator", name: Optional[str] = None) -> "ElementNotFoundError":
        label = name or "element"
        return cls(
            f"Could not find element {label}. Please check {locator.strategy.value} [{locator.path}]",
            name=name,
            locator=locator,
        )


class ElementAssertionError(ElementNotFoundError, AssertionError):
    """ElementNotFoundError re-typed so pytest reports it as a failed assertion."""


class PresenceError(UiFrameworkError):
    """Raised when one or more named elements are missing from a page."""

    kind = ErrorKind.PRESENCE

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"Missing elements: {', '.join(self.missing)}")


class ArgumentError(UiFrameworkError, ValueError):
    """Programmer error: invalid lookup mode, policy value or element name."""

    kind = ErrorKind.ARGUMENT


def classify(exc: BaseException) -> Optional[ErrorKind]:
    """Return the ErrorKind of a framework error, or None for foreign errors."""
    return getattr(exc, "kind", None) if isinstance(exc, UiFrameworkError) else None


def is_absence(exc: BaseException) -> bool:
    """True for failures that mean "the element is not there"."""
    return classify(exc) is ErrorKind.NOT_FOUND or isinstance(exc, AssertionError)


__all__ = [
    "ErrorKind",
    "UiFrameworkError",
    "PageTimeoutError",
    "StaleReferenceError",
    "ElementNotFoundError",
    "ElementAssertionError",
    "PresenceError",
    "ArgumentError",
    "classify",
    "is_absence",
]
