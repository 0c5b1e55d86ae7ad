"""
================================================================================
Locators
================================================================================

Immutable (strategy, path) pairs identifying elements on a live page, and the
element definitions page objects declare with them.

Usage:
    search_input = Locator(LocatorStrategy.XPATH, '//input[@id="query"]')
    page.locator(search_input.selector)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import ArgumentError


class LocatorStrategy(str, Enum):
    """Selector engines understood by Playwright."""

    XPATH = "xpath"
    CSS = "css"
    TEXT = "text"
    ID = "id"
    TEST_ID = "data-testid"


class LookupMode(str, Enum):
    """Whether a lookup wants the first match or every match."""

    SINGLE = "single"
    ALL = "all"

    @classmethod
    def parse(cls, mode: Union["LookupMode", str]) -> "LookupMode":
        if isinstance(mode, cls):
            return mode
        normalized = str(mode).strip().lower()
        # "find" is the historical name for a single-element lookup
        if normalized == "find":
            return cls.SINGLE
        try:
            return cls(normalized)
        except ValueError:
            raise ArgumentError(f"Unknown lookup mode: {mode!r}") from None


@dataclass(frozen=True)
class Locator:
    """
    Identifies zero or more elements on a page.

    Attributes:
        strategy: Selector engine
        path: Engine-specific expression (XPath, CSS selector, text, ...)
    """

    strategy: LocatorStrategy
    path: str

    def __post_init__(self) -> None:
        if not isinstance(self.strategy, LocatorStrategy):
            try:
                object.__setattr__(self, "strategy", LocatorStrategy(self.strategy))
            except ValueError:
                raise ArgumentError(f"Unknown locator strategy: {self.strategy!r}") from None
        if not self.path or not self.path.strip():
            raise ArgumentError("Locator path must not be empty")

    @property
    def selector(self) -> str:
        """Playwright selector string, e.g. ``xpath=//div``."""
        return f"{self.strategy.value}={self.path}"

    def __str__(self) -> str:
        return self.selector


@dataclass(frozen=True)
class ElementDefinition:
    """An entry of a page object's element map."""

    locator: Locator
    collection: bool = False

    @property
    def mode(self) -> LookupMode:
        return LookupMode.ALL if self.collection else LookupMode.SINGLE


def element(path: str, strategy: Union[LocatorStrategy, str] = LocatorStrategy.XPATH) -> ElementDefinition:
    """Declare a single element (XPath by default)."""
    return ElementDefinition(Locator(strategy, path))


def elements(path: str, strategy: Union[LocatorStrategy, str] = LocatorStrategy.XPATH) -> ElementDefinition:
    """Declare an element collection (XPath by default)."""
    return ElementDefinition(Locator(strategy, path), collection=True)


__all__ = [
    "LocatorStrategy",
    "LookupMode",
    "Locator",
    "ElementDefinition",
    "element",
    "elements",
]
