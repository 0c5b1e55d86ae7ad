"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based page-object framework with retrying element lookup.

Components:
    - locator: Locator / element definitions
    - readiness: Page readiness probe (ready state + quiet network window)
    - retrying_lookup: Element lookup with stale-reference backoff
    - presence: Batched presence validation
    - page_base: Base page object and blocks
    - page_element: Element wrappers and custom selects
    - session / browser_manager: Playwright session and lifecycle
    - failure_reporting: Session that reports a failed test once

Author: Automation Team
License: MIT
================================================================================
"""

from .errors import (
    ArgumentError,
    ElementAssertionError,
    ElementNotFoundError,
    ErrorKind,
    PageTimeoutError,
    PresenceError,
    StaleReferenceError,
    UiFrameworkError,
    classify,
)
from .locator import ElementDefinition, Locator, LocatorStrategy, LookupMode, element, elements
from .readiness import PageReadinessProbe, ReadinessSnapshot, ReadinessState, wait_for_condition
from .retrying_lookup import LookupKind, LookupResult, RetryingLookup, RetryPolicy, retry_stale
from .presence import PresenceReport, PresenceValidator
from .page_element import PageElement, PickingPolicy, Select
from .page_base import BasePage, PageBase, PageBlock
from .session import BrowserSession
from .browser_manager import BrowserManager
from .failure_reporting import failure_message, reported_session

__all__ = [
    "ArgumentError",
    "ElementAssertionError",
    "ElementNotFoundError",
    "ErrorKind",
    "PageTimeoutError",
    "PresenceError",
    "StaleReferenceError",
    "UiFrameworkError",
    "classify",
    "ElementDefinition",
    "Locator",
    "LocatorStrategy",
    "LookupMode",
    "element",
    "elements",
    "PageReadinessProbe",
    "ReadinessSnapshot",
    "ReadinessState",
    "wait_for_condition",
    "LookupKind",
    "LookupResult",
    "RetryingLookup",
    "RetryPolicy",
    "retry_stale",
    "PresenceReport",
    "PresenceValidator",
    "PageElement",
    "PickingPolicy",
    "Select",
    "BasePage",
    "PageBase",
    "PageBlock",
    "BrowserSession",
    "BrowserManager",
    "failure_message",
    "reported_session",
]
