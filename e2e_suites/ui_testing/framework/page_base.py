"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

A page object declares its elements as an explicit name -> definition map
and reads them through one generic accessor:

    class SearchPage(BasePage):
        PAGE_NAME = "Search Page"
        ELEMENTS = {
            "query": element('//input[@name="q"]'),
            "results": elements('//li[@class="result"]'),
        }
        REQUIRED_ELEMENTS = ("query",)

    page = await SearchPage(session).load()
    rows = await page.get("results")

The page holds its collaborators (session, RetryingLookup, StepReporter)
explicitly; nothing is inherited from mixins or global browser state.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from loguru import logger

from e2e_tools.common import get_config
from e2e_tools.report_tools import StepReporter

from .errors import ArgumentError
from .locator import ElementDefinition
from .page_element import PageElement
from .presence import PresenceReport, PresenceValidator
from .retrying_lookup import RetryingLookup
from .session import BrowserSession


P = TypeVar("P", bound="BasePage")
B = TypeVar("B", bound="PageBlock")


class BasePage:
    """
    Base class for all page objects.

    Provides:
        - Element map access via ``get`` / ``element``
        - Readiness wait and "page loaded" step on ``load``
        - Batched presence validation
        - Nested blocks sharing the same collaborators
    """

    # Override in subclasses
    PAGE_NAME: str = ""
    URL_PATH: str = "/"
    ELEMENTS: Dict[str, ElementDefinition] = {}
    REQUIRED_ELEMENTS: Tuple[str, ...] = ()

    def __init__(
        self,
        session: BrowserSession,
        lookup: Optional[RetryingLookup] = None,
        reporter: Optional[StepReporter] = None,
        base_url: str = "",
    ):
        """
        Initialize page object.

        Args:
            session: Browser session owned by the running test
            lookup: Element lookup; built for ``session`` when omitted
            reporter: Step reporter; built from config when omitted
            base_url: Base URL for ``open``; defaults to ``ui.base_url``
        """
        self.session = session
        self.lookup = lookup or RetryingLookup(session)
        self.reporter = reporter or StepReporter.from_config()
        base_url = base_url or get_config("ui.base_url", "https://github.com")
        self.base_url = base_url.rstrip("/")
        self.presence = PresenceValidator(self.get)

    @property
    def name(self) -> str:
        return self.PAGE_NAME or type(self).__name__

    @property
    def url(self) -> str:
        """Full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    async def open(self: P, log_init: bool = True) -> P:
        """Navigate to this page's URL and wait until it is loaded."""
        with self.reporter.step(f"Navigate to {self.url}"):
            await self.session.goto(self.url)
        return await self.load(log_init=log_init)

    async def load(self: P, log_init: bool = True) -> P:
        """
        Wait for the page to settle, report it and check required elements.

        Raises:
            PageTimeoutError: Page never became ready
            PresenceError: Required elements are missing
        """
        await self.lookup.probe.wait_until_ready()
        if log_init:
            await self.reporter.log_step_with_screenshot(f"{self.name} is loaded", self.session)
        if self.REQUIRED_ELEMENTS:
            await self.validate_presence(*self.REQUIRED_ELEMENTS)
        return self

    # =========================================================================
    # Element access
    # =========================================================================

    def definition(self, name: str) -> ElementDefinition:
        try:
            return self.ELEMENTS[name]
        except KeyError:
            raise ArgumentError(f"{self.name} has no element named '{name}'") from None

    def path_of(self, name: str) -> str:
        """Locator path of a declared element."""
        return self.definition(name).locator.path

    async def get(self, name: str, **kwargs: Any) -> Union[Any, List[Any]]:
        """
        Generic element accessor.

        Returns the handle for single elements and a non-empty list for
        collections. Keyword arguments are passed to ``RetryingLookup.find``.
        """
        definition = self.definition(name)
        return await self.lookup.find(definition.locator, definition.mode, name=name, **kwargs)

    async def element(self, name: str, **kwargs: Any) -> PageElement:
        """Single element wrapped in a PageElement."""
        definition = self.definition(name)
        if definition.collection:
            raise ArgumentError(f"'{name}' is a collection; use get() instead")
        return PageElement(await self.get(name, **kwargs))

    async def validate_presence(self, *names: str) -> PresenceReport:
        """
        Check that every named element is present.

        Raises:
            PresenceError: Lists all missing names, in the given order
        """
        return await self.presence.validate_presence(names)

    def block(self, block_class: Type[B], **kwargs: Any) -> B:
        """Build a nested block sharing this page's collaborators."""
        return block_class(
            self.session,
            lookup=self.lookup,
            reporter=self.reporter,
            base_url=self.base_url,
            **kwargs,
        )

    async def screenshot(self, name: str) -> None:
        """Attach a screenshot of the current page to the report."""
        await self.reporter.attach_screenshot(name, self.session)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} url={self.session.current_url()!r}>"


class PageBlock(BasePage):
    """
    A reusable fragment of a page (header, dialog, widget).

    Blocks are built through ``BasePage.block`` and never log a load step.
    """

    async def load(self: B, log_init: bool = False) -> B:
        logger.debug(f"Loading block {self.name}")
        return await super().load(log_init=log_init)


__all__ = [
    "BasePage",
    "PageBase",
    "PageBlock",
]

# Backward-compatible alias (many Page Objects prefer PageBase naming)
PageBase = BasePage
