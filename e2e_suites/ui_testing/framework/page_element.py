"""
================================================================================
Page Elements
================================================================================

Thin wrappers around resolved element handles:
    - PageElement: scroll-then-act helpers
    - Select: custom dropdown widgets (open, wait for options, pick one)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import random
import time
from enum import Enum
from typing import Any, List, Optional, Union

from loguru import logger

from e2e_tools.report_tools import StepReporter

from .errors import ArgumentError, ElementNotFoundError
from .locator import Locator, LookupMode
from .readiness import Clock, Sleep, wait_for_condition
from .retrying_lookup import RetryingLookup, retry_stale
from .session import stale_guard


class PageElement:
    """
    A resolved element.

    Usage:
        button = PageElement(await lookup.find(locator))
        await button.click()
    """

    def __init__(self, handle: Any):
        self.handle = handle

    async def click(self) -> "PageElement":
        with stale_guard():
            await self.handle.scroll_into_view_if_needed()
            await self.handle.click()
        return self

    async def fill(self, value: str) -> "PageElement":
        with stale_guard():
            await self.handle.fill(value)
        return self

    async def type(self, value: str) -> "PageElement":
        with stale_guard():
            await self.handle.type(value)
        return self

    async def press(self, key: str) -> "PageElement":
        with stale_guard():
            await self.handle.press(key)
        return self

    async def text(self) -> str:
        with stale_guard():
            return (await self.handle.inner_text()).strip()

    async def is_visible(self) -> bool:
        with stale_guard():
            return await self.handle.is_visible()


class PickingPolicy(str, Enum):
    """How an option's text is compared with the wanted value."""

    INCLUDE = "include"
    EXACT = "exact"

    @classmethod
    def parse(cls, policy: Union["PickingPolicy", str]) -> "PickingPolicy":
        try:
            return cls(policy)
        except ValueError:
            raise ArgumentError(f"Unknown picking policy: {policy!r}") from None

    def matches(self, text: str, value: str) -> bool:
        if self is PickingPolicy.EXACT:
            return text == value
        return value in text


class Select(PageElement):
    """
    Custom dropdown: click to open, options render asynchronously.

    Usage:
        country = Select(
            handle,
            lookup,
            options=Locator("xpath", "//li[@role='option']"),
            search_input=Locator("xpath", "//input[@role='combobox']"),
        )
        await country.choose("Netherlands")
        await country.search_and_choose("Nor", policy="include")
    """

    def __init__(
        self,
        handle: Any,
        lookup: RetryingLookup,
        options: Locator,
        search_input: Optional[Locator] = None,
        reporter: Optional[StepReporter] = None,
        max_retries: int = 5,
        retry_interval: float = 1.0,
        options_timeout: float = 10.0,
        options_delay: float = 1.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        super().__init__(handle)
        self.lookup = lookup
        self.options_locator = options
        self.search_input = search_input
        self.reporter = reporter or StepReporter.from_config()
        self.max_retries = max_retries
        self.retry_interval = retry_interval
        self.options_timeout = options_timeout
        self.options_delay = options_delay
        self._clock = clock
        self._sleep = sleep

    async def options(self) -> List[Any]:
        """Currently rendered option handles (possibly empty)."""
        result = await self.lookup.lookup(
            self.options_locator,
            LookupMode.ALL,
            name="select options",
            wait=0,
            wait_for_page=False,
        )
        return list(result.handles)

    async def wait_for_options_to_appear(self) -> List[Any]:
        """
        Raises:
            PageTimeoutError: No option rendered within ``options_timeout``
        """
        return await wait_for_condition(
            "select options appears on the page",
            self.options,
            timeout=self.options_timeout,
            delay=self.options_delay,
            clock=self._clock,
            sleep=self._sleep,
        )

    async def select(self, value: str, policy: Union[PickingPolicy, str] = PickingPolicy.INCLUDE, search: bool = False) -> None:
        policy = PickingPolicy.parse(policy)
        with self.reporter.step(f"Select '{value}' ({policy.value})"):
            await self.click()
            if search:
                if self.search_input is None:
                    raise ArgumentError("This select has no search input")
                field = await self.lookup.find(self.search_input, name="select search input")
                await PageElement(field).fill(value)
            await self.wait_for_options_to_appear()
            await self.pick_option(value, policy)

    async def choose(self, value: str, policy: Union[PickingPolicy, str] = PickingPolicy.INCLUDE) -> None:
        await self.select(value, policy)

    async def search_and_choose(self, value: str, policy: Union[PickingPolicy, str] = PickingPolicy.INCLUDE) -> None:
        await self.select(value, policy, search=True)

    async def choose_random(self) -> str:
        """Open the dropdown and pick a random option; returns its text."""
        await self.click()
        options = await self.wait_for_options_to_appear()
        texts = [await PageElement(option).text() for option in options]
        value = random.choice(texts)
        logger.debug(f"Randomly chose option '{value}'")
        await self.pick_option(value, PickingPolicy.INCLUDE)
        return value

    async def pick_option(self, value: str, policy: Union[PickingPolicy, str] = PickingPolicy.INCLUDE) -> None:
        """
        Click the first option whose text matches ``value``.

        Options re-rendering underneath us are retried as stale references.

        Raises:
            ElementNotFoundError: No option matches
            StaleReferenceError: Options kept detaching after all retries
        """
        policy = PickingPolicy.parse(policy)

        async def attempt() -> None:
            for option in await self.options():
                element = PageElement(option)
                if policy.matches(await element.text(), value):
                    await element.click()
                    return
            raise ElementNotFoundError(
                f"No option matching '{value}' ({policy.value}) in {self.options_locator}",
                name=value,
                locator=self.options_locator,
            )

        await retry_stale(
            attempt,
            description=f"option '{value}'",
            max_retries=self.max_retries,
            retry_interval=self.retry_interval,
            sleep=self._sleep,
        )


__all__ = [
    "PageElement",
    "PickingPolicy",
    "Select",
]
