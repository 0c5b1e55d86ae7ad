"""
================================================================================
Browser Session
================================================================================

Playwright adapter exposing the capabilities the framework needs from a
live page:
    - readiness snapshot (document ready + in-flight request counter)
    - locator resolution with a bounded wait
    - screenshots, current URL and recorded video

Playwright failures are translated into framework errors at this seam:
    - timeout while waiting for a single element -> ElementNotFoundError
    - timeout while waiting for a collection      -> empty list
    - detached element / destroyed context        -> StaleReferenceError

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from loguru import logger
from playwright.async_api import ElementHandle, Page, Request
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import ElementNotFoundError, StaleReferenceError
from .locator import Locator, LookupMode
from .readiness import ReadinessSnapshot


# Fragments of Playwright error messages that mean the node went away
STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
    "frame was detached",
    "node is detached",
)


def is_stale_error(exc: BaseException) -> bool:
    """True if a Playwright error means the element or its context is gone."""
    message = str(exc).lower()
    return any(marker in message for marker in STALE_MARKERS)


@contextmanager
def stale_guard() -> Iterator[None]:
    """Re-raise Playwright "element went away" errors as StaleReferenceError."""
    try:
        yield
    except PlaywrightError as e:
        if is_stale_error(e):
            raise StaleReferenceError(str(e)) from e
        raise


class BrowserSession:
    """
    One test's exclusive handle on a Playwright page.

    Usage:
        session = BrowserSession(page)
        await session.goto("https://github.com")
        handles = await session.resolve(locator, LookupMode.ALL, timeout=5)
    """

    def __init__(self, page: Page):
        self.page = page
        self._inflight = 0
        page.on("request", self._on_request)
        page.on("requestfinished", self._on_request_done)
        page.on("requestfailed", self._on_request_done)

    def _on_request(self, request: Request) -> None:
        self._inflight += 1

    def _on_request_done(self, request: Request) -> None:
        self._inflight = max(0, self._inflight - 1)

    @property
    def inflight_requests(self) -> int:
        return self._inflight

    async def goto(self, url: str, wait_until: str = "domcontentloaded") -> None:
        logger.debug(f"Navigating to: {url}")
        await self.page.goto(url, wait_until=wait_until)

    async def readiness(self) -> ReadinessSnapshot:
        try:
            ready_state = await self.page.evaluate("() => document.readyState")
        except PlaywrightError as e:
            # Navigation in progress; the next poll will see the new document
            logger.debug(f"readyState unavailable: {e}")
            ready_state = None
        return ReadinessSnapshot(
            dom_ready=ready_state == "complete",
            network_idle=self._inflight == 0,
        )

    async def resolve(
        self,
        locator: Locator,
        mode: Union[LookupMode, str],
        timeout: float,
    ) -> List[ElementHandle]:
        """
        Resolve a locator to element handles.

        Args:
            locator: What to look for
            mode: SINGLE returns at most the first match, ALL every match
            timeout: Seconds to wait for the first match to attach

        Raises:
            ElementNotFoundError: SINGLE mode and nothing attached in time
            StaleReferenceError: A handle detached while being resolved
        """
        mode = LookupMode.parse(mode)
        target = self.page.locator(locator.selector)
        # Playwright treats 0 as "no timeout"
        timeout_ms = max(timeout * 1000, 1)

        try:
            await target.first.wait_for(state="attached", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            if mode is LookupMode.ALL:
                return []
            raise ElementNotFoundError.for_locator(locator) from e
        except PlaywrightError as e:
            if is_stale_error(e):
                raise StaleReferenceError(str(e)) from e
            raise

        with stale_guard():
            if mode is LookupMode.SINGLE:
                handle = await target.first.element_handle(timeout=timeout_ms)
                handles = [handle] if handle is not None else []
            else:
                handles = await target.element_handles()

            for handle in handles:
                if not await handle.evaluate("node => node.isConnected"):
                    raise StaleReferenceError(f"Element detached from the DOM: {locator}")

        return handles

    async def screenshot(self, path: Union[str, Path], full_page: bool = True) -> Path:
        path = Path(path)
        await self.page.screenshot(path=str(path), full_page=full_page)
        return path

    def current_url(self) -> Optional[str]:
        """Best-effort current URL; None when the page is unavailable."""
        try:
            return self.page.url
        except Exception as e:
            logger.warning(f"Failed to get current URL: {e}")
            return None

    async def video_path(self) -> Optional[Path]:
        video = self.page.video
        if video is None:
            return None
        return Path(await video.path())


__all__ = [
    "BrowserSession",
    "STALE_MARKERS",
    "is_stale_error",
    "stale_guard",
]
