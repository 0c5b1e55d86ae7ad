"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle management for UI automation.

Features:
    - One browser per test run, one isolated context per test
    - Guaranteed context release, also when the test fails
    - Optional video recording per context
    - Browser configuration from config.yaml

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from loguru import logger
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Playwright,
)

from e2e_tools.common import get_config

from .session import BrowserSession


class BrowserManager:
    """
    Manages the browser instance and hands out per-test sessions.

    Usage:
        async with BrowserManager() as manager:
            async with manager.session() as session:
                await session.goto("https://github.com")
    """

    # Default browser launch options
    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "headless": True,
        "args": [
            "--ignore-certificate-errors",
            "--disable-dev-shm-usage",
        ],
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        record_video: Optional[bool] = None,
        videos_dir: Optional[Path] = None,
    ):
        """
        Initialize browser manager.

        Args:
            headless: Run browser in headless mode (config ``browser.headless``)
            browser_type: 'chromium', 'firefox' or 'webkit' (config ``browser.type``)
            record_video: Record a video per context (config ``browser.record_video``)
            videos_dir: Where videos are written (config ``allure.videos_dir``)
        """
        self.headless = get_config("browser.headless", True) if headless is None else headless
        self.browser_type = browser_type or get_config("browser.type", "chromium")
        self.record_video = (
            get_config("browser.record_video", False) if record_video is None else record_video
        )
        self.videos_dir = Path(videos_dir or get_config("allure.videos_dir", "reports/videos"))

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry - start browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close browser."""
        await self.close()

    async def start(self) -> None:
        """Start Playwright and launch browser."""
        self._playwright = await async_playwright().start()

        if self.browser_type == "firefox":
            browser_launcher = self._playwright.firefox
        elif self.browser_type == "webkit":
            browser_launcher = self._playwright.webkit
        else:
            browser_launcher = self._playwright.chromium

        launch_options = {
            **self.DEFAULT_LAUNCH_OPTIONS,
            "headless": self.headless,
        }

        self._browser = await browser_launcher.launch(**launch_options)
        logger.debug(
            f"Browser started: {self.browser_type} "
            f"(headless={self.headless})"
        )

    async def close(self) -> None:
        """Close browser and stop Playwright."""
        if self._browser:
            await self._browser.close()
            self._browser = None

        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def context_options(self, **options: Any) -> Dict[str, Any]:
        context_options: Dict[str, Any] = {
            "viewport": get_config("browser.viewport", {"width": 1920, "height": 1080}),
            "ignore_https_errors": True,
        }
        if self.record_video:
            self.videos_dir.mkdir(parents=True, exist_ok=True)
            context_options["record_video_dir"] = str(self.videos_dir)
        context_options.update(options)
        return context_options

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Create new isolated browser context (own cookies, storage, video).
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")
        return await self._browser.new_context(**self.context_options(**options))

    @asynccontextmanager
    async def session(self, **context_options: Any) -> AsyncIterator[BrowserSession]:
        """
        Acquire a fresh page wrapped in a BrowserSession.

        The context is closed on exit whatever happened inside the block,
        so the next test always starts from a clean browser state.
        """
        context = await self.new_context(**context_options)
        try:
            page = await context.new_page()
            yield BrowserSession(page)
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Failed to close browser context: {e}")

    @property
    def browser(self) -> Optional[Browser]:
        """Get browser instance."""
        return self._browser


__all__ = [
    "BrowserManager",
]
