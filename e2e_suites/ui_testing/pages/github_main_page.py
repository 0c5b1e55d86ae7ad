"""
================================================================================
GitHub Main Page Object
================================================================================

Landing page with the global "Search or jump to..." box.

================================================================================
"""

from __future__ import annotations

from e2e_suites.ui_testing.framework.locator import element
from e2e_suites.ui_testing.framework.page_base import PageBase


class GithubMainPage(PageBase):
    """GitHub landing page (async)."""

    PAGE_NAME = "Github Main Page"
    URL_PATH = "/"
    ELEMENTS = {
        "search_span": element('//span[contains(text(), "Search or jump to...")]'),
        "search_input": element('//input[@id="query-builder-test"]'),
    }

    async def search_for(self, value: str) -> None:
        """Open the search box, type ``value`` and submit."""
        with self.reporter.step(f"Search for '{value}'"):
            await (await self.element("search_span")).click()
            search_input = await self.element("search_input")
            await search_input.type(value)
            await search_input.press("Enter")
