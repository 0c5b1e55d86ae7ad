"""
================================================================================
GitHub Repository Search Results Page Object
================================================================================
"""

from __future__ import annotations

from typing import Any, List

from loguru import logger

from e2e_suites.ui_testing.framework.errors import ElementNotFoundError
from e2e_suites.ui_testing.framework.locator import element, elements
from e2e_suites.ui_testing.framework.page_base import PageBase
from e2e_suites.ui_testing.framework.page_element import PageElement


class GithubReposPage(PageBase):
    """Search results list (async)."""

    PAGE_NAME = "Github Repositories Page"
    URL_PATH = "/search"
    ELEMENTS = {
        "result_list": element('//div[@data-testid="results-list"]'),
        "result_titles": elements('//div[@data-testid="results-list"]//div[contains(@class,"search-title")]'),
    }
    REQUIRED_ELEMENTS = ("result_list",)

    async def result_titles(self) -> List[Any]:
        """Title handles of the listed results; never empty."""
        return await self.get("result_titles")

    async def open_repo_by_author(self, value: str) -> None:
        """Click the first result whose title mentions ``value``."""
        with self.reporter.step(f"Open repository by author '{value}'"):
            for title in await self.result_titles():
                entry = PageElement(title)
                if value in await entry.text():
                    logger.debug(f"Opening search result matching '{value}'")
                    await entry.click()
                    return
            raise ElementNotFoundError(
                f"No search result by '{value}'. Please check xpath [{self.path_of('result_titles')}]",
                name=value,
                locator=self.definition("result_titles").locator,
            )
