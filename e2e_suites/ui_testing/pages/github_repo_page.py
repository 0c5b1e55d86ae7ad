"""
================================================================================
GitHub Repository Page Object
================================================================================
"""

from __future__ import annotations

from e2e_suites.ui_testing.framework.locator import element
from e2e_suites.ui_testing.framework.page_base import PageBase


class GithubRepoPage(PageBase):
    """Single repository page (async)."""

    PAGE_NAME = "Github Repository Page"
    ELEMENTS = {
        "forks": element('//a[@id="fork-button"]/span[@id="repo-network-counter"]'),
    }
    REQUIRED_ELEMENTS = ("forks",)

    async def fork_counter(self) -> str:
        return await (await self.element("forks")).text()
