"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for GitHub pages.

Each page class declares:
    - PAGE_NAME / URL_PATH
    - ELEMENTS: element name -> locator definition
    - REQUIRED_ELEMENTS validated when the page loads
    - Page-specific actions

Author: Automation Team
License: MIT
================================================================================
"""

from .github_main_page import GithubMainPage
from .github_repo_page import GithubRepoPage
from .github_repos_page import GithubReposPage

__all__ = [
    "GithubMainPage",
    "GithubRepoPage",
    "GithubReposPage",
]
