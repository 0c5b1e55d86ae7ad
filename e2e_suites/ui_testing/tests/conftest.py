"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module configures pytest for UI tests, providing fixtures for browser
management, page objects, and test setup/teardown.

Key Features:
- Browser and context lifecycle management
- Page Object fixtures for the GitHub pages
- Exactly one failure step (with screenshot) per failed test
- Video attachment after the context is closed

================================================================================
"""

from typing import AsyncGenerator

import pytest

from e2e_suites.ui_testing.framework.browser_manager import BrowserManager
from e2e_suites.ui_testing.framework.failure_reporting import reported_session
from e2e_suites.ui_testing.framework.session import BrowserSession
from e2e_suites.ui_testing.pages import GithubMainPage, GithubRepoPage, GithubReposPage
from e2e_tools.report_tools import StepReporter


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase report on the item so fixtures can see the outcome.

    ``item.rep_call`` is available to fixture teardown, which is where the
    failure step and screenshot are recorded while the page is still open.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser_manager() -> AsyncGenerator[BrowserManager, None]:
    """
    Browser manager owning one browser for the test.
    """
    async with BrowserManager() as manager:
        yield manager


@pytest.fixture
def reporter() -> StepReporter:
    return StepReporter.from_config()


@pytest.fixture
async def session(
    request,
    browser_manager: BrowserManager,
    reporter: StepReporter,
) -> AsyncGenerator[BrowserSession, None]:
    """
    Function-scoped browser session in a fresh context.

    On failure a single "Test failed" step with a screenshot is logged before
    the context closes; the recorded video is attached afterwards.
    """
    async with reported_session(browser_manager, reporter, request.node) as browser_session:
        yield browser_session


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def github_main_page(session: BrowserSession, reporter: StepReporter) -> GithubMainPage:
    return GithubMainPage(session, reporter=reporter)


@pytest.fixture
def github_repos_page(session: BrowserSession, reporter: StepReporter) -> GithubReposPage:
    return GithubReposPage(session, reporter=reporter)


@pytest.fixture
def github_repo_page(session: BrowserSession, reporter: StepReporter) -> GithubRepoPage:
    return GithubRepoPage(session, reporter=reporter)
