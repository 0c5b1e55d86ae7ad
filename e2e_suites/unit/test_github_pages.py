import allure
import pytest

from e2e_suites.ui_testing.framework import (
    ElementNotFoundError,
    PageReadinessProbe,
    RetryingLookup,
    RetryPolicy,
)
from e2e_suites.ui_testing.pages import GithubMainPage, GithubRepoPage, GithubReposPage
from e2e_tools.report_tools import StepReporter
from e2e_suites.unit.fakes import FakeClock, FakeHandle, FakeSession


def build(page_class, session):
    clock = FakeClock()
    probe = PageReadinessProbe(session, poll_interval=0.5, quiet_window=0, clock=clock, sleep=clock.sleep)
    lookup = RetryingLookup(
        session,
        probe=probe,
        policy=RetryPolicy(max_retries=0, overall_timeout=1.0),
        clock=clock,
        sleep=clock.sleep,
    )
    return page_class(session, lookup=lookup, reporter=StepReporter(enabled=False), base_url="https://github.com")


@pytest.mark.asyncio
async def test_search_types_query_and_submits():
    span, field = FakeHandle(), FakeHandle()
    page = build(GithubMainPage, FakeSession())
    session = page.session
    session.resolve_script = {
        page.path_of("search_span"): [[span]],
        page.path_of("search_input"): [[field]],
    }

    await page.search_for("microsoft/playwright-python")

    assert span.clicks == 1
    assert field.typed == ["microsoft/playwright-python"]
    assert field.pressed == ["Enter"]


def script_titles(page, titles):
    page.session.resolve_script = {
        page.path_of("result_list"): [[FakeHandle()]],
        page.path_of("result_titles"): [titles],
    }


@pytest.mark.asyncio
async def test_open_repo_by_author_clicks_matching_title():
    titles = [FakeHandle("someone/playwright-fork"), FakeHandle("microsoft/playwright-python")]
    page = build(GithubReposPage, FakeSession())
    script_titles(page, titles)

    await page.load()
    await page.open_repo_by_author("microsoft")

    assert [t.clicks for t in titles] == [0, 1]


@pytest.mark.asyncio
async def test_open_repo_by_unknown_author():
    page = build(GithubReposPage, FakeSession())
    script_titles(page, [FakeHandle("someone/else")])

    with pytest.raises(ElementNotFoundError) as excinfo:
        await page.open_repo_by_author("microsoft")

    assert excinfo.value.name == "microsoft"


@pytest.mark.asyncio
async def test_no_result_titles_is_not_found():
    page = build(GithubReposPage, FakeSession())
    script_titles(page, [])

    with pytest.raises(ElementNotFoundError) as excinfo:
        await page.result_titles()

    assert "result_titles" in str(excinfo.value)


@pytest.mark.asyncio
async def test_fork_counter_text():
    page = build(GithubRepoPage, FakeSession())
    page.session.resolve_script = {page.path_of("forks"): [[FakeHandle(" 412 ")]]}

    await page.load()

    assert await page.fork_counter() == "412"


@pytest.mark.asyncio
async def test_disabled_reporter_keeps_page_steps_out_of_allure(monkeypatch):
    def no_allure_step(title):
        raise AssertionError(f"allure step recorded: {title}")

    monkeypatch.setattr(allure, "step", no_allure_step)
    main_page = build(GithubMainPage, FakeSession())
    main_page.session.resolve_script = {
        main_page.path_of("search_span"): [[FakeHandle()]],
        main_page.path_of("search_input"): [[FakeHandle()]],
    }
    repos_page = build(GithubReposPage, FakeSession())
    script_titles(repos_page, [FakeHandle("microsoft/playwright-python")])

    await main_page.search_for("playwright")
    await repos_page.open_repo_by_author("microsoft")
