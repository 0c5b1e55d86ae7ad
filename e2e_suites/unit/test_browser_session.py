import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from e2e_suites.ui_testing.framework.errors import ElementNotFoundError, StaleReferenceError
from e2e_suites.ui_testing.framework.locator import Locator, LookupMode
from e2e_suites.ui_testing.framework.session import BrowserSession, is_stale_error, stale_guard


class FakeElementHandle:
    def __init__(self, connected=True):
        self.connected = connected

    async def evaluate(self, expression):
        return self.connected


class FakeLocator:
    def __init__(self, handles, wait_error=None):
        self.handles = handles
        self.wait_error = wait_error
        self.waits = []

    @property
    def first(self):
        return self

    async def wait_for(self, state, timeout):
        self.waits.append((state, timeout))
        if self.wait_error is not None:
            raise self.wait_error

    async def element_handle(self, timeout):
        return self.handles[0] if self.handles else None

    async def element_handles(self):
        return list(self.handles)


class FakePage:
    def __init__(self, locator=None, ready_state="complete", url="https://github.com/"):
        self.listeners = {}
        self.fake_locator = locator or FakeLocator([])
        self.selectors = []
        self.ready_state = ready_state
        self._url = url

    def on(self, event, callback):
        self.listeners[event] = callback

    def emit(self, event):
        self.listeners[event](object())

    def locator(self, selector):
        self.selectors.append(selector)
        return self.fake_locator

    async def evaluate(self, expression):
        if isinstance(self.ready_state, Exception):
            raise self.ready_state
        return self.ready_state

    @property
    def url(self):
        if isinstance(self._url, Exception):
            raise self._url
        return self._url


LOCATOR = Locator("xpath", "//a[@class='repo']")


@pytest.mark.asyncio
async def test_network_idle_tracks_inflight_requests():
    page = FakePage()
    session = BrowserSession(page)

    page.emit("request")
    page.emit("request")
    page.emit("requestfinished")
    busy = await session.readiness()

    page.emit("requestfailed")
    idle = await session.readiness()

    assert busy.dom_ready and not busy.network_idle
    assert idle.stable
    assert session.inflight_requests == 0


@pytest.mark.asyncio
async def test_counter_never_goes_negative():
    page = FakePage()
    session = BrowserSession(page)

    page.emit("requestfinished")

    assert session.inflight_requests == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ready_state",
    ["loading", "interactive", PlaywrightError("Execution context was destroyed")],
)
async def test_document_not_ready(ready_state):
    snapshot = await BrowserSession(FakePage(ready_state=ready_state)).readiness()

    assert not snapshot.dom_ready


@pytest.mark.asyncio
async def test_resolve_single_and_all():
    handles = [FakeElementHandle(), FakeElementHandle()]
    page = FakePage(FakeLocator(handles))
    session = BrowserSession(page)

    assert await session.resolve(LOCATOR, LookupMode.SINGLE, timeout=2) == handles[:1]
    assert await session.resolve(LOCATOR, "all", timeout=2) == handles
    assert page.selectors == [LOCATOR.selector, LOCATOR.selector]
    assert page.fake_locator.waits[0] == ("attached", 2000)


@pytest.mark.asyncio
async def test_zero_timeout_is_not_infinite():
    page = FakePage(FakeLocator([FakeElementHandle()]))

    await BrowserSession(page).resolve(LOCATOR, LookupMode.ALL, timeout=0)

    assert page.fake_locator.waits == [("attached", 1)]


@pytest.mark.asyncio
async def test_wait_timeout_maps_per_mode():
    page = FakePage(FakeLocator([], wait_error=PlaywrightTimeoutError("Timeout 1000ms exceeded")))
    session = BrowserSession(page)

    assert await session.resolve(LOCATOR, LookupMode.ALL, timeout=1) == []
    with pytest.raises(ElementNotFoundError) as excinfo:
        await session.resolve(LOCATOR, LookupMode.SINGLE, timeout=1)
    assert excinfo.value.locator == LOCATOR


@pytest.mark.asyncio
async def test_detached_handle_is_stale():
    page = FakePage(FakeLocator([FakeElementHandle(connected=False)]))

    with pytest.raises(StaleReferenceError):
        await BrowserSession(page).resolve(LOCATOR, LookupMode.SINGLE, timeout=1)


@pytest.mark.asyncio
async def test_destroyed_context_is_stale():
    error = PlaywrightError("Execution context was destroyed, most likely because of a navigation")
    page = FakePage(FakeLocator([], wait_error=error))

    with pytest.raises(StaleReferenceError):
        await BrowserSession(page).resolve(LOCATOR, LookupMode.ALL, timeout=1)


@pytest.mark.asyncio
async def test_other_playwright_errors_propagate():
    error = PlaywrightError("Target page, context or browser has been closed")
    page = FakePage(FakeLocator([], wait_error=error))

    with pytest.raises(PlaywrightError) as excinfo:
        await BrowserSession(page).resolve(LOCATOR, LookupMode.ALL, timeout=1)
    assert not isinstance(excinfo.value, StaleReferenceError)


def test_stale_markers():
    assert is_stale_error(PlaywrightError("Element is not attached to the DOM"))
    assert is_stale_error(PlaywrightError("Frame was detached"))
    assert not is_stale_error(PlaywrightError("Timeout 500ms exceeded"))


def test_stale_guard_translates_only_stale_errors():
    with pytest.raises(StaleReferenceError):
        with stale_guard():
            raise PlaywrightError("Element is detached from document")

    with pytest.raises(PlaywrightError):
        with stale_guard():
            raise PlaywrightError("strict mode violation")


def test_current_url_is_best_effort():
    assert BrowserSession(FakePage(url="https://github.com/search")).current_url() == (
        "https://github.com/search"
    )
    assert BrowserSession(FakePage(url=PlaywrightError("page closed"))).current_url() is None
