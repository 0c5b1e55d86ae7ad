"""
In-memory stand-ins for the browser session used by the unit tests.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from e2e_suites.ui_testing.framework.errors import StaleReferenceError
from e2e_suites.ui_testing.framework.readiness import ReadinessSnapshot


class FakeClock:
    """Monotonic clock advanced by ``sleep`` and by scripted resolves."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeHandle:
    """Element handle with the few methods the framework touches."""

    def __init__(self, text: str = "", stale_clicks: int = 0):
        self._text = text
        self.stale_clicks = stale_clicks
        self.clicks = 0
        self.filled: Optional[str] = None
        self.typed: List[str] = []
        self.pressed: List[str] = []

    async def scroll_into_view_if_needed(self) -> None:
        return None

    async def click(self) -> None:
        if self.stale_clicks:
            self.stale_clicks -= 1
            raise StaleReferenceError("element is detached")
        self.clicks += 1

    async def fill(self, value: str) -> None:
        self.filled = value

    async def type(self, value: str) -> None:
        self.typed.append(value)

    async def press(self, key: str) -> None:
        self.pressed.append(key)

    async def inner_text(self) -> str:
        return self._text

    async def is_visible(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<FakeHandle {self._text!r}>"


class FakeSession:
    """
    Scripted browser session.

    ``readiness_script`` is consumed one snapshot per poll (the last entry
    repeats). ``resolve_script`` maps a locator path to a list of outcomes
    consumed one per resolve call (the last repeats); an outcome is either a
    list of handles or an exception instance to raise. With a ``clock``, every
    resolve spends its whole timeout on it before returning.
    """

    def __init__(
        self,
        readiness_script: Optional[Iterable[ReadinessSnapshot]] = None,
        resolve_script: Optional[dict] = None,
        url: Optional[str] = "https://github.com/",
        clock: Optional[FakeClock] = None,
    ):
        self.readiness_script = list(readiness_script or [ReadinessSnapshot(True, True)])
        self.resolve_script = {k: list(v) for k, v in (resolve_script or {}).items()}
        self.url = url
        self.clock = clock
        self.readiness_calls = 0
        self.resolve_calls: List[Any] = []
        self.screenshots: List[Any] = []
        self.visited: List[str] = []

    async def readiness(self) -> ReadinessSnapshot:
        index = min(self.readiness_calls, len(self.readiness_script) - 1)
        self.readiness_calls += 1
        return self.readiness_script[index]

    async def resolve(self, locator, mode, timeout) -> List[Any]:
        self.resolve_calls.append((locator, mode, timeout))
        if self.clock is not None:
            self.clock.now += timeout
        outcomes = self.resolve_script.get(locator.path, [[]])
        attempt = sum(1 for call in self.resolve_calls if call[0].path == locator.path)
        outcome = outcomes[min(attempt, len(outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)

    def attempts_for(self, path: str) -> int:
        return sum(1 for call in self.resolve_calls if call[0].path == path)

    async def screenshot(self, path) -> Any:
        self.screenshots.append(path)
        return path

    def current_url(self) -> Optional[str]:
        return self.url

    async def goto(self, url: str) -> None:
        self.visited.append(url)


class BrokenSession:
    """Session whose every capability fails."""

    async def readiness(self) -> ReadinessSnapshot:
        raise RuntimeError("browser is gone")

    async def resolve(self, locator, mode, timeout) -> List[Any]:
        raise RuntimeError("browser is gone")

    async def screenshot(self, path) -> Any:
        raise RuntimeError("browser is gone")

    def current_url(self) -> Optional[str]:
        raise RuntimeError("browser is gone")


def snapshots(*flags: str) -> List[ReadinessSnapshot]:
    """
    Build readiness snapshots from compact flags: "ok" (both true),
    "dom" (only DOM ready), "net" (only network idle), "none".
    """
    table = {
        "ok": ReadinessSnapshot(True, True),
        "dom": ReadinessSnapshot(True, False),
        "net": ReadinessSnapshot(False, True),
        "none": ReadinessSnapshot(False, False),
    }
    return [table[flag] for flag in flags]
