"""
================================================================================
Page Readiness Probe
================================================================================

Waits until a live page is stable enough to interact with:
    - document.readyState is "complete"
    - no network requests are in flight
    - both conditions held continuously for a quiet window

Any poll where a condition regresses restarts the quiet window from zero.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from e2e_tools.common import get_config

from .errors import PageTimeoutError

if TYPE_CHECKING:
    from .session import BrowserSession


T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class ReadinessSnapshot:
    """Readiness flags observed by a single poll."""

    dom_ready: bool
    network_idle: bool

    @property
    def stable(self) -> bool:
        return self.dom_ready and self.network_idle


@dataclass(frozen=True)
class ReadinessState:
    """
    Readiness derived from successive polls.

    Attributes:
        dom_ready: Last observed document-ready flag
        network_idle: Last observed "no requests in flight" flag
        quiet_since: Clock value when both flags became true, None otherwise
    """

    dom_ready: bool = False
    network_idle: bool = False
    quiet_since: Optional[float] = None

    def observe(self, snapshot: ReadinessSnapshot, now: float) -> "ReadinessState":
        if not snapshot.stable:
            return ReadinessState(snapshot.dom_ready, snapshot.network_idle, None)
        quiet_since = self.quiet_since if self.quiet_since is not None else now
        return replace(self, dom_ready=True, network_idle=True, quiet_since=quiet_since)

    def quiet_for(self, now: float) -> float:
        if self.quiet_since is None:
            return 0.0
        return now - self.quiet_since


class PageReadinessProbe:
    """
    Polls a browser session until the page is quiet.

    Usage:
        probe = PageReadinessProbe(session)
        await probe.wait_until_ready(timeout=15, quiet_window=0.5)
    """

    def __init__(
        self,
        session: "BrowserSession",
        poll_interval: Optional[float] = None,
        quiet_window: Optional[float] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.session = session
        self.poll_interval = float(
            poll_interval if poll_interval is not None else get_config("timeouts.poll_interval", 0.1)
        )
        self.quiet_window = float(
            quiet_window if quiet_window is not None else get_config("timeouts.quiet_window", 0.5)
        )
        self._clock = clock
        self._sleep = sleep

    async def wait_until_ready(
        self,
        timeout: Optional[float] = None,
        quiet_window: Optional[float] = None,
    ) -> ReadinessState:
        """
        Block until the page has been quiet for ``quiet_window`` seconds.

        Args:
            timeout: Overall deadline in seconds (config ``timeouts.page_load``)
            quiet_window: Required uninterrupted stable duration in seconds
                (config ``timeouts.quiet_window``)

        Returns:
            The final ReadinessState

        Raises:
            PageTimeoutError: Deadline passed before the window was satisfied
        """
        if timeout is None:
            timeout = float(get_config("timeouts.page_load", 15.0))
        if quiet_window is None:
            quiet_window = self.quiet_window

        start = self._clock()
        deadline = start + timeout
        state = ReadinessState()

        while True:
            snapshot = await self.session.readiness()
            now = self._clock()
            state = state.observe(snapshot, now)

            if state.quiet_since is not None and state.quiet_for(now) >= quiet_window:
                logger.debug(f"Page ready after {now - start:.2f}s")
                return state

            if now >= deadline:
                elapsed = now - start
                raise PageTimeoutError(
                    f"Page not ready after {elapsed:.2f}s "
                    f"(dom_ready={state.dom_ready}, network_idle={state.network_idle})",
                    elapsed=elapsed,
                    last_state=state,
                )

            await self._sleep(min(self.poll_interval, max(deadline - now, 0.0)))


async def wait_for_condition(
    description: str,
    condition: Callable[[], Awaitable[T]],
    timeout: float = 10.0,
    delay: float = 1.0,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Poll an async condition at a fixed delay until it returns a truthy value.

    Args:
        description: Human-readable description for logging
        condition: Coroutine function returning the value to test
        timeout: Deadline in seconds
        delay: Seconds between polls

    Returns:
        The first truthy value returned by ``condition``

    Raises:
        PageTimeoutError: Deadline passed without a truthy value
    """
    start = clock()
    attempt = 0
    last_result: Optional[T] = None

    while True:
        attempt += 1
        last_result = await condition()
        if last_result:
            logger.debug(f"Condition met after {attempt} attempts: {description}")
            return last_result

        elapsed = clock() - start
        if elapsed >= timeout:
            raise PageTimeoutError(
                f"Timeout after {elapsed:.1f}s waiting for: {description}",
                elapsed=elapsed,
                last_state=last_result,
            )
        await sleep(delay)


__all__ = [
    "ReadinessSnapshot",
    "ReadinessState",
    "PageReadinessProbe",
    "wait_for_condition",
]
