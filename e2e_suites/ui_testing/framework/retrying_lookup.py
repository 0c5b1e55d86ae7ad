"""
================================================================================
Retrying Element Lookup
================================================================================

Resolves locators against a live page while tolerating eventual consistency:

    1. Wait for page readiness (bounded by the lookup wait)
    2. Resolve the locator with its own bounded wait
    3. Retry stale references with exponential backoff
    4. Propagate not-found errors (the resolve wait already covers late
       rendering), optionally as assertion failures
    5. Treat an empty result as not found

A successful lookup always yields a non-null handle or a non-empty list.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from loguru import logger

from e2e_tools.common import get_config

from .errors import (
    ArgumentError,
    ElementAssertionError,
    ElementNotFoundError,
    StaleReferenceError,
)
from .locator import Locator, LookupMode
from .readiness import Clock, PageReadinessProbe, Sleep

if TYPE_CHECKING:
    from .session import BrowserSession


T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry configuration for one lookup call site.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1)
        base_delay: Delay before the first retry, in seconds
        backoff_multiplier: Growth factor applied per retry
        overall_timeout: Deadline for the whole lookup, backoff included
    """

    max_retries: int = 5
    base_delay: float = 1.0
    backoff_multiplier: float = 2.0
    overall_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ArgumentError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay < 0:
            raise ArgumentError(f"base_delay must be >= 0, got {self.base_delay}")
        if self.backoff_multiplier < 1:
            raise ArgumentError(
                f"backoff_multiplier must be >= 1, got {self.backoff_multiplier}"
            )
        if self.overall_timeout < 0:
            raise ArgumentError(f"wait must be >= 0, got {self.overall_timeout}")

    @classmethod
    def from_config(cls) -> "RetryPolicy":
        return cls(
            max_retries=int(get_config("retries.max_retries", 5)),
            base_delay=float(get_config("retries.retry_interval", 1.0)),
            overall_timeout=float(get_config("timeouts.element_wait", 10.0)),
        )

    def delay_for(self, attempt: int) -> float:
        """Backoff before retrying after failed attempt number ``attempt`` (1-based)."""
        return self.base_delay * self.backoff_multiplier ** (attempt - 1)

    def with_overrides(
        self,
        wait: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_interval: Optional[float] = None,
    ) -> "RetryPolicy":
        return RetryPolicy(
            max_retries=self.max_retries if max_retries is None else max_retries,
            base_delay=self.base_delay if retry_interval is None else retry_interval,
            backoff_multiplier=self.backoff_multiplier,
            overall_timeout=self.overall_timeout if wait is None else wait,
        )


class LookupKind(str, Enum):
    FOUND_ONE = "found_one"
    FOUND_MANY = "found_many"
    ABSENT = "absent"


@dataclass(frozen=True)
class LookupResult:
    """
    Tagged outcome of a lookup.

    ``handles`` is empty only for ABSENT; ``value`` is the single handle for
    FOUND_ONE and the list of handles for FOUND_MANY.
    """

    kind: LookupKind
    handles: Tuple[Any, ...] = ()
    locator: Optional[Locator] = None
    name: Optional[str] = None
    error: Optional[ElementNotFoundError] = field(default=None, compare=False)

    @property
    def found(self) -> bool:
        return self.kind is not LookupKind.ABSENT

    @property
    def value(self) -> Union[Any, List[Any]]:
        if self.kind is LookupKind.FOUND_ONE:
            return self.handles[0]
        if self.kind is LookupKind.FOUND_MANY:
            return list(self.handles)
        if self.error is not None:
            raise self.error
        raise ElementNotFoundError.for_locator(self.locator, self.name)


async def retry_stale(
    action: Callable[[], Awaitable[T]],
    description: str,
    max_retries: int,
    retry_interval: float,
    backoff_multiplier: float = 2.0,
    sleep: Sleep = asyncio.sleep,
    deadline: Optional[float] = None,
    clock: Clock = time.monotonic,
) -> T:
    """
    Run ``action``, retrying StaleReferenceError with exponential backoff.

    With a ``deadline`` (a ``clock`` value), retrying stops early once the
    next backoff would end past it.

    Raises:
        StaleReferenceError: Still stale after ``max_retries`` retries or
            when the deadline leaves no room for another attempt
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await action()
        except StaleReferenceError as e:
            if attempt > max_retries:
                raise StaleReferenceError(
                    f"Too many retries for {description}: stale after {attempt} attempts",
                    attempts=attempt,
                ) from e
            delay = retry_interval * backoff_multiplier ** (attempt - 1)
            if deadline is not None and clock() + delay > deadline:
                raise StaleReferenceError(
                    f"Wait budget exhausted for {description}: stale after {attempt} attempts",
                    attempts=attempt,
                ) from e
            logger.debug(
                f"Stale reference for {description} "
                f"(attempt {attempt}/{max_retries + 1}). Retrying in {delay:.2f}s..."
            )
            await sleep(delay)


class RetryingLookup:
    """
    Finds elements on a browser session with readiness wait and stale retries.

    Usage:
        lookup = RetryingLookup(session)
        button = await lookup.find(Locator("xpath", "//button"), name="submit")
        rows = await lookup.find(Locator("css", "tr"), mode="all", name="rows")
    """

    def __init__(
        self,
        session: "BrowserSession",
        probe: Optional[PageReadinessProbe] = None,
        policy: Optional[RetryPolicy] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        self.session = session
        self.probe = probe or PageReadinessProbe(session, clock=clock, sleep=sleep)
        self.policy = policy or RetryPolicy.from_config()
        self._clock = clock
        self._sleep = sleep

    def _remaining(self, deadline: float) -> float:
        return max(deadline - self._clock(), 0.0)

    async def lookup(
        self,
        locator: Locator,
        mode: Union[LookupMode, str] = LookupMode.SINGLE,
        *,
        name: Optional[str] = None,
        wait: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_interval: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        wait_for_page: bool = True,
    ) -> LookupResult:
        """
        Resolve ``locator`` and return a tagged LookupResult.

        Not-found outcomes come back as ``LookupKind.ABSENT``; stale
        exhaustion, readiness timeouts and argument errors still raise.

        ``overall_timeout`` is one deadline for the whole call: readiness,
        every resolve attempt and the backoff sleeps share it.
        """
        mode = LookupMode.parse(mode)
        effective = (policy or self.policy).with_overrides(wait, max_retries, retry_interval)
        label = name or locator.path
        deadline = self._clock() + effective.overall_timeout

        if wait_for_page:
            await self.probe.wait_until_ready(timeout=self._remaining(deadline))

        async def resolve() -> List[Any]:
            return await self.session.resolve(locator, mode, timeout=self._remaining(deadline))

        try:
            handles = await retry_stale(
                resolve,
                description=f"element {label}",
                max_retries=effective.max_retries,
                retry_interval=effective.base_delay,
                backoff_multiplier=effective.backoff_multiplier,
                sleep=self._sleep,
                deadline=deadline,
                clock=self._clock,
            )
        except ElementNotFoundError as e:
            return LookupResult(LookupKind.ABSENT, locator=locator, name=name, error=e)

        handles = [h for h in handles or [] if h is not None]
        if not handles:
            return LookupResult(LookupKind.ABSENT, locator=locator, name=name)
        if mode is LookupMode.SINGLE:
            return LookupResult(LookupKind.FOUND_ONE, (handles[0],), locator=locator, name=name)
        return LookupResult(LookupKind.FOUND_MANY, tuple(handles), locator=locator, name=name)

    async def find(
        self,
        locator: Locator,
        mode: Union[LookupMode, str] = LookupMode.SINGLE,
        *,
        name: Optional[str] = None,
        wait: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_interval: Optional[float] = None,
        policy: Optional[RetryPolicy] = None,
        as_assertion: bool = False,
        wait_for_page: bool = True,
    ) -> Union[Any, List[Any]]:
        """
        Resolve ``locator`` to one handle (SINGLE) or a non-empty list (ALL).

        Args:
            locator: What to look for
            mode: LookupMode.SINGLE / "single" / "find", or LookupMode.ALL / "all"
            name: Logical element name used in error messages
            wait: Overall wait budget in seconds (readiness, resolves and backoff)
            max_retries: Stale-reference retries after the first attempt
            retry_interval: Delay before the first retry; doubles each retry
            policy: Base RetryPolicy, overridden by the explicit arguments
            as_assertion: Raise ElementAssertionError instead of ElementNotFoundError
            wait_for_page: Skip the readiness wait when False

        Raises:
            ElementNotFoundError: Nothing matched (ElementAssertionError if requested)
            StaleReferenceError: Still stale after all retries
            PageTimeoutError: Page never became ready within ``wait``
            ArgumentError: Invalid mode or negative wait/retries
        """
        result = await self.lookup(
            locator,
            mode,
            name=name,
            wait=wait,
            max_retries=max_retries,
            retry_interval=retry_interval,
            policy=policy,
            wait_for_page=wait_for_page,
        )
        if result.found:
            return result.value

        error = ElementNotFoundError.for_locator(locator, name)
        cause = result.error
        if as_assertion:
            raise ElementAssertionError(str(error), name=name, locator=locator) from cause
        if cause is not None:
            raise cause
        logger.debug(str(error))
        raise error


__all__ = [
    "RetryPolicy",
    "LookupKind",
    "LookupResult",
    "RetryingLookup",
    "retry_stale",
]
