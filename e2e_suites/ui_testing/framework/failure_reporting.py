"""
================================================================================
Failure Reporting
================================================================================

Per-test browser session that reports its own failure.

The pytest ``pytest_runtest_makereport`` hook stores each phase report on
the test item (``item.rep_call``). When the session is released:
    1. a failed call phase is reported once, as a FAILED step with a
       screenshot, while the page is still open
    2. the browser context is closed
    3. the recorded video, complete only now, is attached

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional

from loguru import logger

from e2e_tools.report_tools import StepReporter

from .browser_manager import BrowserManager
from .session import BrowserSession


def failure_message(report: Any) -> Optional[str]:
    """Short crash message of a pytest report, falling back to its full text."""
    crash = getattr(report.longrepr, "reprcrash", None)
    if crash is not None:
        return crash.message
    return str(report.longrepr) if report.longrepr else None


@asynccontextmanager
async def reported_session(
    manager: BrowserManager,
    reporter: StepReporter,
    node: Any,
) -> AsyncIterator[BrowserSession]:
    """
    Yield a fresh session for ``node`` and report its outcome on exit.

    Usage (fixture):
        async with reported_session(browser_manager, reporter, request.node) as session:
            yield session
    """
    reporter.attach_description(getattr(getattr(node, "function", None), "__doc__", None))
    video: Optional[Path] = None

    async with manager.session() as session:
        yield session

        report = getattr(node, "rep_call", None)
        if report is not None and report.failed:
            await reporter.log_fail_step_with_screenshot(failure_message(report), session)

        if manager.record_video:
            try:
                video = await session.video_path()
            except Exception as e:
                logger.warning(f"Failed to get video path: {e}")

    if video is not None:
        reporter.attach_video(video, name=node.name)


__all__ = [
    "failure_message",
    "reported_session",
]
