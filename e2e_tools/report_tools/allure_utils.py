"""
================================================================================
Allure Report Utilities
================================================================================

Step logging and attachments for UI tests.

Features:
- StepReporter: steps, forced-failure steps, step parameters
- Screenshot / video / text / JSON attachments
- Feature flag (allure.enabled / ALLURE=true) read once per process;
  when off every call only logs through loguru
- Capture failures are logged and swallowed so they never mask the
  original test failure

================================================================================
"""

import json
import os
import re
import secrets
import time
from contextlib import contextmanager, nullcontext
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional, Union

import allure
import pytest
from loguru import logger

from e2e_tools.common import get_config

if TYPE_CHECKING:
    from e2e_suites.ui_testing.framework.session import BrowserSession


SCREENSHOT_TIME_FORMAT = "%Y%m%d%H%M%S"
SCREENSHOT_EXTENSION = ".png"
MAX_FILENAME_LENGTH = 100


class StepStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    BROKEN = "broken"
    SKIPPED = "skipped"


# Raised inside an allure step purely to set its final status
class _ForcedFailure(AssertionError):
    pass


class _ForcedBroken(RuntimeError):
    pass


class _ForcedSkip(pytest.skip.Exception):
    pass


_FORCED_OUTCOMES = {
    StepStatus.FAILED: _ForcedFailure,
    StepStatus.BROKEN: _ForcedBroken,
    StepStatus.SKIPPED: _ForcedSkip,
}


@lru_cache(maxsize=None)
def reporting_enabled() -> bool:
    """Allure feature flag, evaluated once per process."""
    value = get_config("allure.enabled", False)
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    allure.attach(
        json.dumps(data, indent=2, default=str),
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Make a step name safe to use as a file name.

    Invalid path characters become "_", whitespace/underscore runs collapse
    to a single "_", and the result is capped at MAX_FILENAME_LENGTH.
    """
    if not filename:
        return "screenshot"

    sanitized = re.sub(r'[/\\:*?"<>|]', "_", filename)
    sanitized = re.sub(r"[\s_]+", "_", sanitized)
    sanitized = sanitized.strip("_")
    sanitized = sanitized[:MAX_FILENAME_LENGTH]
    return sanitized or "screenshot"


def generate_screenshot_filename(step_name: Optional[str]) -> str:
    """<name>_<pid>_<hex8>_<timestamp>.png, lowercased."""
    filename = (
        f"{sanitize_filename(step_name)}_{os.getpid()}_{secrets.token_hex(4)}_"
        f"{time.strftime(SCREENSHOT_TIME_FORMAT)}{SCREENSHOT_EXTENSION}"
    )
    return filename.lower()


# ================================================================================
# Step Reporter
# ================================================================================

class StepReporter:
    """
    Reports test steps and artifacts to Allure.

    Usage:
        reporter = StepReporter.from_config()
        with reporter.step("Search for repository"):
            ...
        await reporter.log_step_with_screenshot("Github Main Page is loaded", session)
    """

    def __init__(self, enabled: bool = False, screenshots_dir: Union[str, Path] = "reports/screenshots"):
        self.enabled = enabled
        self.screenshots_dir = Path(screenshots_dir)

    @classmethod
    def from_config(cls) -> "StepReporter":
        return cls(
            enabled=reporting_enabled(),
            screenshots_dir=get_config("allure.screenshots_dir", "reports/screenshots"),
        )

    def step(self, name: str):
        """Context manager wrapping a block in an Allure step."""
        if not self.enabled:
            logger.info(name)
            return nullcontext()
        return allure.step(name)

    def log_step(self, name: str, status: Union[StepStatus, str] = StepStatus.PASSED) -> None:
        """Record an already finished step with the given status."""
        if not self.enabled:
            logger.info(name)
            return

        status = StepStatus(status)
        forced = _FORCED_OUTCOMES.get(status)
        try:
            with allure.step(name):
                if forced is not None:
                    raise forced(name)
        except (_ForcedFailure, _ForcedBroken, _ForcedSkip):
            pass

    @contextmanager
    def run_fail_step(self, name: str) -> Iterator[None]:
        """
        Run a block inside a step that ends FAILED even if the block succeeds.

        Exceptions raised by the block propagate; the step takes their status.
        """
        if not self.enabled:
            logger.info(name)
            yield
            return

        try:
            with allure.step(name):
                yield
                raise _ForcedFailure(name)
        except _ForcedFailure:
            pass

    def log_step_params(self, name: str, params: Dict[str, Any]) -> None:
        """Record a step carrying key/value parameters."""
        if not self.enabled or not isinstance(params, dict):
            return

        rendered = {
            key: json.dumps(value) if isinstance(value, (list, dict)) else str(value)
            for key, value in params.items()
        }
        with allure.step(name):
            for key, value in rendered.items():
                allure.dynamic.parameter(key, value)

    async def attach_screenshot(self, step_name: str, session: "BrowserSession") -> Optional[Path]:
        """
        Capture a screenshot and attach it to the current step.

        Returns:
            Path of the saved file, or None when disabled or capture failed
        """
        if not self.enabled:
            return None

        try:
            self.screenshots_dir.mkdir(parents=True, exist_ok=True)
            path = self.screenshots_dir / generate_screenshot_filename(step_name)
            await session.screenshot(path)
            allure.attach.file(
                str(path),
                name=path.name,
                attachment_type=allure.attachment_type.PNG,
            )
            return path
        except Exception as e:
            logger.warning(f"Failed to attach screenshot: {e}")
            return None

    async def log_step_with_screenshot(self, step_name: str, session: "BrowserSession") -> None:
        if not self.enabled:
            logger.info(step_name)
            return

        with allure.step(step_name):
            await self.attach_screenshot(step_name, session)

    async def log_fail_step_with_screenshot(self, fail_message: str, session: Optional["BrowserSession"]) -> None:
        """
        Record a FAILED step describing a test failure, with a screenshot.

        Never raises: this runs while a test is already failing.
        """
        if not self.enabled:
            logger.info(fail_message)
            return

        try:
            step_name = self.build_fail_step_name(fail_message, session)
            with self.run_fail_step(step_name):
                if session is not None:
                    await self.attach_screenshot("Test failed", session)
        except Exception as e:
            logger.warning(f"Failed to report test failure: {e}")

    def attach_video(self, path: Union[str, Path], name: str = "video") -> None:
        if not self.enabled:
            return

        try:
            allure.attach.file(str(path), name=name, attachment_type=allure.attachment_type.WEBM)
        except Exception as e:
            logger.warning(f"Failed to attach video {path}: {e}")

    def attach_description(self, description: Optional[str]) -> None:
        if not self.enabled or not description:
            return
        allure.dynamic.description(description)

    def attach_text(self, text: str, name: str = "Text") -> None:
        if self.enabled:
            attach_text(text, name)

    def attach_json(self, data: Any, name: str = "Data") -> None:
        if self.enabled:
            attach_json(data, name)

    @staticmethod
    def safe_current_url(session: Optional["BrowserSession"]) -> Optional[str]:
        if session is None:
            return None
        try:
            return session.current_url()
        except Exception as e:
            logger.warning(f"Failed to get current URL: {e}")
            return None

    def build_fail_step_name(self, fail_message: Any, session: Optional["BrowserSession"]) -> str:
        url = self.safe_current_url(session)
        base_message = str(fail_message or "").strip()

        if not base_message:
            return f"Test failed on the page {url}" if url else "Test failed"
        if url:
            return f"Test failed: {base_message} (page: {url})"
        return f"Test failed: {base_message}"


__all__ = [
    "StepStatus",
    "StepReporter",
    "reporting_enabled",
    "attach_json",
    "attach_text",
    "sanitize_filename",
    "generate_screenshot_filename",
]
