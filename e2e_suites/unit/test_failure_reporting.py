from contextlib import asynccontextmanager
from pathlib import Path
from types import SimpleNamespace

import pytest

from e2e_suites.ui_testing.framework.failure_reporting import failure_message, reported_session
from e2e_tools.report_tools import StepReporter
from e2e_suites.unit.fakes import FakeSession


class VideoSession(FakeSession):
    def __init__(self, events, video=None):
        super().__init__(url="https://github.com/search")
        self.events = events
        self.video = video

    async def video_path(self):
        self.events.append("video_path")
        if isinstance(self.video, Exception):
            raise self.video
        return self.video


class FakeManager:
    def __init__(self, session, record_video=False):
        self.browser_session = session
        self.record_video = record_video

    @asynccontextmanager
    async def session(self):
        try:
            yield self.browser_session
        finally:
            self.browser_session.events.append("context_closed")


class RecordingReporter(StepReporter):
    def __init__(self, events):
        super().__init__(enabled=True)
        self.events = events
        self.failures = []
        self.videos = []
        self.descriptions = []

    def attach_description(self, description):
        self.descriptions.append(description)

    async def log_fail_step_with_screenshot(self, fail_message, session):
        self.events.append("fail_step")
        self.failures.append((fail_message, session))

    def attach_video(self, path, name="video"):
        self.events.append("attach_video")
        self.videos.append((path, name))


def failed_report(message):
    crash = SimpleNamespace(message=message)
    return SimpleNamespace(failed=True, longrepr=SimpleNamespace(reprcrash=crash))


def passed_report():
    return SimpleNamespace(failed=False, longrepr=None)


def make_node(name="test_search"):
    def test_search():
        """Search opens the repository."""

    return SimpleNamespace(name=name, function=test_search)


@pytest.fixture
def events():
    return []


@pytest.mark.asyncio
async def test_failed_call_is_reported_once_before_close(events):
    session = VideoSession(events)
    reporter = RecordingReporter(events)
    node = make_node()

    async with reported_session(FakeManager(session), reporter, node) as yielded:
        assert yielded is session
        node.rep_call = failed_report("AssertionError: assert '' == '412'")

    assert reporter.failures == [("AssertionError: assert '' == '412'", session)]
    assert events == ["fail_step", "context_closed"]
    assert reporter.descriptions == ["Search opens the repository."]


@pytest.mark.asyncio
async def test_passed_call_is_not_reported(events):
    reporter = RecordingReporter(events)
    node = make_node()

    async with reported_session(FakeManager(VideoSession(events)), reporter, node):
        node.rep_call = passed_report()

    assert reporter.failures == []
    assert events == ["context_closed"]


@pytest.mark.asyncio
async def test_missing_call_report_is_not_reported(events):
    reporter = RecordingReporter(events)

    async with reported_session(FakeManager(VideoSession(events)), reporter, make_node()):
        pass

    assert reporter.failures == []


@pytest.mark.asyncio
async def test_video_attached_after_context_closed(events):
    video = Path("/tmp/videos/abc.webm")
    reporter = RecordingReporter(events)
    node = make_node("test_fork_counter")

    async with reported_session(FakeManager(VideoSession(events, video), record_video=True), reporter, node):
        node.rep_call = failed_report("boom")

    assert events == ["fail_step", "video_path", "context_closed", "attach_video"]
    assert reporter.videos == [(video, "test_fork_counter")]


@pytest.mark.asyncio
async def test_video_path_failure_still_closes_context(events):
    reporter = RecordingReporter(events)
    session = VideoSession(events, RuntimeError("page closed"))

    async with reported_session(FakeManager(session, record_video=True), reporter, make_node()):
        pass

    assert events == ["video_path", "context_closed"]
    assert reporter.videos == []


@pytest.mark.asyncio
async def test_error_inside_block_still_closes_context(events):
    reporter = RecordingReporter(events)

    with pytest.raises(RuntimeError, match="fixture broke"):
        async with reported_session(FakeManager(VideoSession(events)), reporter, make_node()):
            raise RuntimeError("fixture broke")

    assert events == ["context_closed"]


def test_failure_message_fallbacks():
    assert failure_message(failed_report("assert 1 == 2")) == "assert 1 == 2"
    assert failure_message(SimpleNamespace(longrepr="E   ValueError")) == "E   ValueError"
    assert failure_message(SimpleNamespace(longrepr=None)) is None
