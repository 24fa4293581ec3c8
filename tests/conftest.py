"""
Shared fixtures and test doubles for the deployment monitor tests.
"""

import io
from contextlib import contextmanager

import pytest

from deploy_monitor.errors import FetchError
from deploy_monitor.handlers import ConsoleRenderer
from deploy_monitor.models import Deployment


def make_deployment(id: str, state: str = "READY", **kwargs) -> Deployment:
    """Build a Deployment with only the fields a test cares about."""
    kwargs.setdefault("url", f"{id}.vercel.app")
    return Deployment(id=id, raw_state=state, **kwargs)


class FakeClient:
    """Fetch capability that replays a scripted list of snapshots or errors."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls: list[tuple[str, int]] = []

    async def fetch_snapshot(self, project: str, limit: int):
        self.calls.append((project, limit))
        response = self._responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


class RecordingRenderer:
    """Renderer that records every call instead of printing."""

    def __init__(self):
        self.renders: list[tuple[list, bool]] = []
        self.notices: list = []
        self.errors: list[tuple[FetchError, int]] = []
        self.fetches: list[bool] = []
        self.startups: list[bool] = []
        self.on_render = None   # optional callback, may raise

    @contextmanager
    def fetching(self, verbose):
        self.fetches.append(verbose)
        yield

    def render_startup(self, verbose):
        self.startups.append(verbose)

    def render(self, snapshot, verbose):
        self.renders.append((list(snapshot), verbose))
        if self.on_render is not None:
            self.on_render()

    def render_change_notice(self, changes):
        self.notices.append(changes)

    def render_error(self, error, retry_in):
        self.errors.append((error, retry_in))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console(output):
    """ConsoleRenderer writing to an in-memory stream, without screen clears."""
    return ConsoleRenderer("my-app", 15, stream=output, clear_screen=False)
