"""Pytest configuration and fixtures."""
import inspect

import pytest

from pyespcontrol.clock import ManualClock
from pyespcontrol.exceptions import TransportFailure


class FakeTransport:
    """Scripted stand-in for pyespcontrol.transport.Transport.

    route(path, *outcomes) queues outcomes for a path; each request consumes
    one, the last one repeats. An outcome is a value to return, an exception
    instance to raise, or a callable (sync or async) whose result is used.
    Unrouted paths fail like an unreachable device.
    """

    host = "10.0.0.50"

    def __init__(self):
        self.calls = []
        self.routes = {}

    def route(self, path, *outcomes):
        self.routes[path] = list(outcomes)

    async def perform(self, method, path, body=None, timeout=None, text=False):
        self.calls.append((method, path, body, timeout))
        outcomes = self.routes.get(path)
        if not outcomes:
            raise TransportFailure(f"Unable to connect to {path}")
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            outcome = outcome()
            if inspect.isawaitable(outcome):
                outcome = await outcome
        return outcome

    def count(self, path):
        return sum(1 for c in self.calls if c[1] == path)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def notes():
    """Collects (message, level) toasts."""
    return []
