"""Shared fixtures for navhistory tests."""

import asyncio

import pytest

from navhistory.core import debug
from navhistory.core.history import create_history
from navhistory.platform import MemoryPlatform


class Prompt:
    """Confirmation function answered later by the test, like a user would."""

    def __init__(self):
        self.requests = []

    def __call__(self, message):
        fut = asyncio.get_running_loop().create_future()
        self.requests.append((message, fut))
        return fut

    def answer(self, result, index=-1):
        self.requests[index][1].set_result(result)

    @property
    def messages(self):
        return [m for m, _ in self.requests]


@pytest.fixture
def platform():
    return MemoryPlatform("/")


@pytest.fixture
def history(platform):
    h = create_history(platform)
    yield h
    h.close()


@pytest.fixture
def prompt():
    return Prompt()


@pytest.fixture
def recorder():
    calls = []

    def listener(location, action):
        calls.append((location, action))

    listener.calls = calls
    return listener


@pytest.fixture(autouse=True)
def _reset_trace():
    debug.clear_traces()
    yield
    debug.disable_tracing()
    debug.clear_traces()
