"""Tests for the ``navhistory`` command line entry point."""

import pytest

from navhistory import __main__ as cli


@pytest.fixture
def served(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "run_web", lambda **kwargs: calls.append(kwargs))
    monkeypatch.delenv("NAVHISTORY_BASENAME", raising=False)
    return calls


def test_defaults(served):
    cli.main([])
    (kwargs,) = served
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8000
    assert kwargs["log_level"] == "info"


def test_basename_flag_overrides_env(served, monkeypatch):
    monkeypatch.setenv("NAVHISTORY_BASENAME", "/env")
    cli.main(["--basename", "/cli", "--port", "9000"])
    (kwargs,) = served
    assert kwargs["options"].basename == "/cli"
    assert kwargs["port"] == 9000
