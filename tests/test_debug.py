"""Tests for navhistory.core.debug transition tracing."""

from navhistory.core import debug


def test_disabled_by_default(history):
    history.push("/a")
    assert debug.get_transitions() == []


def test_records_commits_and_denials(history, platform):
    debug.enable_tracing()

    history.push("/a")
    platform.confirm_answer = False
    history.block("Leave?")
    history.push("/b")

    entries = debug.get_transitions()
    assert [(e["action"], e["path"], e["outcome"]) for e in entries] == [
        ("PUSH", "/a", "commit"),
        ("PUSH", "/b", "denied"),
    ]
    assert entries[0]["key"] == history.location.key


def test_log_is_bounded(history):
    debug.enable_tracing()
    for i in range(debug._TRACE_LOG_LIMIT + 5):
        history.replace(f"/p{i}")
    assert len(debug.get_transitions()) == debug._TRACE_LOG_LIMIT


def test_print_last_transitions(history, capsys):
    debug.print_last_transitions()
    assert "no navigation trace" in capsys.readouterr().out

    debug.enable_tracing()
    history.push("/a?b=1")
    debug.print_last_transitions()

    out = capsys.readouterr().out
    assert "Navigation Trace" in out
    assert "/a?b=1" in out
