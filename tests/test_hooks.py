import pytest

from director.hooks import HookDispatcher
from director.models import SessionHooks


def test_missing_hooks_are_noops():
    dispatcher = HookDispatcher()
    for point in ("before_start", "before_step", "after_step", "after_end"):
        dispatcher.fire(point)
    assert dispatcher.has_on_error() is False


def test_unknown_point():
    with pytest.raises(ValueError):
        HookDispatcher().fire("on_error")


def test_on_error_runs_on_a_later_turn(timer):
    calls = []
    dispatcher = HookDispatcher(SessionHooks(on_error=lambda: calls.append("on_error")))

    dispatcher.schedule_on_error(timer, 0.05)
    assert calls == []
    assert timer.delays == [0.05]
    timer.run()
    assert calls == ["on_error"]


def test_on_error_failure_goes_to_callback(timer):
    failures = []

    def broken():
        raise RuntimeError("hook broke")

    HookDispatcher(SessionHooks(on_error=broken)).schedule_on_error(timer, 0.05, failures.append)
    timer.run()
    assert [str(f) for f in failures] == ["hook broke"]
