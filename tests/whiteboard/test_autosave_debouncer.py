from __future__ import annotations

import threading

from fakes import FakeTimer
from taskora.core.exceptions import ServiceError
from taskora.whiteboard.autosave import AutosaveDebouncer


def test_new_stroke_restarts_the_delay(timers):
    saves = []
    debouncer = AutosaveDebouncer(delay=3.0, timer_factory=FakeTimer)

    debouncer.schedule(1, lambda: saves.append("first"))
    debouncer.schedule(1, lambda: saves.append("second"))

    first, second = timers
    assert first.cancelled and second.started and second.daemon
    assert second.interval == 3.0

    first.fire()
    second.fire()

    assert saves == ["second"]
    assert not debouncer.is_pending(1)


def test_stale_timer_never_runs_the_newer_save(timers):
    saves = []
    debouncer = AutosaveDebouncer(delay=1.0, timer_factory=FakeTimer)
    debouncer.schedule("b", lambda: saves.append("old"))
    debouncer.schedule("b", lambda: saves.append("new"))

    # the old timer was already running when it got cancelled
    timers[0].function(*timers[0].args)

    assert saves == []
    assert debouncer.is_pending("b")


def test_boards_are_debounced_independently(timers):
    saves = []
    debouncer = AutosaveDebouncer(delay=1.0, timer_factory=FakeTimer)
    debouncer.schedule(1, lambda: saves.append(1))
    debouncer.schedule(2, lambda: saves.append(2))

    for t in timers:
        t.fire()

    assert sorted(saves) == [1, 2]


def test_flush_and_cancel(timers):
    saves = []
    debouncer = AutosaveDebouncer(delay=1.0, timer_factory=FakeTimer)

    debouncer.schedule(1, lambda: saves.append("flushed"))
    assert debouncer.flush(1)
    assert saves == ["flushed"]
    assert not debouncer.flush(1)

    debouncer.schedule(1, lambda: saves.append("cancelled"))
    assert debouncer.cancel(1)
    timers[-1].fire()
    assert saves == ["flushed"]


def test_failed_save_is_logged_not_raised(timers, caplog):
    debouncer = AutosaveDebouncer(delay=1.0, timer_factory=FakeTimer)

    def broken():
        raise ServiceError("db down")

    debouncer.schedule(7, broken)
    timers[0].fire()

    assert "autosave failed for 7" in caplog.text


def test_real_timer_fires_after_delay():
    done = threading.Event()
    debouncer = AutosaveDebouncer(delay=0.01)
    debouncer.schedule("k", done.set)
    assert done.wait(2.0)
    debouncer.shutdown()
