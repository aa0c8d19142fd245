"""Tests for the debounce primitive."""

import threading

import pytest

from epropulse.scheduling import DebounceScope, Debouncer, debounce


class TestDebouncer:
    """Tests for Debouncer."""

    def test_rejects_negative_delay(self, clock):
        """Negative delays are refused."""
        with pytest.raises(ValueError, match="delay_ms"):
            Debouncer(print, -1, timer_factory=clock.timer)

    def test_burst_runs_once_with_last_arguments(self, clock):
        """Three calls within half the window run the callback once, with the third call's arguments."""
        calls = []
        debounced = Debouncer(lambda *a, **kw: calls.append((a, kw)), 300, clock.timer)

        debounced("a")
        clock.advance(100)
        debounced("b")
        clock.advance(100)
        debounced("c", final=True)
        clock.advance(299)

        assert calls == []

        clock.advance(1)

        assert calls == [(("c",), {"final": True})]

    def test_separate_windows_run_separately(self, clock):
        """Calls separated by a full window each run."""
        calls = []
        debounced = Debouncer(calls.append, 300, clock.timer)

        debounced(1)
        clock.advance(300)
        debounced(2)
        clock.advance(300)

        assert calls == [1, 2]

    def test_at_most_one_timer_pending(self, clock):
        """Every call cancels the previous timer."""
        debounced = Debouncer(lambda: None, 300, clock.timer)

        for _ in range(5):
            debounced()

        assert len(clock.active) == 1
        assert debounced.pending

    def test_timers_are_daemons(self, clock):
        """Pending timers never keep the process alive."""
        debounced = Debouncer(lambda: None, 300, clock.timer)

        debounced()

        assert clock.timers[0].daemon is True

    def test_stale_generation_ignored(self, clock):
        """A superseded timer that fires anyway does nothing."""
        calls = []
        debounced = Debouncer(calls.append, 300, clock.timer)
        debounced("old")
        stale = clock.timers[0]
        debounced("new")

        stale.fire()

        assert calls == []
        clock.advance(300)
        assert calls == ["new"]

    def test_flush_runs_now(self, clock):
        """flush() runs the pending call immediately and only once."""
        calls = []
        debounced = Debouncer(calls.append, 300, clock.timer)
        debounced("x")

        assert debounced.flush() is True
        assert calls == ["x"]

        clock.advance(300)

        assert calls == ["x"]
        assert debounced.flush() is False

    def test_cancel_drops_pending(self, clock):
        """cancel() drops the pending call."""
        calls = []
        debounced = Debouncer(calls.append, 300, clock.timer)
        debounced("x")

        debounced.cancel()
        clock.advance(1000)

        assert calls == []
        assert not debounced.pending

    def test_close_refuses_new_calls(self, clock):
        """A closed debouncer ignores calls."""
        calls = []
        with Debouncer(calls.append, 300, clock.timer) as debounced:
            debounced("before")

        debounced("after")
        clock.advance(1000)

        assert calls == []
        assert debounced.closed

    def test_zero_delay(self, clock):
        """A zero window still defers to the timer."""
        calls = []
        debounced = Debouncer(calls.append, 0, clock.timer)

        debounced("x")
        assert calls == []

        clock.advance(0)
        assert calls == ["x"]


class TestDebounceDecorator:
    """Tests for the debounce decorator."""

    def test_wraps_function(self, clock):
        """The decorated function keeps its name and is debounced."""
        saved = []

        @debounce(300, timer_factory=clock.timer)
        def save(markup):
            """Persist markup."""
            saved.append(markup)

        save("<p>a</p>")
        save("<p>ab</p>")
        clock.advance(300)

        assert saved == ["<p>ab</p>"]
        assert save.__name__ == "save"
        assert save.__doc__ == "Persist markup."


class TestDebounceScope:
    """Tests for DebounceScope."""

    def test_close_cancels_everything(self, clock):
        """Closing the scope cancels all pending timers."""
        calls = []
        scope = DebounceScope(clock.timer)
        fast = scope.debounce(lambda: calls.append("fast"), 300)
        slow = scope.debounce(lambda: calls.append("slow"), 500)

        fast()
        slow()
        scope.close()
        clock.advance(1000)

        assert calls == []
        assert scope.closed
        assert fast.closed and slow.closed

    def test_cancel_all_keeps_scope_open(self, clock):
        """cancel_all() drops pending calls but accepts new ones."""
        calls = []
        with DebounceScope(clock.timer) as scope:
            debounced = scope.debounce(calls.append, 300)
            debounced(1)
            scope.cancel_all()
            debounced(2)
            clock.advance(300)

        assert calls == [2]

    def test_closed_scope_refuses_debouncers(self, clock):
        """No new debouncers once closed."""
        scope = DebounceScope(clock.timer)
        scope.close()

        with pytest.raises(RuntimeError, match="closed"):
            scope.debounce(print, 300)

    def test_independent_windows(self, clock):
        """Debouncers in one scope fire on their own schedule."""
        calls = []
        scope = DebounceScope(clock.timer)
        fast = scope.debounce(lambda: calls.append("fast"), 300)
        slow = scope.debounce(lambda: calls.append("slow"), 500)

        slow()
        fast()
        clock.advance(500)

        assert calls == ["fast", "slow"]


class TestRealTimers:
    """Debouncer with real threading.Timer objects."""

    def test_burst_with_real_timers(self):
        """A burst of calls runs once with the last arguments."""
        calls = []
        done = threading.Event()

        def record(value):
            calls.append(value)
            done.set()

        debounced = Debouncer(record, 50)
        debounced(1)
        debounced(2)
        debounced(3)

        assert done.wait(timeout=2)
        debounced.close()
        assert calls == [3]
