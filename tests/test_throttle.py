"""Tests for the Throttler."""

import asyncio
import logging

import pytest

from calmo.config import ThrottleConfig
from calmo.scheduler import AsyncioClock
from calmo.strategies.throttle import Throttler


def _throttler(target, clock, **kwargs):
    return Throttler(target, ThrottleConfig(**kwargs), clock)


class TestThrottleLeading:
    def test_first_call_fires_immediately(self, target, clock):
        t = _throttler(target, clock, interval=1.0)
        t("a")
        assert target.args == [("a",)]
        assert t.cooling_down is True

    @pytest.mark.parametrize("n_calls", [1, 2, 3, 10, 50])
    def test_burst_within_interval_fires_once(self, target, clock, n_calls):
        t = _throttler(target, clock, interval=1.0)
        for i in range(n_calls):
            t(i)
            clock.advance(0.5 / n_calls)
        clock.advance(2.0)
        assert target.args == [(0,)]

    def test_scenario_calls_at_0_100_200_then_1100(self, target, clock):
        t = _throttler(target, clock, interval=1.0)
        t(0)
        clock.advance(0.1)
        t(1)
        clock.advance(0.1)
        t(2)
        clock.advance(0.9)
        t(3)
        assert target.args == [(0,), (3,)]
        assert target.calls[1][0] == pytest.approx(1.1)

    def test_cooldown_ends_without_trailing_work(self, target, clock):
        t = _throttler(target, clock, interval=1.0)
        t("a")
        clock.advance(1.0)
        assert t.cooling_down is False
        assert clock.live_timers == 0

    def test_dropped_calls_are_logged(self, target, clock, caplog):
        caplog.set_level(logging.DEBUG, logger="calmo")
        t = _throttler(target, clock, interval=1.0)
        t("a")
        t("b")
        assert "dropped call" in caplog.text

    def test_zero_interval(self, target, clock):
        t = _throttler(target, clock, interval=0)
        t(1)
        t(2)
        clock.advance()
        t(3)
        assert target.args == [(1,), (3,)]


class TestThrottleTrailing:
    def test_scenario_calls_at_0_and_500(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("t0")
        clock.advance(0.5)
        t("t500")
        clock.advance(0.4)
        assert target.args == [("t0",)]
        clock.advance(0.2)
        assert target.args == [("t0",), ("t500",)]
        assert target.calls[1][0] == pytest.approx(1.0)

    @pytest.mark.parametrize("n_calls", [2, 3, 10])
    def test_two_invocations_for_burst(self, target, clock, n_calls):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        for i in range(n_calls):
            t(i)
            clock.advance(0.5 / n_calls)
        clock.advance(5.0)
        assert target.args == [(0,), (n_calls - 1,)]

    def test_single_call_has_no_trailing(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("only")
        clock.advance(5.0)
        assert target.args == [("only",)]

    def test_new_window_opens_from_trailing_fire(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("a")
        clock.advance(0.5)
        t("b")
        clock.advance(0.75)
        # t=1.25: trailing fired at 1.0 and a new cooldown runs until 2.0.
        assert t.cooling_down is True
        t("c")
        assert target.args == [("a",), ("b",)]
        clock.advance(0.5)
        assert target.args == [("a",), ("b",)]
        clock.advance(0.5)
        assert target.args == [("a",), ("b",), ("c",)]
        assert target.calls[2][0] == pytest.approx(2.0)

    def test_never_two_fires_within_interval(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        for i in range(40):
            t(i)
            clock.advance(0.125)
        clock.advance(5.0)
        times = [when for when, _, _ in target.calls]
        gaps = [b - a for a, b in zip(times, times[1:])]
        assert all(gap >= 1.0 - 1e-9 for gap in gaps)

    def test_pending_reflects_buffer(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("a")
        assert t.pending is False
        t("b")
        assert t.pending is True
        clock.advance(1.0)
        assert t.pending is False


class TestThrottleCancel:
    def test_cancel_clears_cooldown(self, target, clock):
        t = _throttler(target, clock, interval=1.0)
        t("a")
        t.cancel()
        assert t.cooling_down is False
        t("b")
        assert target.args == [("a",), ("b",)]

    def test_cancel_drops_trailing(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("a")
        t("b")
        t.cancel()
        clock.advance(5.0)
        assert target.args == [("a",)]

    def test_cancel_idempotent(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t.cancel()
        t("a")
        t("b")
        t.cancel()
        t.cancel()
        assert t.pending is False
        assert t.cooling_down is False
        assert clock.live_timers == 0


class TestThrottleFlush:
    def test_flush_fires_buffered_and_restarts_cooldown(self, target, clock):
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("a")
        clock.advance(0.5)
        t("b")
        t.flush()
        assert target.args == [("a",), ("b",)]
        clock.advance(0.75)
        # t=1.25: the cooldown restarted at t=0.5 and runs until t=1.5.
        assert t.cooling_down is True
        clock.advance(0.5)
        assert t.cooling_down is False
        assert target.count == 2

    def test_flush_without_buffer(self, target, clock):
        t = _throttler(target, clock, interval=1.0)
        t("a")
        t("b")
        t.flush()
        assert target.args == [("a",)]


class TestThrottleErrors:
    def test_raising_leading_target_keeps_cooldown(self, clock):
        calls = []

        def target(value):
            calls.append(value)
            raise RuntimeError("boom")

        t = _throttler(target, clock, interval=1.0)
        with pytest.raises(RuntimeError):
            t(1)
        assert t.cooling_down is True
        t(2)
        assert calls == [1]
        clock.advance(1.0)
        assert t.cooling_down is False

    def test_raising_trailing_target_keeps_cooldown(self, clock):
        calls = []

        def target(value):
            calls.append(value)
            if value == "trailing":
                raise RuntimeError("boom")

        t = _throttler(target, clock, interval=1.0, trailing=True)
        t("lead")
        t("trailing")
        with pytest.raises(RuntimeError):
            clock.advance(1.0)
        assert t.cooling_down is True
        t("dropped-into-buffer")
        assert calls == ["lead", "trailing"]


class TestThrottleProperties:
    def test_config_and_interval(self, target, clock):
        cfg = ThrottleConfig(interval=2.0, trailing=True)
        t = Throttler(target, cfg, clock)
        assert t.config is cfg
        assert t.interval == 2.0

    def test_default_config(self, target):
        assert Throttler(target).config == ThrottleConfig()


class TestThrottleEventLoop:
    async def test_throttles_on_running_loop(self):
        calls = []
        t = Throttler(calls.append, ThrottleConfig(interval=0.05, trailing=True), AsyncioClock())
        t(1)
        t(2)
        t(3)
        assert calls == [1]
        await asyncio.sleep(0.1)
        assert calls == [1, 3]


class TestThrottleIdleHook:
    def test_on_idle_when_cooldown_ends(self, target, clock):
        idle = []
        t = _throttler(target, clock, interval=1.0, trailing=True)
        t.on_idle = idle.append
        t("a")
        t("b")
        clock.advance(1.0)
        # Trailing fire opened a new cooldown.
        assert idle == []
        clock.advance(1.0)
        assert idle == [t]
