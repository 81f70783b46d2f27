"""Shared fixtures for calmo tests."""

import heapq
import itertools

import pytest


class FakeHandle:
    __slots__ = ("callback", "cancelled", "when")

    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Virtual-time clock. Callbacks only run inside :meth:`advance`."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def time(self):
        return self.now

    def call_later(self, delay, callback):
        handle = FakeHandle(self.now + delay, callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds=0.0):
        """Move time forward, running due callbacks in order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = max(self.now, when)
            if not handle.cancelled:
                handle.callback()
        self.now = target

    @property
    def live_timers(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled)


class Recorder:
    """Target operation that records every invocation with its virtual time."""

    def __init__(self, clock=None):
        self.clock = clock
        self.calls = []

    def __call__(self, *args, **kwargs):
        when = self.clock.time() if self.clock is not None else None
        self.calls.append((when, args, kwargs))

    @property
    def count(self):
        return len(self.calls)

    @property
    def args(self):
        return [args for _, args, _ in self.calls]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def target(clock):
    return Recorder(clock)
