"""Factory functions, the main entry point for the library."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from calmo.config import DebounceConfig, LeadingPolicy, ThrottleConfig
from calmo.strategies.debounce import Debouncer
from calmo.strategies.throttle import Throttler

if TYPE_CHECKING:
    from collections.abc import Callable

    from calmo.scheduler import Clock


def create_debouncer(
    func: Callable[..., Any],
    delay: float,
    *,
    leading: bool = False,
    leading_policy: LeadingPolicy = LeadingPolicy.SUPPRESS,
    max_wait: float | None = None,
    clock: Clock | None = None,
) -> Debouncer:
    """Wrap *func* so it runs once per burst of calls.

    Args:
        func: The target operation.
        delay: Quiet period in seconds after the last call.
        leading: Fire on the first call of a burst instead of the last.
        leading_policy: Whether a leading debouncer replays the latest
            suppressed call when its window closes.
        max_wait: Upper bound in seconds on how long calls can keep
            deferring a trailing invocation.
        clock: Scheduling backend, defaults to the running asyncio loop.

    Raises:
        ValueError: If a duration is negative or not finite, or the options
            conflict.
    """
    config = DebounceConfig(
        delay=delay,
        leading=leading,
        leading_policy=leading_policy,
        max_wait=max_wait,
    )
    return Debouncer(func, config, clock)


def create_throttler(
    func: Callable[..., Any],
    interval: float,
    *,
    trailing: bool = False,
    clock: Clock | None = None,
) -> Throttler:
    """Wrap *func* so it runs at most once per *interval* seconds.

    Args:
        func: The target operation.
        interval: Cooldown in seconds after each invocation.
        trailing: Replay the latest call made during a cooldown when it
            closes.
        clock: Scheduling backend, defaults to the running asyncio loop.

    Raises:
        ValueError: If *interval* is negative or not finite.
    """
    return Throttler(func, ThrottleConfig(interval=interval, trailing=trailing), clock)
