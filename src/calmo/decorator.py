"""Decorator API for applying debounce or throttle behavior to functions."""

from collections.abc import Callable
from typing import Any, overload

from calmo.config import DebounceConfig, LeadingPolicy, ThrottleConfig
from calmo.scheduler import Clock
from calmo.strategies.debounce import Debouncer
from calmo.strategies.throttle import Throttler


@overload
def debounce(
    func: Callable[..., Any],
    /,
) -> Debouncer: ...


@overload
def debounce(
    *,
    delay: float = 0.3,
    leading: bool = False,
    leading_policy: LeadingPolicy = LeadingPolicy.SUPPRESS,
    max_wait: float | None = None,
    clock: Clock | None = None,
) -> Callable[[Callable[..., Any]], Debouncer]: ...


def debounce(
    func: Callable[..., Any] | None = None,
    /,
    *,
    delay: float = 0.3,
    leading: bool = False,
    leading_policy: LeadingPolicy = LeadingPolicy.SUPPRESS,
    max_wait: float | None = None,
    clock: Clock | None = None,
) -> Debouncer | Callable[[Callable[..., Any]], Debouncer]:
    """Decorator that debounces calls to a function.

    The decorated name is bound to a :class:`Debouncer`. Calling it returns
    ``None`` immediately; the original function runs later with the
    arguments of the last call in the burst. Both sync and async functions
    are accepted.

    Args:
        func: The function to decorate (when used without parentheses).
        delay: Quiet-period delay in seconds.
        leading: Fire on the first call of a burst.
        leading_policy: Window-end behaviour in leading mode.
        max_wait: Maximum deferral in seconds, or None for no limit.
        clock: Scheduling backend.

    Examples:
    ```python
        # With parentheses
        @debounce(delay=0.5)
        async def search(query: str) -> None:
            ...

        # Without parentheses (uses defaults)
        @debounce
        def save(document) -> None:
            ...

        save.flush()
    ```
    """
    # Validate eagerly so a bad decorator fails at definition time.
    config = DebounceConfig(
        delay=delay,
        leading=leading,
        leading_policy=leading_policy,
        max_wait=max_wait,
    )

    def decorator(fn: Callable[..., Any]) -> Debouncer:
        return Debouncer(fn, config, clock)

    if func is not None:
        return decorator(func)

    return decorator


@overload
def throttle(
    func: Callable[..., Any],
    /,
) -> Throttler: ...


@overload
def throttle(
    *,
    interval: float = 0.1,
    trailing: bool = False,
    clock: Clock | None = None,
) -> Callable[[Callable[..., Any]], Throttler]: ...


def throttle(
    func: Callable[..., Any] | None = None,
    /,
    *,
    interval: float = 0.1,
    trailing: bool = False,
    clock: Clock | None = None,
) -> Throttler | Callable[[Callable[..., Any]], Throttler]:
    """Decorator that throttles calls to a function.

    The decorated name is bound to a :class:`Throttler`. The first call of a
    burst runs the function immediately; later calls inside ``interval`` are
    dropped, or replayed once at the end of the cooldown with
    ``trailing=True``.

    Args:
        func: The function to decorate (when used without parentheses).
        interval: Cooldown in seconds after each invocation.
        trailing: Replay the latest dropped call when the cooldown closes.
        clock: Scheduling backend.
    """
    config = ThrottleConfig(interval=interval, trailing=trailing)

    def decorator(fn: Callable[..., Any]) -> Throttler:
        return Throttler(fn, config, clock)

    if func is not None:
        return decorator(func)

    return decorator
