"""calmo: debounce and throttle primitives for Python.

Limits how often a function runs in response to a rapid stream of calls.
Runs on asyncio by default; any object with ``call_later`` and ``time``
can drive it instead.

Basic usage:

    from calmo import create_debouncer, create_throttler

    search = create_debouncer(run_query, 0.5)
    search("h")
    search("hello")  # run_query("hello") once, 0.5s after this call

    on_scroll = create_throttler(update_indicator, 1.0, trailing=True)

Decorator usage:

    from calmo import debounce

    @debounce(delay=0.5)
    async def search(query: str) -> None:
        ...
"""

from calmo.config import DebounceConfig, Kind, LeadingPolicy, ThrottleConfig
from calmo.core import create_debouncer, create_throttler
from calmo.decorator import debounce, throttle
from calmo.keyed import KeyedLimiter
from calmo.scheduler import AsyncioClock, Clock, DeferredScheduler, PendingCall
from calmo.strategies.base import BaseLimiter
from calmo.strategies.debounce import Debouncer
from calmo.strategies.registry import build_limiter
from calmo.strategies.throttle import Throttler

__all__ = [
    "AsyncioClock",
    "BaseLimiter",
    "Clock",
    "DebounceConfig",
    "Debouncer",
    "DeferredScheduler",
    "Kind",
    "KeyedLimiter",
    "LeadingPolicy",
    "PendingCall",
    "ThrottleConfig",
    "Throttler",
    "build_limiter",
    "create_debouncer",
    "create_throttler",
    "debounce",
    "throttle",
]

__version__ = "0.1.0"
