from calmo.strategies.base import BaseLimiter
from calmo.strategies.debounce import Debouncer
from calmo.strategies.registry import build_limiter
from calmo.strategies.throttle import Throttler

__all__ = [
    "BaseLimiter",
    "Debouncer",
    "Throttler",
    "build_limiter",
]
