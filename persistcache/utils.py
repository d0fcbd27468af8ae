"""Utility functions for caching."""

import inspect
import time
from collections.abc import Callable

from .serializers import default_key_fn

SKIP_KWARG = "_persistcache_skip"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_async_function(func: Callable) -> bool:
    """Check if a function is async."""
    return inspect.iscoroutinefunction(func)


def generate_cache_key(
    func_name: str,
    args: tuple,
    kwargs: dict,
) -> str:
    """Generate a cache key from function name and arguments."""
    return f"{func_name}:{default_key_fn(args, kwargs)}"


def extract_cache_control_from_kwargs(kwargs: dict) -> tuple[bool, dict]:
    """Extract cache control parameters from kwargs."""
    filtered_kwargs = {**kwargs}
    skip = filtered_kwargs.pop(SKIP_KWARG, False)
    return skip, filtered_kwargs
