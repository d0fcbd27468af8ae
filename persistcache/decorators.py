"""Memoize async functions through a PersistentCache."""

import functools
import logging
from collections.abc import Callable

from .core import PersistentCache
from .results import LookupStatus
from .utils import (
    extract_cache_control_from_kwargs,
    generate_cache_key,
    is_async_function,
)

logger = logging.getLogger(__name__)


def cached(
    cache: PersistentCache,
    *,
    expiry_ms: int | None = None,
    name: str | None = None,
    key_fn: Callable | None = None,
):
    """
    Caching decorator for async functions.

    Args:
        cache: Cache the results are stored in
        expiry_ms: Lifetime of each result in milliseconds (cache default if None)
        name: Cache name used in keys instead of the function name
        key_fn: Custom key function called with (args, kwargs)

    Pass ``_persistcache_skip=True`` to a decorated call to bypass the cache.
    """

    def decorator(f: Callable) -> Callable:
        if not is_async_function(f):
            raise TypeError(f"cached() requires an async function, got {f.__name__}")

        func_name = name or f.__name__

        @functools.wraps(f)
        async def wrapper(*args, **kwargs):
            skip, filtered_kwargs = extract_cache_control_from_kwargs(kwargs)
            if skip:
                if cache.debug:
                    logger.info(f"Cache skipped for {func_name}")
                return await f(*args, **filtered_kwargs)

            if key_fn:
                cache_key = key_fn(args, filtered_kwargs)
            else:
                cache_key = generate_cache_key(func_name, args, filtered_kwargs)

            # Check status, not value, so a cached None still counts as a hit
            outcome = await cache.lookup(cache_key)
            if outcome.status is LookupStatus.HIT:
                return outcome.value

            result = await f(*args, **filtered_kwargs)
            await cache.set(cache_key, result, expiry_ms=expiry_ms)
            return result

        return wrapper

    return decorator
