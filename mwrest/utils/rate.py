"""
:py:func:`RateLimited` is a client-side throttle implemented as Python
decorator. It works for plain functions as well as for coroutine functions,
in which case the delay is awaited with :py:func:`asyncio.sleep` instead of
blocking the event loop.

The algorithm is a token bucket based on this `StackOverflow answer`_,
modified so that the allowance can drop below zero: every call reserves its
slot when it is made, so concurrent callers are spaced ``per / rate`` seconds
apart instead of waking up together. The decorated call is only delayed, never
repeated.

.. _`StackOverflow answer`: http://stackoverflow.com/a/6415181

Usage:

.. code-block:: python

    # allow at most 1 call in 3 seconds
    @RateLimited(1, 3)
    async def edit(...):
        ...
"""

import asyncio
import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable

import mwrest

logger = logging.getLogger(__name__)

__all__ = ["RateLimited"]


def RateLimited(rate: float, per: float) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        # state shared by all calls of the decorated function
        state = {"allowance": float(rate), "last_check": time.monotonic()}

        def consume() -> float:
            """Take one call from the bucket and return the delay in seconds."""
            if getattr(mwrest, "_tests_are_running", False):
                return 0
            current = time.monotonic()
            time_passed = current - state["last_check"]
            state["last_check"] = current
            state["allowance"] = min(rate, state["allowance"] + time_passed * (rate / per))
            state["allowance"] -= 1.0
            if state["allowance"] >= 0:
                return 0
            # the deficit includes the slots reserved by callers still waiting
            delay = -state["allowance"] * (per / rate)
            logger.info(
                f"rate limit for function {func.__qualname__} exceeded, "
                f"sleeping for {delay:0.3f} seconds"
            )
            return delay

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def rate_limit_coro(*args: Any, **kwargs: Any) -> Any:
                delay = consume()
                if delay > 0:
                    await asyncio.sleep(delay)
                return await func(*args, **kwargs)

            return rate_limit_coro

        @wraps(func)
        def rate_limit_func(*args: Any, **kwargs: Any) -> Any:
            delay = consume()
            if delay > 0:
                time.sleep(delay)
            return func(*args, **kwargs)

        return rate_limit_func

    return decorator
