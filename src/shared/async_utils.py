"""Helpers for running coroutines from synchronous Flask views."""

import asyncio
import logging
from typing import Any, Coroutine, Dict, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_loop_exception(loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """Route unhandled event-loop errors (e.g. httpx teardown) to the app logger."""
    message = context.get("message") or "Unhandled event loop error"
    exception = context.get("exception")
    if exception:
        logger.warning(f"{message}: {exception}")
    else:
        logger.warning(message)


def create_event_loop() -> asyncio.AbstractEventLoop:
    """Create an event loop that logs stray exceptions instead of printing them."""
    loop = asyncio.new_event_loop()
    loop.set_exception_handler(log_loop_exception)
    return loop


def run_coroutine(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion on a fresh event loop.

    Each Flask request gets its own loop, so every await inside a request is
    cooperative on a single thread. Leftover tasks are cancelled before the
    loop is closed.
    """
    loop = create_event_loop()
    asyncio.set_event_loop(loop)

    try:
        return loop.run_until_complete(coro)
    finally:
        try:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()

            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))

            loop.run_until_complete(loop.shutdown_asyncgens())
        except Exception as e:
            logger.debug(f"Event loop shutdown error ignored: {e}")
        finally:
            asyncio.set_event_loop(None)
            loop.close()
