import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

# Shared pool for blocking provider work (directory walks, evaluation)
_executor = ThreadPoolExecutor(
    max_workers=4,
    thread_name_prefix="lumina_provider"
)

T = TypeVar('T')


async def run_in_executor(func: Callable[..., T], *args, **kwargs) -> T:
    """
    Run a blocking/synchronous function in the shared thread pool.

    Usage:
        results = await run_in_executor(matcher.match, query)

    Exceptions raised by `func` propagate to the awaiting caller.
    """
    loop = asyncio.get_running_loop()
    call = partial(func, *args, **kwargs)

    try:
        return await loop.run_in_executor(_executor, call)
    except Exception as e:
        logger.debug(f"{getattr(func, '__qualname__', func)} failed in executor: {e}")
        raise


def cleanup_executor():
    """
    Shut the shared pool down. Call once when the launcher exits.
    """
    logger.info("Shutting down provider executor...")
    _executor.shutdown(wait=False, cancel_futures=True)
    logger.info("Executor shutdown complete")
