import functools
import inspect
import logging
import time

logger = logging.getLogger(__name__)


class Stopwatch:
    """
    Monotonic timer reporting whole elapsed milliseconds.
    """

    def __init__(self):
        self._start = time.perf_counter()

    def restart(self):
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> int:
        return max(0, int(round((time.perf_counter() - self._start) * 1000)))


class Profiler:
    """
    Provides a decorator to profile synchronous and asynchronous methods,
    logging their execution times at debug level.
    """

    @staticmethod
    def profile(func):
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                watch = Stopwatch()
                try:
                    return await func(*args, **kwargs)
                finally:
                    logger.debug(f"[Profiler] {func.__qualname__} took {watch.elapsed_ms}ms")

            return async_wrapper
        else:

            @functools.wraps(func)
            def sync_wrapper(*args, **kwargs):
                watch = Stopwatch()
                try:
                    return func(*args, **kwargs)
                finally:
                    logger.debug(f"[Profiler] {func.__qualname__} took {watch.elapsed_ms}ms")

            return sync_wrapper
