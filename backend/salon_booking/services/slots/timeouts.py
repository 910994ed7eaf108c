# backend/salon_booking/services/slots/timeouts.py
"""
Bounded execution for read-path I/O.

Store reads run on a small shared worker pool so the caller can stop
waiting after a deadline. A timed-out call keeps running in its worker
and its result is discarded; callers open their own sessions inside fn.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Callable, TypeVar

from ...config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_executor = ThreadPoolExecutor(
    max_workers=settings.fetch_workers,
    thread_name_prefix="slots-fetch",
)


class FetchTimeout(Exception):
    """A bounded read did not finish within its budget."""

    def __init__(self, label: str, timeout: float):
        super().__init__(f"{label} exceeded {timeout:.2f}s")
        self.label = label
        self.timeout = timeout


def run_with_timeout(fn: Callable[[], T], timeout: float, label: str = "fetch") -> T:
    """
    Run fn() and wait at most `timeout` seconds.

    Raises:
        FetchTimeout: the budget elapsed first
        Exception: whatever fn() raised
    """
    future = _executor.submit(fn)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        logger.warning(f"{label} timed out after {timeout}s")
        raise FetchTimeout(label, timeout) from None
