"""
Bounded polling for elements that appear asynchronously.
"""
import logging
import time
from typing import Callable, Optional, TypeVar

from uploader.errors import WaitTimeout

logger = logging.getLogger(__name__)

T = TypeVar('T')


def poll(probe: Callable[[], Optional[T]], interval: float, max_attempts: int,
         sleep: Callable[[float], None] = time.sleep, what: str = "element") -> T:
    """
    Call probe until it returns something truthy.

    The probe runs at most max_attempts times with interval seconds between
    attempts; no sleep follows the last attempt.

    Raises:
        WaitTimeout: when every attempt came back empty
    """
    for attempt in range(1, max_attempts + 1):
        result = probe()
        if result:
            if attempt > 1:
                logger.debug("Found %s after %d attempts", what, attempt)
            return result
        if attempt < max_attempts:
            sleep(interval)
    raise WaitTimeout(what, max_attempts, interval)
