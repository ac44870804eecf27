# discovery_intake/infra/retry.py
import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)

MAX_CONFIRMATION_DELAY = 10.0


def _sleep_with_jitter(base: float, factor: float, attempt: int, cap: float) -> float:
    # exponential backoff met jitter
    delay = min(base * (factor ** attempt), cap)
    jitter = random.uniform(0, delay * 0.25)
    return delay + jitter


def retry_on(
    fn: Callable[[], T],
    *,
    attempts: int = 3,
    base: float = 0.2,
    factor: float = 2.0,
    cap: float = 2.0,
    is_retryable: Optional[Callable[[Exception], bool]] = None,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    last_exc: Optional[Exception] = None
    for i in range(attempts):
        try:
            return fn()
        except Exception as e:
            if is_retryable and not is_retryable(e):
                raise
            last_exc = e
            if i == attempts - 1:
                break
            sleep_s = _sleep_with_jitter(base, factor, i, cap)
            if on_retry:
                on_retry(i + 1, e, sleep_s)
            else:
                logger.warning("retry #%s in %.2fs due to %s", i + 1, sleep_s, repr(e))
            sleep(sleep_s)
    assert last_exc is not None
    raise last_exc


@dataclass
class DelayedConfirmation:
    """
    Apply with bounded delayed confirmation.

    Wacht een vaste tijd en voert dan ``fn`` uit, met hooguit ``attempts``
    pogingen. Used for the custom-property patch that HubSpot sometimes drops
    when it arrives right after the contact was created.
    """

    enabled: bool = False
    delay_seconds: float = 2.0
    attempts: int = 1
    sleep: Callable[[float], None] = time.sleep

    @property
    def delay(self) -> float:
        return max(0.0, min(self.delay_seconds, MAX_CONFIRMATION_DELAY))

    def apply(self, fn: Callable[[], T]) -> T:
        if self.delay:
            self.sleep(self.delay)
        return retry_on(
            fn,
            attempts=max(1, self.attempts),
            base=self.delay or 0.2,
            cap=MAX_CONFIRMATION_DELAY,
            sleep=self.sleep,
        )
