import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar

import gevent
import structlog

log = structlog.get_logger(__name__)

T = TypeVar("T")


def _always(_exc: BaseException) -> bool:
    return True


@dataclass(frozen=True)
class ExponentialBackoff:
    """Delay before retry number `attempt` (1-based): ``base * factor ** (attempt - 1)``.

    The delay never exceeds `maximum`, so the schedule is non-decreasing.
    """

    base: float = 1.0
    factor: float = 2.0
    maximum: float = 8.0

    def __call__(self, attempt: int) -> float:
        return min(self.base * self.factor ** (attempt - 1), self.maximum)


@dataclass(frozen=True)
class RetryPolicy:
    """How :func:`retry_until_deadline` treats a failing call.

    :param max_wait: Wall-clock budget in seconds, measured from the first attempt.
    :param backoff: Maps the 1-based attempt number to the delay before the next attempt.
    :param is_retryable:
        Classifier for caught exceptions. Returning False stops retrying at once and
        re-raises the exception, regardless of the remaining budget.
    :param retry_on: Exception types which are caught at all. Anything else propagates.
    :param log_message: Event logged for every retry.
    """

    max_wait: float
    backoff: Callable[[int], float] = field(default_factory=ExponentialBackoff)
    is_retryable: Callable[[BaseException], bool] = _always
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    log_message: str = "Retrying"


def retry_until_deadline(
    func: Callable[[], T],
    policy: RetryPolicy,
    sleep: Callable[[float], None] = gevent.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call `func` until it succeeds or `policy` says to stop.

    The last exception is re-raised once the deadline has passed. Waits are
    clamped so the final attempt starts no later than the deadline.
    """
    started = clock()
    attempt = 0
    while True:
        attempt += 1
        try:
            return func()
        except policy.retry_on as e:
            if not policy.is_retryable(e):
                log.debug("Not retrying", reason=str(e), attempt=attempt)
                raise

            remaining = policy.max_wait - (clock() - started)
            if remaining <= 0:
                log.error("Giving up", reason=str(e), attempts=attempt, timeout=policy.max_wait)
                raise

            delay = min(policy.backoff(attempt), remaining)
            log.warning(policy.log_message, reason=str(e), attempt=attempt, retry_in=delay)
            sleep(delay)
