import functools
import time
from typing import Callable

import gevent
import structlog

from sui_harness.constants import (
    FAUCET_BACKOFF_BASE,
    FAUCET_BACKOFF_FACTOR,
    FAUCET_BACKOFF_MAX,
    FAUCET_TIMEOUT,
)
from sui_harness.exceptions import FaucetError, FaucetRateLimitError, FaucetSchemaError
from sui_harness.exceptions.provider import ProviderError
from sui_harness.schemas import FaucetResponse, load_faucet_response
from sui_harness.utils.retry import ExponentialBackoff, RetryPolicy, retry_until_deadline

log = structlog.get_logger(__name__)


def is_rate_limited(exc: BaseException) -> bool:
    return isinstance(exc, FaucetRateLimitError)


def is_transient_faucet_failure(exc: BaseException) -> bool:
    """Rate limits and malformed faucet payloads end the funding attempt at once."""
    return not (is_rate_limited(exc) or isinstance(exc, FaucetSchemaError))


def faucet_retry_policy(timeout: float = FAUCET_TIMEOUT) -> RetryPolicy:
    """Exponential backoff for at most `timeout` seconds.

    Rate limits and schema errors are never retried.
    """
    return RetryPolicy(
        max_wait=timeout,
        backoff=ExponentialBackoff(
            base=FAUCET_BACKOFF_BASE, factor=FAUCET_BACKOFF_FACTOR, maximum=FAUCET_BACKOFF_MAX
        ),
        is_retryable=is_transient_faucet_failure,
        retry_on=(FaucetError, ProviderError),
        log_message="Retrying requesting from faucet",
    )


FAUCET_RETRY_POLICY = faucet_retry_policy()


def request_funds(
    address: str,
    request: Callable[[str], dict],
    policy: RetryPolicy = FAUCET_RETRY_POLICY,
    sleep: Callable[[float], None] = gevent.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> FaucetResponse:
    """Ask the faucet behind `request` to fund `address`.

    Transient failures are retried per `policy`. The validated response is
    returned once the faucet succeeds.

    :raises FaucetRateLimitError:
        immediately, if the faucet rate limits us. Callers may decide to skip
        instead of failing, since the network cannot serve the request.
    :raises FaucetSchemaError: if the successful response has an unexpected shape.
    """
    log.debug("Requesting funds from faucet", address=address)
    payload = retry_until_deadline(
        functools.partial(request, address), policy, sleep=sleep, clock=clock
    )
    response = load_faucet_response(payload, recipient=address)
    log.info(
        "Funded address",
        address=address,
        amount=response.amount,
        gas_objects=len(response.transferred_gas_objects),
    )
    return response
