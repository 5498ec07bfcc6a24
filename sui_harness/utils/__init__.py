from sui_harness.utils.addresses import (
    is_valid_sui_address,
    normalize_sui_address,
    normalize_sui_object_id,
    strip_zero_padding,
)
from sui_harness.utils.http import TimeOutHTTPAdapter, make_session
from sui_harness.utils.retry import ExponentialBackoff, RetryPolicy, retry_until_deadline

__all__ = [
    "ExponentialBackoff",
    "RetryPolicy",
    "TimeOutHTTPAdapter",
    "is_valid_sui_address",
    "make_session",
    "normalize_sui_address",
    "normalize_sui_object_id",
    "retry_until_deadline",
    "strip_zero_padding",
]
