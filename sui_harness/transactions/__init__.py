from sui_harness.transactions.builder import GAS_COIN, Argument, ObjectRef, TransactionBlock
from sui_harness.transactions.results import (
    assert_execution_success,
    get_execution_status_type,
    get_object_changes,
    get_published_object_changes,
    get_transferred_object_changes,
)

__all__ = [
    "GAS_COIN",
    "Argument",
    "ObjectRef",
    "TransactionBlock",
    "assert_execution_success",
    "get_execution_status_type",
    "get_object_changes",
    "get_published_object_changes",
    "get_transferred_object_changes",
]
