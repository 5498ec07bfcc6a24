"""Accessors for execution results as returned by ``sui_executeTransactionBlock``."""
from typing import Dict, List, Optional

from sui_harness.exceptions import TransactionFailed

ExecutionResult = Dict


def get_transaction_digest(result: ExecutionResult) -> Optional[str]:
    return result.get("digest")


def get_execution_status(result: ExecutionResult) -> Optional[dict]:
    return (result.get("effects") or {}).get("status")


def get_execution_status_type(result: ExecutionResult) -> Optional[str]:
    status = get_execution_status(result)
    return status.get("status") if status else None


def get_execution_status_error(result: ExecutionResult) -> Optional[str]:
    status = get_execution_status(result)
    return status.get("error") if status else None


def get_object_changes(result: ExecutionResult) -> List[dict]:
    return list(result.get("objectChanges") or [])


def get_published_object_changes(result: ExecutionResult) -> List[dict]:
    return [change for change in get_object_changes(result) if change.get("type") == "published"]


def get_change_owner_address(change: dict) -> Optional[str]:
    owner = change.get("owner")
    if isinstance(owner, dict):
        return owner.get("AddressOwner")
    return None


def get_transferred_object_changes(result: ExecutionResult) -> List[dict]:
    """Objects created or transferred into the possession of an address other than the sender."""
    return [
        change
        for change in get_object_changes(result)
        if change.get("type") in ("created", "transferred")
        and get_change_owner_address(change) not in (None, change.get("sender"))
    ]


def assert_execution_success(result: ExecutionResult) -> None:
    """Raise :exc:`TransactionFailed` unless the effects report ``success``."""
    status = get_execution_status_type(result)
    if status != "success":
        raise TransactionFailed(
            status, error=get_execution_status_error(result), digest=get_transaction_digest(result)
        )
