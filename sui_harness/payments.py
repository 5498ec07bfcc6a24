from typing import List, Optional, Sequence

import structlog

from sui_harness.constants import EXECUTION_OPTIONS, SUI_TYPE_ARG
from sui_harness.exceptions import HarnessAssertionError, PreconditionError
from sui_harness.keypair import generate_addresses
from sui_harness.signer import RawSigner
from sui_harness.transactions.builder import TransactionBlock
from sui_harness.transactions.results import assert_execution_success
from sui_harness.utils.configuration.settings import HarnessConfig

log = structlog.get_logger(__name__)


def get_first_sui_coin(signer: RawSigner) -> str:
    owner = signer.get_address()
    coins = signer.provider.get_coins(owner=owner, coin_type=SUI_TYPE_ARG)["data"]
    if not coins:
        raise HarnessAssertionError(f"{owner} owns no SUI coins")
    return coins[0]["coinObjectId"]


def pay_sui(
    signer: RawSigner,
    num_recipients: int = 1,
    recipients: Optional[Sequence[str]] = None,
    amounts: Optional[Sequence[int]] = None,
    coin_id: Optional[str] = None,
    config: Optional[HarnessConfig] = None,
) -> dict:
    """Send `amounts` to `recipients` in a single transaction block.

    Each amount is split off the coin `coin_id` and transferred to its
    recipient. Recipients default to `num_recipients` fresh addresses, amounts
    to the configured send amount, and the coin to the first SUI coin the
    signer owns at call time.

    :raises PreconditionError:
        before any request is made, if the recipient and amount counts differ.
    :raises TransactionFailed: if the payment does not succeed.
    """
    config = config or HarnessConfig.from_env()
    if num_recipients < 0:
        raise PreconditionError(f"num_recipients must not be negative, got {num_recipients}")
    if recipients is None:
        recipients = generate_addresses(num_recipients)
    if amounts is None:
        amounts = [config.send_amount] * len(recipients)

    if len(recipients) != len(amounts):
        raise PreconditionError(
            f"recipients and amounts must be the same length, "
            f"got {len(recipients)} recipients and {len(amounts)} amounts"
        )
    if not recipients:
        raise PreconditionError("At least one recipient is required")

    if coin_id is None:
        coin_id = get_first_sui_coin(signer)

    tx = TransactionBlock()
    tx.set_gas_budget(config.gas_budget)
    for recipient, amount in zip(recipients, amounts):
        [coin] = tx.split_coins(tx.object(coin_id), [tx.pure(amount, "u64")])
        tx.transfer_objects([coin], tx.pure(recipient, "address"))

    txn = signer.sign_and_execute_transaction_block(tx, options=EXECUTION_OPTIONS)
    assert_execution_success(txn)
    log.info(
        "Paid SUI",
        digest=txn.get("digest"),
        sender=signer.get_address(),
        recipients=len(recipients),
        total=sum(amounts),
    )
    return txn


def pay_sui_n_times(
    signer: RawSigner,
    n_times: int,
    num_recipients_per_txn: int = 1,
    recipients: Optional[Sequence[str]] = None,
    amounts: Optional[Sequence[int]] = None,
    config: Optional[HarnessConfig] = None,
) -> List[dict]:
    """Run :func:`pay_sui` `n_times` times, one after the other.

    Every payment selects its coin from the chain state the previous payment
    left behind, so a payment is only submitted once its predecessor's result
    is known. Results are returned in submission order.
    """
    if n_times < 0:
        raise PreconditionError(f"n_times must not be negative, got {n_times}")

    txns = []
    for _ in range(n_times):
        txns.append(
            pay_sui(signer, num_recipients_per_txn, recipients, amounts, config=config)
        )
    return txns
