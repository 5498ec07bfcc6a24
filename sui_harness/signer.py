import base64
from typing import List, Optional, Tuple

import structlog

from sui_harness.keypair import Ed25519Keypair
from sui_harness.transactions.builder import TransactionBlock
from sui_harness.transactions.results import get_execution_status_type

log = structlog.get_logger(__name__)


class RawSigner:
    """Signs transaction blocks with a local keypair and submits them through a provider."""

    def __init__(self, keypair: Ed25519Keypair, provider) -> None:
        self.keypair = keypair
        self.provider = provider

    def get_address(self) -> str:
        return self.keypair.to_sui_address()

    def sign_transaction_block(self, transaction_block: TransactionBlock) -> Tuple[str, str]:
        """Build and sign `transaction_block`; the block is frozen afterwards.

        Returns the base64 encoded transaction data and the serialized signature.
        """
        transaction_block.set_sender_if_not_set(self.get_address())
        tx_bytes = transaction_block.build(self.provider)
        transaction_block.freeze()
        signature = self.keypair.sign_transaction_data(tx_bytes)
        return base64.b64encode(tx_bytes).decode("ascii"), signature

    def sign_and_execute_transaction_block(
        self,
        transaction_block: TransactionBlock,
        options: Optional[dict] = None,
        request_type: str = "WaitForLocalExecution",
    ) -> dict:
        tx_bytes, signature = self.sign_transaction_block(transaction_block)
        signatures: List[str] = [signature]
        log.debug(
            "Submitting transaction block", sender=self.get_address(), block=transaction_block
        )
        result = self.provider.execute_transaction_block(
            tx_bytes, signatures, options=options, request_type=request_type
        )
        log.debug(
            "Transaction block executed",
            digest=result.get("digest"),
            status=get_execution_status_type(result),
        )
        return result
