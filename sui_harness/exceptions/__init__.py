from sui_harness.exceptions.harness import (
    ArtifactDecodeError,
    CompilerError,
    FaucetError,
    FaucetRateLimitError,
    FaucetSchemaError,
    GasBudgetMissing,
    HarnessAssertionError,
    HarnessError,
    HarnessTxError,
    InsufficientGas,
    PreconditionError,
    PublishError,
    TransactionBlockFrozen,
    TransactionFailed,
    TransientFaucetError,
)

__all__ = [
    "ArtifactDecodeError",
    "CompilerError",
    "FaucetError",
    "FaucetRateLimitError",
    "FaucetSchemaError",
    "GasBudgetMissing",
    "HarnessAssertionError",
    "HarnessError",
    "HarnessTxError",
    "InsufficientGas",
    "PreconditionError",
    "PublishError",
    "TransactionBlockFrozen",
    "TransactionFailed",
    "TransientFaucetError",
]
