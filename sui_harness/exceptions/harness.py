class HarnessError(Exception):
    exit_code = 20


class HarnessTxError(HarnessError):
    exit_code = 21


class TransactionFailed(HarnessTxError):
    """The chain executed a transaction block, but reported a non-success status."""

    exit_code = 22

    def __init__(self, status, error=None, digest=None):
        self.status = status
        self.error = error
        self.digest = digest
        super(TransactionFailed, self).__init__(
            f"Transaction {digest or '<unknown digest>'} finished with status {status!r}: "
            f"{error or 'no error reported'}"
        )


class GasBudgetMissing(HarnessTxError):
    """A transaction block was about to be submitted without a gas budget."""

    exit_code = 23


class TransactionBlockFrozen(HarnessTxError):
    """A transaction block was modified after it had been submitted."""

    exit_code = 23


class InsufficientGas(HarnessTxError):
    """The sender owns no coins which could pay for the transaction's gas budget."""

    exit_code = 23


class FaucetError(HarnessError):
    exit_code = 24


class TransientFaucetError(FaucetError):
    """The faucet could not service the request right now. Retrying may help."""

    exit_code = 24


class FaucetRateLimitError(FaucetError):
    """The faucet refused to fund the address because we asked too often.

    This is never retried; callers decide whether to skip or to fail.
    """

    exit_code = 25


class FaucetSchemaError(FaucetError):
    """The faucet answered, but the payload did not have the expected shape."""

    exit_code = 26


class PublishError(HarnessError):
    exit_code = 27


class CompilerError(PublishError):
    """The package compiler exited with a non-zero status or could not be started."""

    def __init__(self, message, returncode=None, stderr=None):
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        super(CompilerError, self).__init__(message)


class ArtifactDecodeError(PublishError):
    """The compiler output could not be decoded into an artifact bundle."""


class HarnessAssertionError(HarnessError, AssertionError):
    exit_code = 30


class PreconditionError(HarnessAssertionError):
    """Arguments were rejected before any request was sent to the network."""
