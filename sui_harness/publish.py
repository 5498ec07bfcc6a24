import atexit
import shlex
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, NamedTuple, Optional, Set, Union

import structlog

from sui_harness.constants import EXECUTION_OPTIONS
from sui_harness.context import TestContext, setup
from sui_harness.exceptions import CompilerError, HarnessAssertionError
from sui_harness.schemas import ArtifactBundle, decode_artifact_bundle
from sui_harness.transactions.builder import TransactionBlock
from sui_harness.transactions.results import (
    assert_execution_success,
    get_published_object_changes,
)
from sui_harness.utils.addresses import strip_zero_padding
from sui_harness.utils.configuration.settings import HarnessConfig

log = structlog.get_logger(__name__)

_LIVE_BUILD_DIRS: Set[tempfile.TemporaryDirectory] = set()


@atexit.register
def _remove_live_build_dirs() -> None:
    """Remove build directories of compilations interrupted by interpreter exit."""
    for build_dir in list(_LIVE_BUILD_DIRS):
        build_dir.cleanup()
    _LIVE_BUILD_DIRS.clear()


@contextmanager
def build_directory() -> Iterator[Path]:
    build_dir = tempfile.TemporaryDirectory(prefix="sui-harness-build-")
    _LIVE_BUILD_DIRS.add(build_dir)
    try:
        yield Path(build_dir.name)
    finally:
        _LIVE_BUILD_DIRS.discard(build_dir)
        build_dir.cleanup()


class PublishResult(NamedTuple):
    package_id: str
    publish_txn: dict


def compile_package(package_path: Union[str, Path], sui_bin: str) -> ArtifactBundle:
    """Build the Move package at `package_path` and return its bytecode and dependencies.

    Compilation is deterministic, so failures are never retried.

    :raises CompilerError: if the compiler cannot be started or exits non-zero.
    :raises ArtifactDecodeError: if the compiler output cannot be decoded.
    """
    with build_directory() as install_dir:
        command = [
            *shlex.split(sui_bin),
            "move",
            "build",
            "--dump-bytecode-as-base64",
            "--path",
            str(package_path),
            "--install-dir",
            str(install_dir),
        ]
        log.debug("Compiling package", command=command)
        try:
            proc = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as e:
            raise CompilerError(f"Cannot run compiler {command[0]!r}: {e}") from e

        if proc.returncode != 0:
            raise CompilerError(
                f"Compiling {package_path} failed with exit code {proc.returncode}",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
        return decode_artifact_bundle(proc.stdout)


def publish_package(
    package_path: Union[str, Path],
    context: Optional[TestContext] = None,
    config: Optional[HarnessConfig] = None,
) -> PublishResult:
    """Compile and publish the package at `package_path`.

    The upgrade capability is transferred back to the publishing address.

    Without a `context`, a freshly funded account is set up for this publish
    alone, which keeps publishes isolated from each other.

    :raises TransactionFailed: if the publish transaction does not succeed.
    :raises HarnessAssertionError: if no package id can be found in the result.
    """
    if config is None:
        config = context.config if context is not None else HarnessConfig.from_env()
    if context is None:
        context = setup(config)

    bundle = compile_package(package_path, config.sui_bin)
    sender = context.signer.get_address()

    tx = TransactionBlock()
    tx.set_gas_budget(config.gas_budget)
    cap = tx.publish(bundle.modules, bundle.dependencies)
    tx.transfer_objects([cap], tx.pure(sender, "address"))

    publish_txn = context.signer.sign_and_execute_transaction_block(
        tx, options=EXECUTION_OPTIONS
    )
    assert_execution_success(publish_txn)

    published = get_published_object_changes(publish_txn)
    if not published:
        raise HarnessAssertionError(
            f"Transaction {publish_txn.get('digest')} has no published object change"
        )
    package_id = strip_zero_padding(published[0]["packageId"])
    if len(package_id) <= len("0x"):
        raise HarnessAssertionError(f"Empty package id in {published[0]!r}")

    log.info("Published package", package_id=package_id, sender=sender)
    return PublishResult(package_id, publish_txn)
