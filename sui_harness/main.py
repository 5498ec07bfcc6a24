import functools
import sys
from typing import Optional, Tuple

import click
import structlog

from sui_harness import __version__
from sui_harness.context import setup
from sui_harness.exceptions import HarnessAssertionError, HarnessError
from sui_harness.exceptions.config import ConfigurationError
from sui_harness.payments import pay_sui_n_times
from sui_harness.publish import publish_package
from sui_harness.transactions.results import get_transferred_object_changes
from sui_harness.utils.configuration.settings import HarnessConfig
from sui_harness.utils.logs import configure_logging

log = structlog.get_logger(__name__)


def load_config(config_file: Optional[str]) -> HarnessConfig:
    if config_file:
        return HarnessConfig.from_file(config_file)
    return HarnessConfig.from_env()


def handle_harness_errors(func):
    """Exit with the failure's exit code instead of a traceback.

        Exit code 2x
        A transaction, faucet request or compilation failed. This points at
        an issue with the environment (network, faucet, compiler).

        Exit code 3x
        An assertion on a result failed. This points at an issue in the
        client or the chain.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HarnessAssertionError as ex:
            log.error("Run finished", result="assertion errors", error=str(ex))
            click.secho(f"Assertion failed: {ex}", fg="red", err=True)
            sys.exit(ex.exit_code)
        except HarnessError as ex:
            log.error("Run finished", result="errors", error=str(ex))
            click.secho(f"{ex.__class__.__name__}: {ex}", fg="red", err=True)
            sys.exit(ex.exit_code)

    return wrapper


@click.group(context_settings={"max_content_width": 120})
@click.version_option(__version__)
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML file with a 'harness' section. Overrides environment variables.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Additionally write a JSON debug log to this file.",
)
@click.pass_context
def main(ctx, config_file, log_level, log_file):
    configure_logging(log_level, debug_log_file_path=log_file)
    try:
        ctx.obj = load_config(config_file)
    except ConfigurationError as ex:
        raise click.BadParameter(str(ex), param_hint="configuration")


@main.command()
@click.pass_obj
@handle_harness_errors
def fund(config: HarnessConfig):
    """Generate an account and fund it from the faucet."""
    context = setup(config)
    click.echo(context.address())


@main.command()
@click.argument("package-path", type=click.Path(exists=True, file_okay=False))
@click.pass_obj
@handle_harness_errors
def publish(config: HarnessConfig, package_path):
    """Compile and publish the Move package at PACKAGE_PATH from a fresh account."""
    package_id, publish_txn = publish_package(package_path, config=config)
    click.echo(package_id)
    log.debug("Publish transaction", digest=publish_txn.get("digest"))


@main.command()
@click.option("--recipient", "recipients", multiple=True, help="Repeat for several recipients.")
@click.option("--amount", "amounts", multiple=True, type=int, help="One per recipient.")
@click.option(
    "--num-recipients",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of generated recipients if no --recipient is given.",
)
@click.option("--times", type=click.IntRange(min=1), default=1, show_default=True)
@click.pass_obj
@handle_harness_errors
def pay(
    config: HarnessConfig,
    recipients: Tuple[str, ...],
    amounts: Tuple[int, ...],
    num_recipients: int,
    times: int,
):
    """Fund a fresh account and pay SUI from it, one transaction after the other."""
    context = setup(config)
    txns = pay_sui_n_times(
        context.signer,
        times,
        num_recipients_per_txn=num_recipients,
        recipients=list(recipients) or None,
        amounts=list(amounts) or None,
        config=config,
    )
    for txn in txns:
        transfers = get_transferred_object_changes(txn)
        click.echo(f"{txn.get('digest')} {len(transfers)} transfers")
