from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from sui_harness import main
from sui_harness.exceptions import (
    CompilerError,
    FaucetRateLimitError,
    PreconditionError,
    TransactionFailed,
)
from sui_harness.publish import PublishResult

ADDRESS = "0x" + "f" * 64


@pytest.fixture(scope="module")
def runner():
    return CliRunner()


@pytest.fixture
def context():
    context = MagicMock()
    context.address.return_value = ADDRESS
    return context


class TestFund:
    def test_prints_the_funded_address(self, runner, context):
        with patch("sui_harness.main.setup", return_value=context):
            result = runner.invoke(main.main, ["fund"])
        assert result.exit_code == 0
        assert ADDRESS in result.output

    def test_rate_limit_exit_code(self, runner):
        with patch("sui_harness.main.setup", side_effect=FaucetRateLimitError("slow down")):
            result = runner.invoke(main.main, ["fund"])
        assert result.exit_code == FaucetRateLimitError.exit_code == 25


class TestPublish:
    def test_prints_the_package_id(self, runner, tmp_path):
        with patch(
            "sui_harness.main.publish_package",
            return_value=PublishResult("0xabc", {"digest": "d"}),
        ) as publish_package:
            result = runner.invoke(main.main, ["publish", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.strip() == "0xabc"
        assert publish_package.call_args.args == (str(tmp_path),)

    @pytest.mark.parametrize(
        "exception",
        argvalues=[CompilerError("boom", returncode=1), TransactionFailed("failure", "err")],
    )
    def test_failures_exit_with_their_exit_code(self, exception, runner, tmp_path):
        with patch("sui_harness.main.publish_package", side_effect=exception):
            result = runner.invoke(main.main, ["publish", str(tmp_path)])
        assert result.exit_code == exception.exit_code

    def test_missing_package_path_is_a_usage_error(self, runner, tmp_path):
        result = runner.invoke(main.main, ["publish", str(tmp_path.joinpath("missing"))])
        assert result.exit_code == 2


class TestPay:
    def test_passes_recipients_and_amounts(self, runner, context):
        with patch("sui_harness.main.setup", return_value=context), patch(
            "sui_harness.main.pay_sui_n_times", return_value=[{"digest": "d1"}]
        ) as pay:
            result = runner.invoke(
                main.main,
                ["pay", "--recipient", ADDRESS, "--amount", "5", "--times", "3"],
            )

        assert result.exit_code == 0
        assert "d1 0 transfers" in result.output
        args, kwargs = pay.call_args
        assert args == (context.signer, 3)
        assert kwargs["recipients"] == [ADDRESS]
        assert kwargs["amounts"] == [5]

    def test_precondition_failure_exit_code(self, runner, context):
        with patch("sui_harness.main.setup", return_value=context), patch(
            "sui_harness.main.pay_sui_n_times", side_effect=PreconditionError("mismatch")
        ):
            result = runner.invoke(main.main, ["pay", "--amount", "1", "--amount", "2"])
        assert result.exit_code == 30


class TestConfiguration:
    def test_invalid_config_file_is_a_usage_error(self, runner, tmp_path):
        path = tmp_path.joinpath("harness.yaml")
        path.write_text("harness:\n  gas_budget: 0\n")
        result = runner.invoke(main.main, ["--config-file", str(path), "fund"])
        assert result.exit_code == 2
        assert "gas_budget" in result.output

    def test_config_file_is_passed_to_commands(self, runner, context, tmp_path):
        path = tmp_path.joinpath("harness.yaml")
        path.write_text("harness:\n  gas_budget: 1234\n")
        with patch("sui_harness.main.setup", return_value=context) as setup:
            result = runner.invoke(main.main, ["--config-file", str(path), "fund"])
        assert result.exit_code == 0
        assert setup.call_args.args[0].gas_budget == 1234
