import pytest

from sui_harness.exceptions import GasBudgetMissing, InsufficientGas, TransactionBlockFrozen
from sui_harness.keypair import generate_account
from sui_harness.transactions.builder import (
    GAS_COIN,
    Argument,
    TransactionBlock,
    select_gas_payment,
)
from tests.unittests.fakes import SUI_COIN, FakeChain, decode_transaction_data


@pytest.fixture
def owner():
    return generate_account()[1]


@pytest.fixture
def funded_chain(owner):
    chain = FakeChain()
    chain.coins = [chain.create(owner, SUI_COIN, balance) for balance in (300, 500, 700)]
    return chain


class TestTransactionBlock:
    def test_pure_infers_types(self):
        tx = TransactionBlock()
        tx.pure(5)
        tx.pure("0x2")
        tx.pure(b"raw")
        assert [value.value for value in tx.inputs] == [
            b"\x05" + b"\x00" * 7,
            b"\x00" * 31 + b"\x02",
            b"raw",
        ]

    def test_pure_rejects_values_it_cannot_encode(self):
        with pytest.raises(TypeError):
            TransactionBlock().pure(1.5)
        with pytest.raises(ValueError):
            TransactionBlock().pure(1, "u128")

    def test_object_inputs_are_deduplicated(self):
        tx = TransactionBlock()
        first = tx.object("0x5")
        second = tx.object("0x" + "0" * 63 + "5")
        assert first == second == Argument("Input", 0)
        assert len(tx.inputs) == 1

    def test_split_coins_returns_one_result_per_amount(self):
        tx = TransactionBlock()
        coins = tx.split_coins(GAS_COIN, [1, 2, 3])
        assert coins == [Argument("NestedResult", 0, i) for i in range(3)]
        assert len(tx.inputs) == 3

    @pytest.mark.parametrize("budget", [0, -5, 1.5, None])
    def test_gas_budget_must_be_a_positive_integer(self, budget):
        with pytest.raises(ValueError):
            TransactionBlock().set_gas_budget(budget)

    def test_build_without_gas_budget_raises(self, funded_chain, owner):
        tx = TransactionBlock()
        tx.set_sender(owner)
        tx.transfer_objects(tx.split_coins(GAS_COIN, [1]), owner)
        with pytest.raises(GasBudgetMissing):
            tx.build(funded_chain)
        assert funded_chain.calls == []

    def test_frozen_block_cannot_be_modified(self):
        tx = TransactionBlock()
        tx.freeze()
        with pytest.raises(TransactionBlockFrozen):
            tx.set_gas_budget(10)
        with pytest.raises(TransactionBlockFrozen):
            tx.pure(1)

    def test_build_encodes_the_transaction_data(self, funded_chain, owner):
        recipient = generate_account()[1]
        tx = TransactionBlock()
        tx.set_sender(owner)
        tx.set_gas_budget(600)
        [coin] = tx.split_coins(tx.object(funded_chain.coins[0]), [tx.pure(100, "u64")])
        tx.transfer_objects([coin], recipient)

        decoded = decode_transaction_data(tx.build(funded_chain))

        assert decoded["sender"] == owner
        assert decoded["gas_owner"] == owner
        assert decoded["gas_budget"] == 600
        assert decoded["gas_price"] == FakeChain.GAS_PRICE
        assert [list(command) for command in decoded["commands"]] == [
            ["SplitCoins"],
            ["TransferObjects"],
        ]
        assert decoded["inputs"][0]["Object"][0] == funded_chain.coins[0]
        assert decoded["inputs"][2]["Pure"].hex() == recipient[2:]
        # The input coin never pays for gas.
        assert [ref[0] for ref in decoded["gas_payment"]] == [funded_chain.coins[1],
                                                               funded_chain.coins[2]]

    def test_publish_returns_the_upgrade_cap(self):
        tx = TransactionBlock()
        cap = tx.publish([b"\x01\x02"], ["0x1", "0x2"])
        assert cap == Argument("Result", 0)
        assert tx.commands[0].dependencies == ("0x" + "0" * 63 + "1", "0x" + "0" * 63 + "2")


class TestSelectGasPayment:
    def test_takes_coins_until_the_budget_is_covered(self, funded_chain, owner):
        payment = select_gas_payment(funded_chain, owner, 700, exclude=set())
        assert [ref.object_id for ref in payment] == funded_chain.coins[:2]

    def test_raises_if_the_balance_is_too_low(self, funded_chain, owner):
        with pytest.raises(InsufficientGas):
            select_gas_payment(funded_chain, owner, 1_000, exclude={funded_chain.coins[2]})
