from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

import structlog

from sui_harness.constants import MAX_GAS_OBJECTS, SUI_TYPE_ARG
from sui_harness.exceptions import GasBudgetMissing, InsufficientGas, TransactionBlockFrozen
from sui_harness.transactions.bcs import BcsSerializer, encode_address, encode_u64
from sui_harness.utils.addresses import is_valid_sui_address, normalize_sui_object_id

log = structlog.get_logger(__name__)

# Enum variant tags of the BCS encoded transaction data.
TRANSACTION_DATA_V1 = 0
PROGRAMMABLE_TRANSACTION = 0
CALL_ARG_PURE = 0
CALL_ARG_OBJECT = 1
OBJECT_ARG_IMM_OR_OWNED = 0
COMMAND_TRANSFER_OBJECTS = 1
COMMAND_SPLIT_COINS = 2
COMMAND_PUBLISH = 4
EXPIRATION_NONE = 0

ARGUMENT_TAGS = {"GasCoin": 0, "Input": 1, "Result": 2, "NestedResult": 3}


@dataclass(frozen=True)
class ObjectRef:
    object_id: str
    version: int
    digest: str

    @classmethod
    def from_coin(cls, coin: dict) -> "ObjectRef":
        return cls(
            normalize_sui_object_id(coin["coinObjectId"]), int(coin["version"]), coin["digest"]
        )

    @classmethod
    def from_object(cls, data: dict) -> "ObjectRef":
        return cls(normalize_sui_object_id(data["objectId"]), int(data["version"]), data["digest"])

    def encode(self, serializer: BcsSerializer) -> None:
        serializer.object_ref(self.object_id, self.version, self.digest)


@dataclass(frozen=True)
class Argument:
    kind: str
    index: int = 0
    result_index: int = 0

    def encode(self, serializer: BcsSerializer) -> None:
        serializer.u8(ARGUMENT_TAGS[self.kind])
        if self.kind in ("Input", "Result", "NestedResult"):
            serializer.u16(self.index)
        if self.kind == "NestedResult":
            serializer.u16(self.result_index)


GAS_COIN = Argument("GasCoin")


@dataclass(frozen=True)
class PureInput:
    value: bytes

    def encode(self, serializer: BcsSerializer, object_refs: Dict[str, ObjectRef]) -> None:
        serializer.u8(CALL_ARG_PURE).byte_vector(self.value)


@dataclass(frozen=True)
class ObjectInput:
    object_id: str

    def encode(self, serializer: BcsSerializer, object_refs: Dict[str, ObjectRef]) -> None:
        serializer.u8(CALL_ARG_OBJECT).u8(OBJECT_ARG_IMM_OR_OWNED)
        object_refs[self.object_id].encode(serializer)


@dataclass(frozen=True)
class Publish:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[str, ...]

    def encode(self, serializer: BcsSerializer) -> None:
        serializer.u8(COMMAND_PUBLISH)
        serializer.sequence(self.modules, BcsSerializer.byte_vector)
        serializer.sequence(self.dependencies, BcsSerializer.address)


@dataclass(frozen=True)
class SplitCoins:
    coin: Argument
    amounts: Tuple[Argument, ...]

    def encode(self, serializer: BcsSerializer) -> None:
        serializer.u8(COMMAND_SPLIT_COINS)
        self.coin.encode(serializer)
        serializer.sequence(self.amounts, lambda s, amount: amount.encode(s))


@dataclass(frozen=True)
class TransferObjects:
    objects: Tuple[Argument, ...]
    address: Argument

    def encode(self, serializer: BcsSerializer) -> None:
        serializer.u8(COMMAND_TRANSFER_OBJECTS)
        serializer.sequence(self.objects, lambda s, obj: obj.encode(s))
        self.address.encode(serializer)


Command = Union[Publish, SplitCoins, TransferObjects]


def iter_coins(provider, owner: str, coin_type: str = SUI_TYPE_ARG) -> Iterable[dict]:
    cursor = None
    while True:
        page = provider.get_coins(owner=owner, coin_type=coin_type, cursor=cursor)
        yield from page["data"]
        if not page.get("hasNextPage"):
            return
        cursor = page["nextCursor"]


def select_gas_payment(provider, owner: str, budget: int, exclude: Set[str]) -> List[ObjectRef]:
    """Pick SUI coins of `owner` until their balance covers `budget`.

    Coins in `exclude` are used as transaction inputs and must not pay for gas.
    """
    payment: List[ObjectRef] = []
    total = 0
    for coin in iter_coins(provider, owner):
        if normalize_sui_object_id(coin["coinObjectId"]) in exclude:
            continue
        payment.append(ObjectRef.from_coin(coin))
        total += int(coin["balance"])
        if total >= budget or len(payment) == MAX_GAS_OBJECTS:
            break

    if total < budget:
        raise InsufficientGas(
            f"{owner} owns {total} usable MIST in {len(payment)} coins, gas budget is {budget}"
        )
    return payment


class TransactionBlock:
    """An ordered batch of commands, submitted atomically.

    The block is mutable until it is built for submission. Afterwards every
    mutating method raises :exc:`TransactionBlockFrozen`.
    """

    def __init__(self) -> None:
        self.inputs: List[Union[PureInput, ObjectInput]] = []
        self.commands: List[Command] = []
        self.sender: Optional[str] = None
        self.gas_budget: Optional[int] = None
        self.gas_price: Optional[int] = None
        self.gas_payment: Optional[List[ObjectRef]] = None
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _assert_mutable(self) -> None:
        if self._frozen:
            raise TransactionBlockFrozen("Transaction block was already submitted")

    def set_sender(self, sender: str) -> None:
        self._assert_mutable()
        self.sender = normalize_sui_object_id(sender)

    def set_sender_if_not_set(self, sender: str) -> None:
        if self.sender is None:
            self.set_sender(sender)

    def set_gas_budget(self, budget: int) -> None:
        self._assert_mutable()
        if not isinstance(budget, int) or budget <= 0:
            raise ValueError(f"Gas budget must be a positive integer, not {budget!r}")
        self.gas_budget = budget

    def set_gas_price(self, price: int) -> None:
        self._assert_mutable()
        self.gas_price = price

    def set_gas_payment(self, payment: Sequence[ObjectRef]) -> None:
        self._assert_mutable()
        self.gas_payment = list(payment)

    def _add_input(self, value: Union[PureInput, ObjectInput]) -> Argument:
        self._assert_mutable()
        # Object inputs may only be referenced once per block.
        if isinstance(value, ObjectInput) and value in self.inputs:
            return Argument("Input", self.inputs.index(value))
        self.inputs.append(value)
        return Argument("Input", len(self.inputs) - 1)

    def _add_command(self, command: Command) -> int:
        self._assert_mutable()
        self.commands.append(command)
        return len(self.commands) - 1

    def pure(self, value: Union[int, str, bytes], type_: Optional[str] = None) -> Argument:
        """Add a pure input.

        `type_` is one of ``u64``, ``address`` or ``bytes``. If omitted, ints are
        encoded as ``u64`` and hex strings as ``address``.
        """
        if type_ is None:
            if isinstance(value, int) and not isinstance(value, bool):
                type_ = "u64"
            elif isinstance(value, str) and is_valid_sui_address(value):
                type_ = "address"
            elif isinstance(value, bytes):
                type_ = "bytes"
            else:
                raise TypeError(f"Cannot infer the pure type of {value!r}")

        if type_ == "u64":
            encoded = encode_u64(value)
        elif type_ == "address":
            encoded = encode_address(value)
        elif type_ == "bytes":
            encoded = bytes(value)
        else:
            raise ValueError(f"Unsupported pure type: {type_}")
        return self._add_input(PureInput(encoded))

    def object(self, object_id: str) -> Argument:
        return self._add_input(ObjectInput(normalize_sui_object_id(object_id)))

    def publish(self, modules: Sequence[bytes], dependencies: Sequence[str]) -> Argument:
        """Publish a package. The returned argument is the package's upgrade capability."""
        index = self._add_command(
            Publish(
                modules=tuple(bytes(module) for module in modules),
                dependencies=tuple(normalize_sui_object_id(dep) for dep in dependencies),
            )
        )
        return Argument("Result", index)

    def split_coins(
        self, coin: Argument, amounts: Sequence[Union[Argument, int]]
    ) -> List[Argument]:
        """Split one new coin per amount off `coin`; returns the new coins in order."""
        amount_args = tuple(
            amount if isinstance(amount, Argument) else self.pure(amount, "u64")
            for amount in amounts
        )
        index = self._add_command(SplitCoins(coin=coin, amounts=amount_args))
        return [Argument("NestedResult", index, i) for i in range(len(amount_args))]

    def transfer_objects(
        self, objects: Sequence[Argument], address: Union[Argument, str]
    ) -> None:
        if not isinstance(address, Argument):
            address = self.pure(address, "address")
        self._add_command(TransferObjects(objects=tuple(objects), address=address))

    def object_ids(self) -> Set[str]:
        return {value.object_id for value in self.inputs if isinstance(value, ObjectInput)}

    def build(self, provider) -> bytes:
        """Resolve inputs and gas against `provider` and return the BCS encoded transaction data.

        :raises GasBudgetMissing: if no gas budget was set.
        :raises InsufficientGas: if no coins are left to pay for gas.
        """
        if self.gas_budget is None:
            raise GasBudgetMissing("A gas budget must be set before the block is submitted")
        if self.sender is None:
            raise ValueError("The transaction block has no sender")

        object_refs = {
            object_id: ObjectRef.from_object(provider.get_object(object_id))
            for object_id in self.object_ids()
        }
        gas_price = self.gas_price
        if gas_price is None:
            gas_price = provider.get_reference_gas_price()
        payment = self.gas_payment
        if payment is None:
            payment = select_gas_payment(
                provider, self.sender, self.gas_budget, exclude=set(object_refs)
            )

        log.debug(
            "Building transaction block",
            sender=self.sender,
            commands=[type(command).__name__ for command in self.commands],
            gas_budget=self.gas_budget,
            gas_price=gas_price,
            gas_objects=[ref.object_id for ref in payment],
        )

        serializer = BcsSerializer()
        serializer.u8(TRANSACTION_DATA_V1)
        serializer.u8(PROGRAMMABLE_TRANSACTION)
        serializer.sequence(self.inputs, lambda s, value: value.encode(s, object_refs))
        serializer.sequence(self.commands, lambda s, command: command.encode(s))
        serializer.address(self.sender)
        # GasData
        serializer.sequence(payment, lambda s, ref: ref.encode(s))
        serializer.address(self.sender)
        serializer.u64(int(gas_price))
        serializer.u64(self.gas_budget)
        serializer.u8(EXPIRATION_NONE)
        return serializer.output()

    def __repr__(self):
        commands = ", ".join(type(command).__name__ for command in self.commands)
        return f"<TransactionBlock [{commands}] gas_budget={self.gas_budget}>"
