import re

from eth_utils import is_hex, remove_0x_prefix

from sui_harness.constants import SUI_ADDRESS_LENGTH

_HEX_LENGTH = SUI_ADDRESS_LENGTH * 2
_ZERO_PADDING = re.compile(r"^(0x)0+")


def is_valid_sui_address(value) -> bool:
    """Whether `value` is a hex string of at most 32 bytes, with or without `0x` prefix."""
    if not isinstance(value, str):
        return False
    digits = remove_0x_prefix(value)
    return 0 < len(digits) <= _HEX_LENGTH and is_hex(value)


def normalize_sui_address(value: str) -> str:
    """Return `value` as `0x` followed by exactly 64 lowercase hex characters.

    :raises ValueError: if `value` is not a valid address.
    """
    if not is_valid_sui_address(value):
        raise ValueError(f"Invalid Sui address: {value!r}")
    return "0x" + remove_0x_prefix(value).lower().rjust(_HEX_LENGTH, "0")


# Object IDs share the address format.
normalize_sui_object_id = normalize_sui_address


def strip_zero_padding(object_id: str) -> str:
    """Drop leading zeros after the `0x` prefix, e.g. ``0x0000abc`` -> ``0xabc``.

    An all-zero id yields a bare ``0x``.
    """
    return _ZERO_PADDING.sub(r"\1", object_id.lower())
