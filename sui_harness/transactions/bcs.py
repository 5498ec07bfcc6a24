"""Binary Canonical Serialization for the subset of Sui types the harness submits."""
import struct
from typing import Callable, Iterable, TypeVar

import base58
from eth_utils import decode_hex

from sui_harness.utils.addresses import normalize_sui_address

T = TypeVar("T")

U8_MAX = 2 ** 8 - 1
U16_MAX = 2 ** 16 - 1
U64_MAX = 2 ** 64 - 1


class BcsSerializer:
    def __init__(self) -> None:
        self._buffer = bytearray()

    def output(self) -> bytes:
        return bytes(self._buffer)

    def _check_range(self, value: int, maximum: int, kind: str) -> None:
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= maximum:
            raise ValueError(f"{value!r} is not a valid {kind}")

    def u8(self, value: int) -> "BcsSerializer":
        self._check_range(value, U8_MAX, "u8")
        self._buffer.append(value)
        return self

    def u16(self, value: int) -> "BcsSerializer":
        self._check_range(value, U16_MAX, "u16")
        self._buffer += struct.pack("<H", value)
        return self

    def u64(self, value: int) -> "BcsSerializer":
        self._check_range(value, U64_MAX, "u64")
        self._buffer += struct.pack("<Q", value)
        return self

    def uleb128(self, value: int) -> "BcsSerializer":
        if value < 0:
            raise ValueError(f"{value!r} cannot be ULEB128 encoded")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self._buffer.append(byte | 0x80)
            else:
                self._buffer.append(byte)
                return self

    def fixed_bytes(self, value: bytes) -> "BcsSerializer":
        self._buffer += value
        return self

    def byte_vector(self, value: bytes) -> "BcsSerializer":
        """Length prefixed byte vector."""
        self.uleb128(len(value))
        return self.fixed_bytes(value)

    def address(self, value: str) -> "BcsSerializer":
        return self.fixed_bytes(decode_hex(normalize_sui_address(value)))

    def sequence(self, items: Iterable[T], encode: Callable[["BcsSerializer", T], None]):
        items = list(items)
        self.uleb128(len(items))
        for item in items:
            encode(self, item)
        return self

    def object_ref(self, object_id: str, version: int, digest: str) -> "BcsSerializer":
        """(ObjectID, SequenceNumber, ObjectDigest); the digest comes base58 encoded."""
        self.address(object_id)
        self.u64(int(version))
        return self.byte_vector(base58.b58decode(digest))


def encode_u64(value: int) -> bytes:
    return BcsSerializer().u64(value).output()


def encode_address(value: str) -> bytes:
    return BcsSerializer().address(value).output()
