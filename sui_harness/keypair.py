"""Account provisioning: Ed25519 keypairs and the Sui addresses derived from them."""
import base64
import hashlib
from typing import List, Tuple

from eth_utils import encode_hex
from nacl.signing import SigningKey

from sui_harness.constants import ED25519_FLAG, SUI_ADDRESS_LENGTH, TRANSACTION_DATA_INTENT


def blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


class Ed25519PublicKey:
    def __init__(self, raw: bytes) -> None:
        if len(raw) != 32:
            raise ValueError(f"Ed25519 public keys are 32 bytes long, got {len(raw)}")
        self._raw = bytes(raw)

    def to_bytes(self) -> bytes:
        return self._raw

    def to_base64(self) -> str:
        return base64.b64encode(self._raw).decode("ascii")

    def to_sui_address(self) -> str:
        """``0x`` + hex of ``blake2b-256(flag || public key)``."""
        digest = blake2b_256(bytes([ED25519_FLAG]) + self._raw)
        return encode_hex(digest[:SUI_ADDRESS_LENGTH])

    def __eq__(self, other):
        return isinstance(other, Ed25519PublicKey) and other._raw == self._raw

    def __hash__(self):
        return hash(self._raw)

    def __repr__(self):
        return f"<Ed25519PublicKey {self.to_base64()}>"


class Ed25519Keypair:
    """An Ed25519 signing key together with its public key.

    The private key never leaves this object and is never written to disk.
    """

    def __init__(self, signing_key: SigningKey) -> None:
        self._signing_key = signing_key
        self._public_key = Ed25519PublicKey(bytes(signing_key.verify_key))

    @classmethod
    def generate(cls) -> "Ed25519Keypair":
        return cls(SigningKey.generate())

    @classmethod
    def from_secret_key(cls, seed: bytes) -> "Ed25519Keypair":
        if len(seed) != 32:
            raise ValueError(f"Ed25519 secret keys are 32 bytes long, got {len(seed)}")
        return cls(SigningKey(seed))

    def get_public_key(self) -> Ed25519PublicKey:
        return self._public_key

    def to_sui_address(self) -> str:
        return self._public_key.to_sui_address()

    def sign(self, message: bytes) -> bytes:
        return self._signing_key.sign(message).signature

    def sign_transaction_data(self, tx_bytes: bytes) -> str:
        """Sign BCS encoded transaction data.

        The intent message ``intent || tx_bytes`` is hashed with blake2b-256 and the
        digest is signed. Returns ``base64(flag || signature || public key)``, the
        serialized signature format expected by the fullnode.
        """
        digest = blake2b_256(TRANSACTION_DATA_INTENT + tx_bytes)
        signature = self.sign(digest)
        serialized = bytes([ED25519_FLAG]) + signature + self._public_key.to_bytes()
        return base64.b64encode(serialized).decode("ascii")

    def __repr__(self):
        return f"<Ed25519Keypair {self.to_sui_address()}>"


def generate_account() -> Tuple[Ed25519Keypair, str]:
    """Create a fresh keypair and its address. Funding and tracking is up to the caller."""
    keypair = Ed25519Keypair.generate()
    return keypair, keypair.to_sui_address()


def generate_addresses(n: int) -> List[str]:
    """Return `n` addresses of freshly generated, immediately discarded keypairs."""
    if n < 0:
        raise ValueError(f"Cannot generate a negative number of addresses: {n}")
    return [generate_account()[1] for _ in range(n)]
