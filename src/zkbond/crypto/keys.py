"""Shielded key hierarchy: spending keys, viewing keys and nullifier signing.

Every key of an identity is a pure function of one 32-byte seed:

    spending_secret = Keccak256(seed || "zkbond/spending_key") mod p
    spending_public = Poseidon(spending_secret)
    viewing_secret  = Keccak256(seed || "zkbond/viewing_key")   (X25519 scalar)
    viewing_public  = X25519(viewing_secret, basepoint)

The spending pair lives in the circuit's field and authorizes nullifiers.
The viewing pair is a Curve25519 key-agreement pair used to derive a shared
secret with a counterparty; the distinct domain tags keep the two
independent even though they share a root seed.
"""

import logging
import os
from dataclasses import dataclass, field

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)

from zkbond.exceptions import KeyFormatError
from zkbond.utils.field import bytes_to_field, check_field_element, check_u64
from zkbond.utils.hash import keccak256, poseidon_hash

logger = logging.getLogger(__name__)

SEED_SIZE = 32  # bytes
VIEWING_KEY_SIZE = 32  # bytes
SHARED_SECRET_SIZE = 32  # bytes

SPENDING_KEY_DOMAIN = b"zkbond/spending_key"
VIEWING_KEY_DOMAIN = b"zkbond/viewing_key"


@dataclass(frozen=True)
class ShieldedKeyPair:
    """Spending and viewing keys of one identity, derived from its seed."""

    seed: bytes = field(repr=False)
    spending_secret: int = field(repr=False)
    spending_public: int
    viewing_secret: bytes = field(repr=False)
    viewing_public: bytes

    def sign_nullifier(self, salt: int) -> int:
        """Nullifier of the note with ``salt`` under this identity's spending key."""
        return ShieldedKeyHierarchy.sign_nullifier(self.spending_secret, salt)

    def agree(self, counterparty_viewing_public: bytes) -> bytes:
        """Shared secret with a counterparty's viewing public key."""
        return ShieldedKeyHierarchy.agree(self.viewing_secret, counterparty_viewing_public)


class ShieldedKeyHierarchy:
    """
    Derivation of shielded key pairs from seed material.

    All operations are stateless; ``from_seed`` is deterministic so a wallet
    can always be recovered from its seed alone.
    """

    @staticmethod
    def generate_seed() -> bytes:
        """
        Generate fresh seed material.

        Returns:
            bytes: 32 bytes from the OS CSPRNG
        """
        return os.urandom(SEED_SIZE)

    @staticmethod
    def generate() -> ShieldedKeyPair:
        """Derive a key pair from a freshly drawn seed."""
        return ShieldedKeyHierarchy.from_seed(ShieldedKeyHierarchy.generate_seed())

    @staticmethod
    def from_seed(seed: bytes) -> ShieldedKeyPair:
        """
        Derive the full key pair of an identity.

        Args:
            seed: 32-byte seed material

        Returns:
            ShieldedKeyPair: Deterministic spending and viewing keys

        Raises:
            KeyFormatError: If seed is not 32 bytes
        """
        if not isinstance(seed, (bytes, bytearray)) or len(seed) != SEED_SIZE:
            raise KeyFormatError(f"Seed must be {SEED_SIZE} bytes")
        seed = bytes(seed)

        spending_secret = ShieldedKeyHierarchy.derive_spending_secret(seed)
        spending_public = poseidon_hash([spending_secret])

        viewing_key = ShieldedKeyHierarchy._derive_viewing_key(seed)
        viewing_secret = viewing_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        viewing_public = viewing_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

        logger.debug(f"Derived shielded keys for owner {spending_public:#x}")
        return ShieldedKeyPair(
            seed=seed,
            spending_secret=spending_secret,
            spending_public=spending_public,
            viewing_secret=viewing_secret,
            viewing_public=viewing_public,
        )

    @staticmethod
    def derive_spending_secret(seed: bytes) -> int:
        """Domain-separated Keccak-256 of the seed, reduced into the field."""
        return bytes_to_field(keccak256(seed, SPENDING_KEY_DOMAIN))

    @staticmethod
    def _derive_viewing_key(seed: bytes) -> X25519PrivateKey:
        return X25519PrivateKey.from_private_bytes(keccak256(seed, VIEWING_KEY_DOMAIN))

    @staticmethod
    def sign_nullifier(spending_secret: int, salt: int) -> int:
        """
        Compute nullifier nf = Poseidon(salt, spending_secret).

        The nullifier depends only on the salt and the spender's secret, so
        the same note always yields the same nullifier.

        Args:
            spending_secret: Owner's spending secret (field element)
            salt: Note salt (u64)

        Returns:
            int: Nullifier field element
        """
        check_u64(salt, "salt")
        check_field_element(spending_secret, "spending_secret")
        return poseidon_hash([salt, spending_secret])

    @staticmethod
    def load_viewing_public(raw: bytes) -> X25519PublicKey:
        """
        Parse a counterparty's raw viewing public key.

        Raises:
            KeyFormatError: If the bytes are not a 32-byte X25519 public key
        """
        if not isinstance(raw, (bytes, bytearray)) or len(raw) != VIEWING_KEY_SIZE:
            raise KeyFormatError(f"Viewing public key must be {VIEWING_KEY_SIZE} bytes")
        try:
            return X25519PublicKey.from_public_bytes(bytes(raw))
        except ValueError as e:
            raise KeyFormatError(f"Invalid viewing public key: {e}") from e

    @staticmethod
    def agree(viewing_secret: bytes, counterparty_viewing_public: bytes) -> bytes:
        """
        X25519 Diffie-Hellman between our viewing secret and a peer's public key.

        Symmetric: agree(a.secret, b.public) == agree(b.secret, a.public).

        Args:
            viewing_secret: Our 32-byte X25519 private scalar
            counterparty_viewing_public: Peer's 32-byte public key

        Returns:
            bytes: 32-byte shared secret

        Raises:
            KeyFormatError: If either key is malformed or the peer key is a
                low-order point
        """
        if (
            not isinstance(viewing_secret, (bytes, bytearray))
            or len(viewing_secret) != VIEWING_KEY_SIZE
        ):
            raise KeyFormatError(f"Viewing secret must be {VIEWING_KEY_SIZE} bytes")
        peer = ShieldedKeyHierarchy.load_viewing_public(counterparty_viewing_public)
        private_key = X25519PrivateKey.from_private_bytes(bytes(viewing_secret))
        try:
            return private_key.exchange(peer)
        except ValueError as e:
            raise KeyFormatError(f"Key agreement rejected peer key: {e}") from e
