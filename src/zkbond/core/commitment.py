"""Note record, commitment and nullifier (shielded bond core)."""

import secrets
from dataclasses import dataclass
from typing import Tuple

from zkbond.crypto.keys import ShieldedKeyHierarchy
from zkbond.utils.field import check_field_element, check_u64
from zkbond.utils.hash import poseidon_hash

DEFAULT_ASSET_ID = 1


@dataclass(frozen=True)
class Note:
    """
    One unit of shielded value.

    Field order matches the commitment preimage and must not change:
    (value, salt, owner_public, asset_id, maturity_date).
    """

    value: int
    salt: int
    owner_public: int
    asset_id: int
    maturity_date: int  # unix timestamp

    def __post_init__(self):
        check_u64(self.value, "value")
        check_u64(self.salt, "salt")
        check_field_element(self.owner_public, "owner_public")
        check_u64(self.asset_id, "asset_id")
        check_u64(self.maturity_date, "maturity_date")

    @staticmethod
    def generate_salt() -> int:
        """
        Draw a full 64-bit random salt.

        Returns:
            int: Salt from the ``secrets`` CSPRNG
        """
        return secrets.randbits(64)

    @classmethod
    def create(
        cls,
        value: int,
        owner_public: int,
        maturity_date: int,
        asset_id: int = DEFAULT_ASSET_ID,
    ) -> "Note":
        """Create a new note with a fresh salt."""
        return cls(
            value=value,
            salt=cls.generate_salt(),
            owner_public=owner_public,
            asset_id=asset_id,
            maturity_date=maturity_date,
        )

    @classmethod
    def dummy(
        cls,
        owner_public: int,
        maturity_date: int,
        asset_id: int = DEFAULT_ASSET_ID,
    ) -> "Note":
        """Zero-value, zero-salt note padding a JoinSplit to two inputs."""
        return cls(
            value=0,
            salt=0,
            owner_public=owner_public,
            asset_id=asset_id,
            maturity_date=maturity_date,
        )

    @property
    def is_dummy(self) -> bool:
        return self.value == 0 and self.salt == 0

    def fields(self) -> Tuple[int, int, int, int, int]:
        """Commitment preimage in protocol order."""
        return (self.value, self.salt, self.owner_public, self.asset_id, self.maturity_date)

    def commitment(self) -> int:
        return NoteCommitmentScheme.commitment(self)

    def nullifier(self, spending_secret: int) -> int:
        return NoteCommitmentScheme.nullifier(self.salt, spending_secret)


class NoteCommitmentScheme:
    """
    Commitment and nullifier hash functions over notes.

    cm = Poseidon(value, salt, owner_public, asset_id, maturity_date)
    nf = Poseidon(salt, spending_secret)
    """

    @staticmethod
    def commitment(note: Note) -> int:
        """
        Compute the note commitment.

        Args:
            note: Note to commit to

        Returns:
            int: Commitment field element
        """
        return poseidon_hash(list(note.fields()))

    @staticmethod
    def nullifier(salt: int, spending_secret: int) -> int:
        """
        Nullifier of a note with ``salt`` under ``spending_secret``.

        Independent of value, asset and maturity: salt uniqueness is what keeps
        two notes of one owner from sharing a nullifier.
        """
        return ShieldedKeyHierarchy.sign_nullifier(spending_secret, salt)

    @staticmethod
    def verify_commitment(note: Note, expected_commitment: int) -> bool:
        """Return True if ``note`` commits to ``expected_commitment``."""
        return NoteCommitmentScheme.commitment(note) == expected_commitment
