"""Pydantic records exchanged with the persistence collaborator."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from zkbond.core.commitment import Note, NoteCommitmentScheme
from zkbond.crypto.keys import SEED_SIZE, ShieldedKeyHierarchy, ShieldedKeyPair
from zkbond.exceptions import InvalidCommitmentError
from zkbond.utils.encoding import bytes_to_hex, hex_to_bytes
from zkbond.utils.field import U64_MAX, field_from_hex, field_to_hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WalletRecord(BaseModel):
    """Stored identity: the seed is the only key material persisted."""

    seed: str = Field(..., description="Seed material (hex)")
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("seed")
    @classmethod
    def _seed_is_32_bytes(cls, v: str) -> str:
        if len(hex_to_bytes(v)) != SEED_SIZE:
            raise ValueError(f"seed must encode {SEED_SIZE} bytes")
        return v

    @classmethod
    def from_keys(cls, keys: ShieldedKeyPair) -> "WalletRecord":
        return cls(seed=bytes_to_hex(keys.seed))

    def to_keys(self) -> ShieldedKeyPair:
        """Re-derive the full key pair from the stored seed."""
        return ShieldedKeyHierarchy.from_seed(hex_to_bytes(self.seed))


class BondRecord(BaseModel):
    """Stored bond note with its public commitment and (optional) nullifier."""

    model_config = ConfigDict(from_attributes=True)

    commitment: str = Field(..., description="Note commitment (hex)")
    nullifier: Optional[str] = Field(default=None, description="Owner's nullifier (hex)")
    value: int = Field(..., ge=0, le=U64_MAX)
    salt: int = Field(..., ge=0, le=U64_MAX)
    owner_public: str = Field(..., description="Owner spending public key (hex)")
    asset_id: int = Field(..., ge=0, le=U64_MAX)
    maturity_date: int = Field(..., ge=0, le=U64_MAX, description="Unix timestamp")
    created_at: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_note(cls, note: Note, keys: Optional[ShieldedKeyPair] = None) -> "BondRecord":
        """Record a note; the nullifier is included when the owner's keys are given."""
        nullifier = None
        if keys is not None:
            nullifier = field_to_hex(note.nullifier(keys.spending_secret))
        return cls(
            commitment=field_to_hex(note.commitment()),
            nullifier=nullifier,
            value=note.value,
            salt=note.salt,
            owner_public=field_to_hex(note.owner_public),
            asset_id=note.asset_id,
            maturity_date=note.maturity_date,
        )

    def to_note(self) -> Note:
        """
        Rebuild the note and check it against the stored commitment.

        Raises:
            InvalidCommitmentError: If the fields do not match the commitment
        """
        note = Note(
            value=self.value,
            salt=self.salt,
            owner_public=field_from_hex(self.owner_public),
            asset_id=self.asset_id,
            maturity_date=self.maturity_date,
        )
        if not NoteCommitmentScheme.verify_commitment(note, field_from_hex(self.commitment)):
            raise InvalidCommitmentError("Stored commitment does not match note fields")
        return note
