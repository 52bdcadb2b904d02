"""Zero-coupon bond lifecycle rules over shielded notes.

A bond note trades only strictly before its maturity date and is redeemed
(burned) at or after it.
"""

import time
from dataclasses import dataclass
from typing import List, Optional

from zkbond.core.commitment import Note
from zkbond.core.joinsplit import JoinSplitWitness
from zkbond.exceptions import DuplicateNullifierError, MaturityError
from zkbond.utils.encoding import fields_to_bytes32, u64_to_bytes32

SECONDS_PER_DAY = 86400


def _now(now: Optional[int]) -> int:
    return int(time.time()) if now is None else now


def is_matured(note: Note, now: Optional[int] = None) -> bool:
    return _now(now) >= note.maturity_date


def days_until_maturity(note: Note, now: Optional[int] = None) -> int:
    """Whole days left before maturity, 0 once matured."""
    remaining = note.maturity_date - _now(now)
    return max(remaining, 0) // SECONDS_PER_DAY


def check_tradable(note: Note, now: Optional[int] = None) -> None:
    """
    Ensure a bond can still change hands.

    Raises:
        MaturityError: If the bond is at or past maturity
    """
    if is_matured(note, now):
        raise MaturityError(f"Bond matured at {note.maturity_date}; cannot trade")


def check_redeemable(note: Note, now: Optional[int] = None) -> None:
    """
    Ensure a bond can be burned for settlement.

    Raises:
        MaturityError: If the bond has not matured yet
    """
    if not is_matured(note, now):
        raise MaturityError(
            f"Cannot redeem: {days_until_maturity(note, now)} days until maturity"
        )


def check_trade_pair(nullifier_a: int, nullifier_b: int) -> None:
    """Two bonds swapped atomically must not share a nullifier."""
    if nullifier_a == nullifier_b:
        raise DuplicateNullifierError("Cannot trade: identical nullifiers")


@dataclass(frozen=True)
class RedemptionInputs:
    """Public inputs of a burn (redeem) call."""

    root: int
    nullifier: int
    new_commitment: int
    input_maturity_date: int
    is_redeem: bool = True

    @classmethod
    def from_witness(
        cls, witness: JoinSplitWitness, now: Optional[int] = None
    ) -> "RedemptionInputs":
        """Burn inputs for the witness's real input, which must have matured."""
        spent = witness.input1
        check_redeemable(spent.note, now)
        return cls(
            root=witness.merkle_root,
            nullifier=spent.nullifier,
            new_commitment=witness.output1.commitment,
            input_maturity_date=spent.note.maturity_date,
        )

    def to_bytes32(self) -> List[bytes]:
        """Order: root, nullifier, new_commitment, input_maturity_date, is_redeem."""
        return fields_to_bytes32([self.root, self.nullifier, self.new_commitment]) + [
            u64_to_bytes32(self.input_maturity_date),
            u64_to_bytes32(int(self.is_redeem)),
        ]
