"""Shielded pool: the single owner of a commitment tree handle.

Appending a commitment and the rebuild-then-prove sequence of a JoinSplit
share one lock, so no proof can be taken against a root that another
caller has already moved.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Sequence

from zkbond.core.commitment import DEFAULT_ASSET_ID, Note, NoteCommitmentScheme
from zkbond.core.joinsplit import JoinSplitWitness, JoinSplitWitnessBuilder
from zkbond.core.merkle_tree import MerkleCommitmentTree
from zkbond.crypto.keys import ShieldedKeyPair
from zkbond.exceptions import CommitmentNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolState:
    """Snapshot of the pool's tree."""

    merkle_root: Optional[int]
    tree_height: int
    num_commitments: int


class ShieldedPool:
    """
    Coordinator owning one commitment tree.

    Every public method runs as one critical section over the tree.
    """

    def __init__(self, tree: Optional[MerkleCommitmentTree] = None):
        self.tree = tree if tree is not None else MerkleCommitmentTree()
        self._lock = threading.RLock()

    def register(self, note: Note) -> int:
        """
        Append a note's commitment and rebuild.

        Returns:
            int: Leaf index of the new commitment
        """
        commitment = NoteCommitmentScheme.commitment(note)
        with self._lock:
            index = self.tree.add_commitment(commitment)
            self.tree.build()
        logger.debug(f"Registered commitment {commitment:#x} at index {index}")
        return index

    def contains(self, note: Note) -> bool:
        commitment = NoteCommitmentScheme.commitment(note)
        with self._lock:
            try:
                self.tree.index_of(commitment)
            except CommitmentNotFoundError:
                return False
            return True

    def ensure_dummy(
        self,
        owner_public: int,
        maturity_date: int,
        asset_id: int = DEFAULT_ASSET_ID,
    ) -> Note:
        """Register the owner's zero-value note if it is not in the tree yet."""
        dummy = Note.dummy(owner_public, maturity_date, asset_id=asset_id)
        with self._lock:
            if not self.contains(dummy):
                self.register(dummy)
        return dummy

    def join_split(
        self,
        spender: ShieldedKeyPair,
        real_input: Note,
        outputs: Sequence[Note],
        dummy_input: Optional[Note] = None,
    ) -> JoinSplitWitness:
        """
        Build a JoinSplit witness while holding the tree lock.

        When ``dummy_input`` is omitted, the spender's dummy note for the real
        input's asset and maturity is registered (if needed) and used.
        """
        with self._lock:
            if dummy_input is None:
                dummy_input = self.ensure_dummy(
                    spender.spending_public,
                    real_input.maturity_date,
                    asset_id=real_input.asset_id,
                )
            builder = JoinSplitWitnessBuilder(self.tree)
            return builder.build(spender, real_input, dummy_input, outputs)

    def snapshot(self) -> PoolState:
        """Return current tree state for verification."""
        with self._lock:
            root = self.tree.root() if len(self.tree) and not self.tree.is_stale else None
            return PoolState(
                merkle_root=root,
                tree_height=self.tree.height,
                num_commitments=len(self.tree),
            )
