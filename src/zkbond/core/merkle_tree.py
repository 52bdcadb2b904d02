"""Merkle commitment tree over note commitments.

This implementation rebuilds the whole tree from the leaf list on every
``build()``:

    - Each leaf commitment is pre-hashed once: Poseidon(c)
    - Parents are Poseidon(left, right), level by level, bottom-up
    - A level with an odd count pairs its last node with itself
    - Height is ceil(log2(leaf_count)); a single leaf is its own root

A proof only verifies against the root produced by the exact leaf list it
was generated from, so proofs must be taken before the next append.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from zkbond.core.commitment import Note, NoteCommitmentScheme
from zkbond.exceptions import (
    CommitmentNotFoundError,
    EmptyTreeError,
    InvalidLeafIndexError,
    StaleTreeError,
)
from zkbond.utils.field import check_field_element, field_to_hex
from zkbond.utils.hash import hash_leaf, merkle_hash

logger = logging.getLogger(__name__)


class SiblingSide(Enum):
    """Side on which a sibling is combined with the running hash."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class ProofStep:
    """One level of an inclusion proof."""

    sibling: int
    side: SiblingSide


@dataclass(frozen=True)
class MerkleProof:
    """Inclusion proof: one step per level below the root, leaf first."""

    steps: Tuple[ProofStep, ...]

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def siblings(self) -> List[int]:
        return [step.sibling for step in self.steps]

    @property
    def sides(self) -> List[SiblingSide]:
        return [step.side for step in self.steps]

    def compute_root(self, commitment: int) -> int:
        """Fold the proof over ``hash_leaf(commitment)``."""
        current = hash_leaf(commitment)
        for step in self.steps:
            if step.side is SiblingSide.LEFT:
                current = merkle_hash(step.sibling, current)
            else:
                current = merkle_hash(current, step.sibling)
        return current


def verify_commitment(commitment: int, proof: MerkleProof, expected_root: int) -> bool:
    """
    Verify that ``commitment`` is a leaf under ``expected_root``.

    Malformed proofs (out-of-field siblings, unknown sides) fail verification
    rather than raising.
    """
    try:
        return proof.compute_root(commitment) == expected_root
    except (ValueError, TypeError, AttributeError):
        return False


def verify_proof(note: Note, proof: MerkleProof, expected_root: int) -> bool:
    """
    Verify an inclusion proof for a note.

    Recomputes hash_leaf(commitment(note)), folds the proof and compares the
    result with ``expected_root``.
    """
    return verify_commitment(NoteCommitmentScheme.commitment(note), proof, expected_root)


class MerkleCommitmentTree:
    """
    Append-only commitment tree with explicit rebuilds.

    ``add_commitment`` only extends the leaf list; ``build`` recomputes all
    levels. Root and proofs always refer to the most recent build.
    """

    def __init__(self, leaves: Optional[Iterable[int]] = None):
        """
        Initialize tree, optionally from an existing leaf sequence.

        Args:
            leaves: Commitments in insertion order (not built)
        """
        self.leaves: List[int] = []
        self._levels: List[List[int]] = []
        self._built_leaf_count = 0

        for commitment in leaves or ():
            self.add_commitment(commitment)

    def add_commitment(self, commitment: int) -> int:
        """
        Append a commitment leaf and return its index.

        The tree is not rebuilt; call ``build()`` before taking root or proofs.

        Raises:
            ValueError: If commitment is not a field element
        """
        check_field_element(commitment, "commitment")
        leaf_index = len(self.leaves)
        self.leaves.append(commitment)
        return leaf_index

    def build(self) -> "MerkleCommitmentTree":
        """
        Rebuild every level from the current leaf list.

        Returns:
            MerkleCommitmentTree: self, for chaining
        """
        if not self.leaves:
            self._levels = []
            self._built_leaf_count = 0
            return self

        current = [hash_leaf(c) for c in self.leaves]
        levels = [current]

        while len(current) > 1:
            next_level = []
            for i in range(0, len(current), 2):
                left = current[i]
                # Odd count: the last node is paired with itself
                right = current[i + 1] if i + 1 < len(current) else left
                next_level.append(merkle_hash(left, right))
            levels.append(next_level)
            current = next_level

        self._levels = levels
        self._built_leaf_count = len(self.leaves)
        logger.debug(
            f"Built commitment tree: {self._built_leaf_count} leaves, height {self.height}"
        )
        return self

    @property
    def height(self) -> int:
        """ceil(log2(leaf_count)) of the last build."""
        if self._built_leaf_count <= 1:
            return 0
        return math.ceil(math.log2(self._built_leaf_count))

    @property
    def is_stale(self) -> bool:
        """True if leaves were appended since the last build."""
        return self._built_leaf_count != len(self.leaves)

    def root(self) -> int:
        """
        Root of the last build.

        Raises:
            EmptyTreeError: If the tree has never been built with leaves
        """
        if not self._levels:
            raise EmptyTreeError("Commitment tree has no built leaves")
        return self._levels[-1][0]

    def index_of(self, commitment: int) -> int:
        """
        Position of ``commitment`` in the leaf list.

        Raises:
            CommitmentNotFoundError: If the commitment was never added
        """
        try:
            return self.leaves.index(commitment)
        except ValueError:
            raise CommitmentNotFoundError(commitment) from None

    def generate_proof(self, index: int) -> MerkleProof:
        """
        Inclusion proof for the leaf at ``index`` against the current root.

        Args:
            index: Leaf index

        Returns:
            MerkleProof: One step per level below the root

        Raises:
            StaleTreeError: If leaves were appended since the last build
            InvalidLeafIndexError: If index is outside the built leaves
        """
        if self.is_stale:
            raise StaleTreeError(
                f"Tree has {len(self.leaves)} leaves but was built with "
                f"{self._built_leaf_count}; call build() first"
            )
        if index < 0 or index >= self._built_leaf_count:
            raise InvalidLeafIndexError(f"Invalid leaf index: {index}")

        steps = []
        position = index
        for level in self._levels[:-1]:
            sibling_position = position ^ 1
            if sibling_position < len(level):
                side = SiblingSide.RIGHT if position % 2 == 0 else SiblingSide.LEFT
                steps.append(ProofStep(sibling=level[sibling_position], side=side))
            else:
                # Duplicated last node: the node is its own right sibling
                steps.append(ProofStep(sibling=level[position], side=SiblingSide.RIGHT))
            position >>= 1

        return MerkleProof(steps=tuple(steps))

    def get_state(self) -> dict:
        """
        Get the current state of the tree for serialization.

        Returns:
            dict: Tree state including leaves, height, and root
        """
        return {
            "num_leaves": len(self.leaves),
            "leaves": [field_to_hex(leaf) for leaf in self.leaves],
            "height": self.height,
            "root": field_to_hex(self.root()) if self._levels else None,
            "stale": self.is_stale,
        }

    def __len__(self) -> int:
        """Return the number of leaves in the tree."""
        return len(self.leaves)

    def __repr__(self) -> str:
        """String representation of the tree."""
        root = f"{self.root():#x}"[:18] + "..." if self._levels else "unbuilt"
        return (
            f"MerkleCommitmentTree(leaves={len(self.leaves)}, "
            f"height={self.height}, root={root})"
        )
