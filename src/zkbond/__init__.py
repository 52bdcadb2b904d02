"""Main package initialization."""

__version__ = "0.1.0"
__author__ = "ZK-Bond Team"
__description__ = "Shielded bond core: notes, commitment tree and JoinSplit witnesses"

from .crypto.keys import ShieldedKeyHierarchy, ShieldedKeyPair
from .core.commitment import Note, NoteCommitmentScheme
from .core.merkle_tree import MerkleCommitmentTree, MerkleProof, verify_proof
from .core.joinsplit import JoinSplitWitness, JoinSplitWitnessBuilder
from .core.pool import ShieldedPool

__all__ = [
    "ShieldedKeyHierarchy",
    "ShieldedKeyPair",
    "Note",
    "NoteCommitmentScheme",
    "MerkleCommitmentTree",
    "MerkleProof",
    "verify_proof",
    "JoinSplitWitness",
    "JoinSplitWitnessBuilder",
    "ShieldedPool",
]
