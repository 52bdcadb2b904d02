"""Notes, commitment tree and JoinSplit assembly."""

from zkbond.core.commitment import DEFAULT_ASSET_ID, Note, NoteCommitmentScheme
from zkbond.core.merkle_tree import (
    MerkleCommitmentTree,
    MerkleProof,
    ProofStep,
    SiblingSide,
    verify_commitment,
    verify_proof,
)
from zkbond.core.joinsplit import (
    JoinSplitInput,
    JoinSplitOutput,
    JoinSplitWitness,
    JoinSplitWitnessBuilder,
)
from zkbond.core.pool import PoolState, ShieldedPool

__all__ = [
    "DEFAULT_ASSET_ID",
    "Note",
    "NoteCommitmentScheme",
    "MerkleCommitmentTree",
    "MerkleProof",
    "ProofStep",
    "SiblingSide",
    "verify_commitment",
    "verify_proof",
    "JoinSplitInput",
    "JoinSplitOutput",
    "JoinSplitWitness",
    "JoinSplitWitnessBuilder",
    "PoolState",
    "ShieldedPool",
]
