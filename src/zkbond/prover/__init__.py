"""External prover boundary."""

from zkbond.prover.nargo import NargoProver, ProofArtifact
from zkbond.prover.witness import witness_records, witness_to_prover_toml

__all__ = [
    "NargoProver",
    "ProofArtifact",
    "witness_records",
    "witness_to_prover_toml",
]
