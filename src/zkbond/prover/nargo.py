"""Blocking boundary to the Noir/Barretenberg proving toolchain.

Two external steps run in the circuit directory:

    nargo execute <witness_name>
    bb prove -b ./target/<circuit>.json -w ./target/<witness_name>.gz -o ./target

Either step failing, or the proof file not appearing, is a ProvingFailed
carrying the tool's stderr. Nothing is retried here.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from zkbond.config import Settings, get_settings
from zkbond.core.joinsplit import JoinSplitWitness
from zkbond.exceptions import ProvingFailed
from zkbond.prover.witness import witness_to_prover_toml

logger = logging.getLogger(__name__)

PROVER_TOML = "Prover.toml"
PROOF_FILE = "proof"


@dataclass(frozen=True)
class ProofArtifact:
    """Opaque proof produced by the toolchain."""

    proof: bytes
    path: Path

    def hex(self) -> str:
        return "0x" + self.proof.hex()


class NargoProver:
    """Runs ``nargo`` and ``bb`` for one circuit directory."""

    def __init__(self, settings: Optional[Settings] = None, max_depth: Optional[int] = None):
        """
        Args:
            settings: Toolchain settings (defaults to environment settings)
            max_depth: Fixed Merkle depth of the circuit, if it has one
        """
        self.settings = settings or get_settings()
        self.max_depth = max_depth

    @property
    def circuit_dir(self) -> Path:
        return Path(self.settings.circuit_dir)

    @property
    def target_dir(self) -> Path:
        return self.circuit_dir / "target"

    def write_inputs(self, witness: JoinSplitWitness) -> Path:
        """Write the witness as ``Prover.toml`` into the circuit directory."""
        toml_path = self.circuit_dir / PROVER_TOML
        toml_path.write_text(witness_to_prover_toml(witness, self.max_depth), encoding="utf-8")
        logger.debug(f"Prover inputs written to {toml_path}")
        return toml_path

    def execute_command(self) -> List[str]:
        return [self.settings.nargo_binary, "execute", self.settings.witness_name]

    def prove_command(self) -> List[str]:
        return [
            self.settings.bb_binary,
            "prove",
            "-b",
            f"./target/{self.settings.circuit_name}.json",
            "-w",
            f"./target/{self.settings.witness_name}.gz",
            "-o",
            "./target",
            "--oracle_hash",
            self.settings.oracle_hash,
        ]

    def _run(self, cmd: List[str], description: str) -> subprocess.CompletedProcess:
        logger.info(f"{description}: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.circuit_dir,
                capture_output=True,
                text=True,
                timeout=self.settings.prover_timeout,
            )
        except FileNotFoundError as e:
            raise ProvingFailed(f"{description} could not start", str(e)) from e
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            raise ProvingFailed(
                f"{description} timed out after {self.settings.prover_timeout}s", stderr
            ) from e

        if result.returncode != 0:
            logger.error(f"{description} failed with exit code {result.returncode}")
            raise ProvingFailed(
                f"{description} failed with exit code {result.returncode}",
                result.stderr or result.stdout or "",
            )
        return result

    def prove(self, witness: JoinSplitWitness) -> ProofArtifact:
        """
        Produce a proof for ``witness``.

        Returns:
            ProofArtifact: Proof bytes read from ``target/proof``

        Raises:
            ProvingFailed: On non-zero exit, timeout or missing proof file
        """
        self.write_inputs(witness)
        self._run(self.execute_command(), "nargo execute")
        self._run(self.prove_command(), "bb prove")

        proof_path = self.target_dir / PROOF_FILE
        if not proof_path.is_file():
            raise ProvingFailed(f"bb prove produced no proof at {proof_path}")

        proof = proof_path.read_bytes()
        logger.info(f"Proof generated: {len(proof)} bytes")
        return ProofArtifact(proof=proof, path=proof_path)
