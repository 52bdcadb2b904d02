"""JoinSplit witness assembly: two input notes, two output notes, one root.

The witness is the complete private input of the external circuit:

    1. Both input commitments are located in the tree by lookup
    2. The tree is rebuilt once and its root captured
    3. Both inclusion proofs are generated against that same root
    4. Input nullifiers and output commitments are derived
    5. Value conservation is checked: in1 + in2 == out1 + out2

No proving happens here; the witness is handed to a prover collaborator.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from zkbond.core.commitment import Note, NoteCommitmentScheme
from zkbond.core.merkle_tree import MerkleCommitmentTree, MerkleProof, verify_proof
from zkbond.crypto.keys import ShieldedKeyPair
from zkbond.exceptions import (
    AssetMismatchError,
    JoinSplitError,
    OwnerMismatchError,
    ValueConservationError,
)
from zkbond.utils.encoding import fields_to_bytes32
from zkbond.utils.field import field_to_hex

logger = logging.getLogger(__name__)

NUM_INPUTS = 2
NUM_OUTPUTS = 2


@dataclass(frozen=True)
class JoinSplitInput:
    """Spent note with its tree position, inclusion proof and nullifier."""

    note: Note
    index: int
    proof: MerkleProof
    nullifier: int


@dataclass(frozen=True)
class JoinSplitOutput:
    """Created note and its commitment."""

    note: Note
    commitment: int


@dataclass(frozen=True)
class JoinSplitWitness:
    """Self-consistent witness bundle for one JoinSplit."""

    merkle_root: int
    input1: JoinSplitInput
    input2: JoinSplitInput
    output1: JoinSplitOutput
    output2: JoinSplitOutput
    spender_secret: int = field(repr=False)

    @property
    def inputs(self) -> Tuple[JoinSplitInput, JoinSplitInput]:
        return (self.input1, self.input2)

    @property
    def outputs(self) -> Tuple[JoinSplitOutput, JoinSplitOutput]:
        return (self.output1, self.output2)

    @property
    def nullifiers(self) -> List[int]:
        return [i.nullifier for i in self.inputs]

    @property
    def commitments(self) -> List[int]:
        return [o.commitment for o in self.outputs]

    def public_inputs(self) -> List[bytes]:
        """
        Ledger-facing values as 32-byte big-endian words.

        Order: root, nullifier1, nullifier2, commitment1, commitment2.
        """
        return fields_to_bytes32([self.merkle_root, *self.nullifiers, *self.commitments])

    def to_dict(self) -> dict:
        """Public part of the witness, hex encoded (no notes or secrets)."""
        return {
            "merkle_root": field_to_hex(self.merkle_root),
            "nullifiers": [field_to_hex(n) for n in self.nullifiers],
            "commitments": [field_to_hex(c) for c in self.commitments],
        }


class JoinSplitWitnessBuilder:
    """
    Builds JoinSplit witnesses against one commitment tree.

    The builder holds no state besides the tree it reads. Callers sharing a
    mutable tree must serialize appends with ``build`` (see ShieldedPool).
    """

    def __init__(self, tree: MerkleCommitmentTree):
        self.tree = tree

    def build(
        self,
        spender: ShieldedKeyPair,
        real_input: Note,
        dummy_input: Note,
        outputs: Sequence[Note],
    ) -> JoinSplitWitness:
        """
        Assemble a witness spending two registered notes into two new ones.

        Args:
            spender: Key pair owning both inputs
            real_input: Note being spent
            dummy_input: Second input, usually the owner's zero-value note
            outputs: Exactly two freshly constructed output notes

        Returns:
            JoinSplitWitness: Witness with both proofs under one root

        Raises:
            CommitmentNotFoundError: If an input is not in the tree
            OwnerMismatchError: If an input is not owned by the spender
            AssetMismatchError: If notes of different assets are mixed
            ValueConservationError: If input and output values differ
        """
        if len(outputs) != NUM_OUTPUTS:
            raise JoinSplitError(f"JoinSplit requires exactly {NUM_OUTPUTS} outputs")
        inputs = (real_input, dummy_input)

        # 1. Locate inputs in the current leaf list before judging them
        input_commitments = [NoteCommitmentScheme.commitment(n) for n in inputs]
        indices = [self.tree.index_of(c) for c in input_commitments]
        if indices[0] == indices[1]:
            raise JoinSplitError("JoinSplit inputs must be distinct notes")
        self._check_owner(spender, inputs)
        self._check_asset(inputs, outputs)

        # 2. One rebuild, one root, both proofs
        self.tree.build()
        root = self.tree.root()
        proofs = [self.tree.generate_proof(i) for i in indices]

        # 3. Nullifiers and output commitments
        nullifiers = [
            NoteCommitmentScheme.nullifier(n.salt, spender.spending_secret) for n in inputs
        ]
        output_commitments = [NoteCommitmentScheme.commitment(n) for n in outputs]

        # 4. Value conservation
        inputs_total = sum(n.value for n in inputs)
        outputs_total = sum(n.value for n in outputs)
        if inputs_total != outputs_total:
            raise ValueConservationError(inputs_total, outputs_total)

        for note, proof in zip(inputs, proofs):
            if not verify_proof(note, proof, root):
                raise JoinSplitError("Generated inclusion proof does not match root")

        witness = JoinSplitWitness(
            merkle_root=root,
            input1=JoinSplitInput(inputs[0], indices[0], proofs[0], nullifiers[0]),
            input2=JoinSplitInput(inputs[1], indices[1], proofs[1], nullifiers[1]),
            output1=JoinSplitOutput(outputs[0], output_commitments[0]),
            output2=JoinSplitOutput(outputs[1], output_commitments[1]),
            spender_secret=spender.spending_secret,
        )
        logger.info(
            f"JoinSplit witness built: root={root:#x}, inputs at {indices}, "
            f"value {inputs_total}"
        )
        return witness

    @staticmethod
    def _check_owner(spender: ShieldedKeyPair, inputs: Sequence[Note]) -> None:
        for position, note in enumerate(inputs, start=1):
            if note.owner_public != spender.spending_public:
                raise OwnerMismatchError(f"Input {position} is not owned by the spender")

    @staticmethod
    def _check_asset(inputs: Sequence[Note], outputs: Sequence[Note]) -> None:
        asset_id = inputs[0].asset_id
        if any(n.asset_id != asset_id for n in (*inputs, *outputs)):
            raise AssetMismatchError(f"All JoinSplit notes must carry asset {asset_id}")
