"""Serialization of JoinSplit witnesses into Noir ``Prover.toml`` records.

Field elements are written as quoted decimal strings. Record order follows
the circuit's ``main`` signature:

    root
    in{1,2}_value, _salt, _owner, _asset_id, _maturity_date,
           _path, _path_sides, _path_length, _nullifier
    out{1,2}_value, _salt, _owner, _asset_id, _maturity_date, _commitment
    spending_secret

Path sides are 0 for a right sibling and 1 for a left sibling. When the
circuit has a fixed depth, paths are padded with zero siblings up to
``max_depth`` and ``_path_length`` tells the circuit where they stop.
"""

from typing import List, Optional, Tuple

from zkbond.core.commitment import Note
from zkbond.core.joinsplit import JoinSplitInput, JoinSplitOutput, JoinSplitWitness
from zkbond.core.merkle_tree import MerkleProof, SiblingSide
from zkbond.utils.field import field_to_decimal

SIDE_ENCODING = {SiblingSide.RIGHT: 0, SiblingSide.LEFT: 1}

Record = Tuple[str, str]


def _scalar(value: int) -> str:
    return f'"{field_to_decimal(value)}"'


def _array(values: List[int]) -> str:
    return "[" + ", ".join(_scalar(v) for v in values) + "]"


def _note_records(prefix: str, note: Note) -> List[Record]:
    names = ("value", "salt", "owner", "asset_id", "maturity_date")
    return [(f"{prefix}_{name}", _scalar(v)) for name, v in zip(names, note.fields())]


def _path_records(prefix: str, proof: MerkleProof, max_depth: Optional[int]) -> List[Record]:
    siblings = proof.siblings
    sides = [SIDE_ENCODING[s] for s in proof.sides]
    if max_depth is not None:
        if len(siblings) > max_depth:
            raise ValueError(
                f"Proof depth {len(siblings)} exceeds circuit depth {max_depth}"
            )
        padding = max_depth - len(siblings)
        siblings = siblings + [0] * padding
        sides = sides + [0] * padding
    return [
        (f"{prefix}_path", _array(siblings)),
        (f"{prefix}_path_sides", _array(sides)),
        (f"{prefix}_path_length", _scalar(len(proof))),
    ]


def _input_records(prefix: str, spent: JoinSplitInput, max_depth: Optional[int]) -> List[Record]:
    return (
        _note_records(prefix, spent.note)
        + _path_records(prefix, spent.proof, max_depth)
        + [(f"{prefix}_nullifier", _scalar(spent.nullifier))]
    )


def _output_records(prefix: str, created: JoinSplitOutput) -> List[Record]:
    return _note_records(prefix, created.note) + [
        (f"{prefix}_commitment", _scalar(created.commitment))
    ]


def witness_records(witness: JoinSplitWitness, max_depth: Optional[int] = None) -> List[Record]:
    """Ordered (name, value) records of a witness."""
    records = [("root", _scalar(witness.merkle_root))]
    records += _input_records("in1", witness.input1, max_depth)
    records += _input_records("in2", witness.input2, max_depth)
    records += _output_records("out1", witness.output1)
    records += _output_records("out2", witness.output2)
    records.append(("spending_secret", _scalar(witness.spender_secret)))
    return records


def witness_to_prover_toml(witness: JoinSplitWitness, max_depth: Optional[int] = None) -> str:
    """Render a witness as the text of a ``Prover.toml`` file."""
    return "".join(f"{name} = {value}\n" for name, value in witness_records(witness, max_depth))
