"""Field, hash and encoding helpers."""

from zkbond.utils.field import (
    FIELD_MODULUS,
    to_field,
    check_u64,
    field_to_bytes,
    field_from_bytes,
    field_to_hex,
    field_from_hex,
    field_to_decimal,
)
from zkbond.utils.hash import poseidon_hash, hash_leaf, merkle_hash, keccak256

__all__ = [
    "FIELD_MODULUS",
    "to_field",
    "check_u64",
    "field_to_bytes",
    "field_from_bytes",
    "field_to_hex",
    "field_from_hex",
    "field_to_decimal",
    "poseidon_hash",
    "hash_leaf",
    "merkle_hash",
    "keccak256",
]
