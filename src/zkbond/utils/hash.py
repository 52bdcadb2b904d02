"""Cryptographic hash utilities."""

import contextlib
import io
import logging
import threading
from functools import lru_cache
from typing import Sequence, Union

import poseidon
from Crypto.Hash import keccak

from zkbond.utils.field import FIELD_MODULUS, check_field_element
from zkbond.utils.poseidon_constants import PRIME_BIT_LEN, circom_parameters

logger = logging.getLogger(__name__)

# circomlib Poseidon: x^5 S-box, 128-bit security, state = [0, *inputs]
POSEIDON_ALPHA = 5
POSEIDON_SECURITY_LEVEL = 128
MAX_POSEIDON_ARITY = 16

# run_hash keeps its permutation state on the instance
_poseidon_lock = threading.Lock()


@lru_cache(maxsize=None)
def _poseidon_for(arity: int) -> "poseidon.Poseidon":
    """Build (once) the circomlib Poseidon instance absorbing ``arity`` inputs."""
    logger.debug(f"Building Poseidon instance for arity {arity}")
    params = circom_parameters(arity + 1)
    # The constructor reports progress on stdout
    with contextlib.redirect_stdout(io.StringIO()):
        return poseidon.Poseidon(
            p=FIELD_MODULUS,
            security_level=POSEIDON_SECURITY_LEVEL,
            alpha=POSEIDON_ALPHA,
            input_rate=arity,
            t=params.t,
            full_round=params.full_rounds,
            partial_round=params.partial_rounds,
            mds_matrix=params.mds_matrix_hex(),
            rc_list=params.round_constants_hex(),
            prime_bit_len=PRIME_BIT_LEN,
        )


def poseidon_hash(inputs: Sequence[int]) -> int:
    """
    Poseidon hash of a fixed-length sequence of field elements.

    Bit-compatible with circomlib's ``Poseidon(n)``: the permutation runs
    over ``[0, *inputs]`` and the digest is the first state element.

    Args:
        inputs: 1..16 canonical field elements

    Returns:
        int: Field element digest

    Raises:
        ValueError: If an input is outside the field or arity is unsupported
    """
    arity = len(inputs)
    if not 1 <= arity <= MAX_POSEIDON_ARITY:
        raise ValueError(f"Poseidon arity must be between 1 and {MAX_POSEIDON_ARITY}")
    values = [check_field_element(v, "Poseidon input") for v in inputs]

    with _poseidon_lock:
        hasher = _poseidon_for(arity)
        hasher.run_hash([0, *values])
        digest = hasher.state[0]
    return int(digest)


def hash_leaf(commitment: int) -> int:
    """Leaf pre-hash applied once to each commitment before tree construction."""
    return poseidon_hash([commitment])


def merkle_hash(left: int, right: int) -> int:
    """
    Compute Merkle tree hash of two siblings.

    Args:
        left: Left child (field element)
        right: Right child (field element)

    Returns:
        int: Parent node Poseidon(left, right)
    """
    return poseidon_hash([left, right])


def keccak256(*data: Union[bytes, str]) -> bytes:
    """
    Keccak-256 of concatenated data.

    Args:
        *data: Multiple bytes or strings to concatenate and hash

    Returns:
        bytes: 32-byte digest
    """
    hasher = keccak.new(digest_bits=256)
    for item in data:
        if isinstance(item, str):
            item = item.encode("utf-8")
        hasher.update(item)
    return hasher.digest()
