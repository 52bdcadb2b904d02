"""circomlib Poseidon parameters for the BN254 scalar field.

The circuits hash with circomlib's Poseidon (x^5 S-box, 8 full rounds,
per-width partial rounds). Its round constants and Cauchy MDS matrix come
from the reference Grain LFSR generator, seeded with:

    field = 1 (prime field), sbox = 0 (x^alpha), n = 254, t, R_F = 8, R_P

Round constants are drawn first with rejection sampling below p; the MDS
matrix then continues on the same bit stream: 2t values reduced mod p,
x = first t, y = last t, M[i][j] = 1 / (x[i] + y[j]).
"""

from collections import deque
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from zkbond.utils.field import FIELD_MODULUS

FULL_ROUNDS = 8
PRIME_BIT_LEN = 254

# circomlib N_ROUNDS_P, indexed by t - 2 (t = 2..17)
PARTIAL_ROUNDS = [56, 57, 56, 60, 60, 63, 64, 63, 60, 66, 60, 65, 70, 60, 64, 68]

_FIELD_TAG = 1
_SBOX_TAG = 0


@dataclass(frozen=True)
class PoseidonParameters:
    """Round counts, round constants and MDS matrix for one state width."""

    t: int
    full_rounds: int
    partial_rounds: int
    round_constants: List[int]
    mds_matrix: List[List[int]]

    def round_constants_hex(self) -> List[str]:
        return [hex(c) for c in self.round_constants]

    def mds_matrix_hex(self) -> List[List[str]]:
        return [[hex(v) for v in row] for row in self.mds_matrix]


def _bits(value: int, width: int) -> List[int]:
    return [int(b) for b in bin(value)[2:].zfill(width)]


class GrainLFSR:
    """80-bit Grain LFSR in self-shrinking mode."""

    def __init__(self, t: int, full_rounds: int, partial_rounds: int):
        seed = (
            _bits(_FIELD_TAG, 2)
            + _bits(_SBOX_TAG, 4)
            + _bits(PRIME_BIT_LEN, 12)
            + _bits(t, 12)
            + _bits(full_rounds, 10)
            + _bits(partial_rounds, 10)
            + [1] * 30
        )
        self._state = deque(seed)
        for _ in range(160):
            self._step()

    def _step(self) -> int:
        s = self._state
        bit = s[62] ^ s[51] ^ s[38] ^ s[23] ^ s[13] ^ s[0]
        s.popleft()
        s.append(bit)
        return bit

    def next_bit(self) -> int:
        # Bits come in pairs: the second is kept only when the first is 1
        while True:
            first = self._step()
            second = self._step()
            if first == 1:
                return second

    def next_int(self, num_bits: int) -> int:
        value = 0
        for _ in range(num_bits):
            value = (value << 1) | self.next_bit()
        return value

    def next_field_element(self, modulus: int) -> int:
        """Uniform element below ``modulus`` by rejection sampling."""
        while True:
            value = self.next_int(PRIME_BIT_LEN)
            if value < modulus:
                return value


def _cauchy_matrix(grain: GrainLFSR, t: int, modulus: int) -> List[List[int]]:
    while True:
        values = [grain.next_int(PRIME_BIT_LEN) % modulus for _ in range(2 * t)]
        if len(set(values)) != len(values):
            continue
        xs, ys = values[:t], values[t:]
        if any((x + y) % modulus == 0 for x in xs for y in ys):
            continue
        return [[pow(x + y, -1, modulus) for y in ys] for x in xs]


@lru_cache(maxsize=None)
def circom_parameters(t: int) -> PoseidonParameters:
    """
    circomlib parameters for state width ``t`` (inputs + 1).

    Args:
        t: State width, 2..17

    Returns:
        PoseidonParameters: Constants in round-major order and the MDS matrix

    Raises:
        ValueError: If no circomlib instance exists for this width
    """
    if not 2 <= t <= len(PARTIAL_ROUNDS) + 1:
        raise ValueError(f"No circomlib Poseidon instance for t={t}")
    partial_rounds = PARTIAL_ROUNDS[t - 2]

    grain = GrainLFSR(t, FULL_ROUNDS, partial_rounds)
    num_constants = (FULL_ROUNDS + partial_rounds) * t
    constants = [grain.next_field_element(FIELD_MODULUS) for _ in range(num_constants)]
    mds = _cauchy_matrix(grain, t, FIELD_MODULUS)

    return PoseidonParameters(
        t=t,
        full_rounds=FULL_ROUNDS,
        partial_rounds=partial_rounds,
        round_constants=constants,
        mds_matrix=mds,
    )
