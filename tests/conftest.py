"""Pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from zkbond.core.commitment import Note
from zkbond.core.joinsplit import JoinSplitWitness
from zkbond.core.merkle_tree import verify_proof
from zkbond.crypto.keys import ShieldedKeyHierarchy

MATURITY_2030 = 1893456000  # 2030-01-01
NOW_2026 = 1792368000  # 2026-10-19


class LedgerRejected(Exception):
    """Raised by the ledger stub when a submission is refused."""


class LedgerStub:
    """
    Stand-in for the on-chain bond contract.

    Accepts a JoinSplit only against its current root, with both inclusion
    proofs valid under that root and both nullifiers unspent.
    """

    Rejected = LedgerRejected

    def __init__(self):
        self.current_root = None
        self.known_roots = set()
        self.nullifiers = set()
        self.commitments = []

    def publish_root(self, root: int) -> None:
        self.current_root = root
        self.known_roots.add(root)

    def submit(self, witness: JoinSplitWitness) -> None:
        if witness.merkle_root != self.current_root:
            raise LedgerRejected("stale root")
        for spent in witness.inputs:
            if not verify_proof(spent.note, spent.proof, self.current_root):
                raise LedgerRejected("invalid inclusion proof")
            if spent.nullifier in self.nullifiers:
                raise LedgerRejected("nullifier already spent")
        self.nullifiers.update(witness.nullifiers)
        self.commitments.extend(witness.commitments)


@pytest.fixture
def alice():
    """Deterministic key pair for the spender."""
    return ShieldedKeyHierarchy.from_seed(bytes(range(32)))


@pytest.fixture
def bob():
    """Deterministic key pair for a counterparty."""
    return ShieldedKeyHierarchy.from_seed(bytes(range(32, 64)))


@pytest.fixture
def alice_bond(alice):
    """A 100-unit bond owned by alice."""
    return Note(
        value=100,
        salt=0x1234_5678_9ABC_DEF0,
        owner_public=alice.spending_public,
        asset_id=1,
        maturity_date=MATURITY_2030,
    )


@pytest.fixture
def ledger():
    return LedgerStub()


@pytest.fixture(scope="session")
def test_data():
    """Fixture providing test data."""
    return {
        "maturity": MATURITY_2030,
        "now": NOW_2026,
        "asset_id": 1,
    }
