"""Tests for the Merkle commitment tree."""

import pytest
from dataclasses import replace

from zkbond.core.commitment import Note
from zkbond.core.merkle_tree import (
    MerkleCommitmentTree,
    MerkleProof,
    ProofStep,
    SiblingSide,
    verify_commitment,
    verify_proof,
)
from zkbond.exceptions import (
    CommitmentNotFoundError,
    EmptyTreeError,
    InvalidLeafIndexError,
    StaleTreeError,
)
from zkbond.utils.hash import hash_leaf, merkle_hash


@pytest.fixture
def commitments():
    """Distinct sample commitments."""
    return [1000 + i for i in range(8)]


def build_tree(leaves):
    tree = MerkleCommitmentTree()
    for c in leaves:
        tree.add_commitment(c)
    return tree.build()


class TestTreeConstruction:
    """Tests for appends and rebuilds."""

    def test_add_returns_increasing_indices(self, commitments):
        tree = MerkleCommitmentTree()
        for i, c in enumerate(commitments):
            assert tree.add_commitment(c) == i
        assert len(tree) == len(commitments)

    def test_add_does_not_rebuild(self, commitments):
        tree = build_tree(commitments[:2])
        root = tree.root()
        tree.add_commitment(commitments[2])

        assert tree.is_stale
        assert tree.root() == root

    def test_add_rejects_out_of_field(self):
        with pytest.raises(ValueError):
            MerkleCommitmentTree().add_commitment(-1)

    def test_single_leaf_root(self):
        tree = build_tree([42])
        assert tree.height == 0
        assert tree.root() == hash_leaf(42)

    def test_two_leaf_root(self):
        tree = build_tree([1, 2])
        assert tree.height == 1
        assert tree.root() == merkle_hash(hash_leaf(1), hash_leaf(2))

    def test_odd_leaf_padding(self):
        """Three leaves: the third is paired with itself."""
        c0, c1, c2 = 7, 8, 9
        tree = build_tree([c0, c1, c2])

        h0, h1, h2 = hash_leaf(c0), hash_leaf(c1), hash_leaf(c2)
        expected = merkle_hash(merkle_hash(h0, h1), merkle_hash(h2, h2))
        assert tree.height == 2
        assert tree.root() == expected

    def test_height_is_ceil_log2(self, commitments):
        expected = {1: 0, 2: 1, 3: 2, 4: 2, 5: 3, 8: 3}
        for count, height in expected.items():
            assert build_tree(commitments[:count]).height == height

    def test_root_changes_on_rebuild(self, commitments):
        tree = build_tree(commitments[:3])
        root_before = tree.root()
        tree.add_commitment(commitments[3])
        tree.build()
        assert tree.root() != root_before

    def test_same_leaves_same_root(self, commitments):
        assert build_tree(commitments).root() == build_tree(commitments).root()

    def test_initial_leaves(self, commitments):
        tree = MerkleCommitmentTree(commitments).build()
        assert tree.root() == build_tree(commitments).root()


class TestEmptyTree:
    """Tests for ordering bugs on an empty tree."""

    def test_root_before_build(self):
        with pytest.raises(EmptyTreeError):
            MerkleCommitmentTree().root()

    def test_root_after_empty_build(self):
        with pytest.raises(EmptyTreeError):
            MerkleCommitmentTree().build().root()

    def test_proof_on_empty_tree(self):
        with pytest.raises(InvalidLeafIndexError):
            MerkleCommitmentTree().build().generate_proof(0)


class TestLookup:
    """Tests for commitment lookup."""

    def test_index_of(self, commitments):
        tree = build_tree(commitments)
        assert tree.index_of(commitments[5]) == 5

    def test_index_of_missing(self, commitments):
        tree = build_tree(commitments)
        with pytest.raises(CommitmentNotFoundError) as exc_info:
            tree.index_of(99)
        assert exc_info.value.commitment == 99


class TestProofGeneration:
    """Tests for proof generation."""

    def test_proof_length_matches_height(self, commitments):
        tree = build_tree(commitments[:5])
        for i in range(5):
            assert len(tree.generate_proof(i)) == tree.height

    def test_sides(self, commitments):
        tree = build_tree(commitments[:4])
        assert tree.generate_proof(0).sides == [SiblingSide.RIGHT, SiblingSide.RIGHT]
        assert tree.generate_proof(3).sides == [SiblingSide.LEFT, SiblingSide.LEFT]

    def test_duplicated_node_is_own_sibling(self):
        tree = build_tree([7, 8, 9])
        proof = tree.generate_proof(2)

        assert proof.steps[0] == ProofStep(sibling=hash_leaf(9), side=SiblingSide.RIGHT)
        assert proof.steps[1].side is SiblingSide.LEFT
        assert proof.steps[1].sibling == merkle_hash(hash_leaf(7), hash_leaf(8))

    def test_invalid_index(self, commitments):
        tree = build_tree(commitments[:3])
        with pytest.raises(InvalidLeafIndexError):
            tree.generate_proof(-1)
        with pytest.raises(InvalidLeafIndexError):
            tree.generate_proof(3)

    def test_stale_tree_rejected(self, commitments):
        tree = build_tree(commitments[:2])
        tree.add_commitment(commitments[2])
        with pytest.raises(StaleTreeError):
            tree.generate_proof(0)


class TestProofVerification:
    """Tests for verifying proofs."""

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 8])
    def test_round_trip(self, commitments, count):
        tree = build_tree(commitments[:count])
        root = tree.root()
        for i in range(count):
            assert verify_commitment(commitments[i], tree.generate_proof(i), root) is True

    def test_verify_note(self, alice_bond):
        other = replace(alice_bond, salt=1)
        tree = build_tree([alice_bond.commitment(), other.commitment()])
        proof = tree.generate_proof(0)

        assert verify_proof(alice_bond, proof, tree.root()) is True
        assert verify_proof(other, proof, tree.root()) is False

    def test_wrong_root(self, commitments):
        tree = build_tree(commitments[:4])
        assert verify_commitment(commitments[0], tree.generate_proof(0), tree.root() + 1) is False

    def test_tampered_sibling(self, commitments):
        tree = build_tree(commitments)
        proof = tree.generate_proof(3)
        root = tree.root()

        for level in range(len(proof)):
            steps = list(proof.steps)
            steps[level] = ProofStep(sibling=steps[level].sibling + 1, side=steps[level].side)
            assert verify_commitment(commitments[3], MerkleProof(tuple(steps)), root) is False

    def test_tampered_side(self, commitments):
        tree = build_tree(commitments)
        proof = tree.generate_proof(5)
        root = tree.root()

        flip = {SiblingSide.LEFT: SiblingSide.RIGHT, SiblingSide.RIGHT: SiblingSide.LEFT}
        for level in range(len(proof)):
            steps = list(proof.steps)
            steps[level] = ProofStep(sibling=steps[level].sibling, side=flip[steps[level].side])
            assert verify_commitment(commitments[5], MerkleProof(tuple(steps)), root) is False

    def test_malformed_proof_fails_closed(self, commitments):
        tree = build_tree(commitments[:2])
        bad = MerkleProof(steps=(ProofStep(sibling=-1, side=SiblingSide.RIGHT),))
        assert verify_commitment(commitments[0], bad, tree.root()) is False

    def test_proof_from_previous_root(self, commitments):
        tree = build_tree(commitments[:2])
        old_root = tree.root()
        tree.add_commitment(commitments[2])
        tree.build()

        assert verify_commitment(commitments[0], tree.generate_proof(0), old_root) is False


class TestTreeState:
    """Tests for state snapshots."""

    def test_get_state(self, commitments):
        tree = build_tree(commitments[:3])
        state = tree.get_state()

        assert state["num_leaves"] == 3
        assert state["height"] == 2
        assert state["root"].startswith("0x")
        assert state["stale"] is False

    def test_get_state_unbuilt(self):
        tree = MerkleCommitmentTree([5])
        state = tree.get_state()
        assert state["root"] is None
        assert state["stale"] is True

    def test_repr(self, commitments):
        assert "leaves=2" in repr(build_tree(commitments[:2]))
        assert "unbuilt" in repr(MerkleCommitmentTree())
