"""Tests for bond lifecycle rules."""

import pytest

from zkbond.core.bond import (
    RedemptionInputs,
    check_redeemable,
    check_trade_pair,
    check_tradable,
    days_until_maturity,
    is_matured,
)
from zkbond.core.commitment import Note
from zkbond.core.joinsplit import JoinSplitWitnessBuilder
from zkbond.core.merkle_tree import MerkleCommitmentTree
from zkbond.exceptions import DuplicateNullifierError, MaturityError
from zkbond.utils.field import field_to_bytes


class TestMaturity:
    """Tests for trading and redemption windows."""

    def test_before_maturity(self, alice_bond, test_data):
        now = test_data["now"]
        assert is_matured(alice_bond, now) is False
        check_tradable(alice_bond, now)
        with pytest.raises(MaturityError):
            check_redeemable(alice_bond, now)

    def test_at_maturity(self, alice_bond):
        now = alice_bond.maturity_date
        assert is_matured(alice_bond, now) is True
        check_redeemable(alice_bond, now)
        with pytest.raises(MaturityError):
            check_tradable(alice_bond, now)

    def test_days_until_maturity(self, alice_bond):
        now = alice_bond.maturity_date - 3 * 86400 - 10
        assert days_until_maturity(alice_bond, now) == 3
        assert days_until_maturity(alice_bond, alice_bond.maturity_date + 5) == 0

    def test_redeem_message_counts_days(self, alice_bond):
        now = alice_bond.maturity_date - 2 * 86400
        with pytest.raises(MaturityError, match="2 days"):
            check_redeemable(alice_bond, now)


class TestTradePair:
    """Tests for atomic swap preconditions."""

    def test_distinct_nullifiers(self):
        check_trade_pair(1, 2)

    def test_identical_nullifiers(self):
        with pytest.raises(DuplicateNullifierError):
            check_trade_pair(7, 7)


class TestRedemptionInputs:
    """Tests for burn public inputs."""

    @pytest.fixture
    def witness(self, alice, alice_bond):
        dummy = Note.dummy(alice.spending_public, alice_bond.maturity_date)
        tree = MerkleCommitmentTree([alice_bond.commitment(), dummy.commitment()])
        outputs = [
            Note.create(0, alice.spending_public, maturity_date=alice_bond.maturity_date),
            Note.create(100, alice.spending_public, maturity_date=alice_bond.maturity_date),
        ]
        return JoinSplitWitnessBuilder(tree).build(alice, alice_bond, dummy, outputs)

    def test_from_witness_after_maturity(self, witness, alice_bond):
        inputs = RedemptionInputs.from_witness(witness, now=alice_bond.maturity_date)

        assert inputs.root == witness.merkle_root
        assert inputs.nullifier == witness.input1.nullifier
        assert inputs.new_commitment == witness.output1.commitment
        assert inputs.input_maturity_date == alice_bond.maturity_date

    def test_from_witness_before_maturity(self, witness, test_data):
        with pytest.raises(MaturityError):
            RedemptionInputs.from_witness(witness, now=test_data["now"])

    def test_to_bytes32(self, witness, alice_bond):
        words = RedemptionInputs.from_witness(witness, now=alice_bond.maturity_date).to_bytes32()

        assert len(words) == 5
        assert all(len(w) == 32 for w in words)
        assert words[0] == field_to_bytes(witness.merkle_root)
        assert int.from_bytes(words[3], "big") == alice_bond.maturity_date
        assert int.from_bytes(words[4], "big") == 1
