"""Tests for persisted records and runtime settings."""

import logging

import pytest
from pydantic import ValidationError

from zkbond.config import Settings, configure_logging, get_settings
from zkbond.exceptions import InvalidCommitmentError
from zkbond.models.records import BondRecord, WalletRecord
from zkbond.utils.field import field_to_hex


class TestWalletRecord:
    """Tests for stored identities."""

    def test_round_trip(self, alice):
        record = WalletRecord.from_keys(alice)
        restored = record.to_keys()

        assert record.seed == "0x" + alice.seed.hex()
        assert restored.spending_public == alice.spending_public
        assert restored.viewing_public == alice.viewing_public

    def test_rejects_short_seed(self):
        with pytest.raises(ValidationError):
            WalletRecord(seed="0x" + "ab" * 16)

    def test_created_at_is_timezone_aware(self, alice):
        assert WalletRecord.from_keys(alice).created_at.tzinfo is not None


class TestBondRecord:
    """Tests for stored bond notes."""

    def test_from_note(self, alice_bond):
        record = BondRecord.from_note(alice_bond)

        assert record.commitment == field_to_hex(alice_bond.commitment())
        assert record.nullifier is None
        assert record.value == 100
        assert record.maturity_date == alice_bond.maturity_date

    def test_from_note_with_keys(self, alice, alice_bond):
        record = BondRecord.from_note(alice_bond, keys=alice)
        assert record.nullifier == field_to_hex(alice.sign_nullifier(alice_bond.salt))

    def test_to_note(self, alice_bond):
        assert BondRecord.from_note(alice_bond).to_note() == alice_bond

    def test_to_note_detects_tampering(self, alice_bond):
        record = BondRecord.from_note(alice_bond).model_copy(update={"value": 1000})
        with pytest.raises(InvalidCommitmentError):
            record.to_note()

    def test_json_round_trip(self, alice_bond):
        record = BondRecord.from_note(alice_bond)
        restored = BondRecord.model_validate_json(record.model_dump_json())
        assert restored.to_note() == alice_bond

    def test_value_bounds(self, alice_bond):
        data = BondRecord.from_note(alice_bond).model_dump()
        data["value"] = 2**64
        with pytest.raises(ValidationError):
            BondRecord(**data)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ZKBOND_NARGO_BINARY", raising=False)
        settings = Settings(_env_file=None)

        assert settings.nargo_binary == "nargo"
        assert settings.oracle_hash == "keccak"
        assert settings.prover_timeout == 600
        assert settings.asset_id == 1

    def test_environment_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ZKBOND_CIRCUIT_DIR", str(tmp_path))
        monkeypatch.setenv("ZKBOND_PROVER_TIMEOUT", "30")
        settings = Settings(_env_file=None)

        assert settings.circuit_dir == tmp_path
        assert settings.prover_timeout == 30

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, prover_timeout=0)

    def test_configure_logging(self):
        configure_logging(Settings(_env_file=None, log_level="debug"))
        assert logging.getLogger("zkbond").level == logging.DEBUG
        configure_logging(Settings(_env_file=None, log_level="WARNING"))
        assert logging.getLogger("zkbond").level == logging.WARNING

    def test_configure_logging_defaults_to_environment(self, monkeypatch):
        monkeypatch.setenv("ZKBOND_LOG_LEVEL", "error")
        get_settings.cache_clear()
        try:
            configure_logging()
        finally:
            get_settings.cache_clear()
        assert logging.getLogger("zkbond").level == logging.ERROR
