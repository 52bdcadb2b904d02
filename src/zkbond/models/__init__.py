"""Data models exchanged with external collaborators."""

from zkbond.models.records import BondRecord, WalletRecord

__all__ = ["BondRecord", "WalletRecord"]
