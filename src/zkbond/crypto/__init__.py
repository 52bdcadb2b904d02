"""Cryptographic primitives module"""

from zkbond.crypto.keys import (
    SEED_SIZE,
    ShieldedKeyPair,
    ShieldedKeyHierarchy,
)

__all__ = [
    'SEED_SIZE',
    'ShieldedKeyPair',
    'ShieldedKeyHierarchy',
]
