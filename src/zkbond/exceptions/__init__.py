"""Custom exceptions for the shielded bond core."""


class ZKBondException(Exception):
    """Base exception for all shielded bond core errors."""
    pass


# Cryptography Errors
class CryptoError(ZKBondException):
    """Base exception for cryptographic errors."""
    pass


class KeyFormatError(CryptoError):
    """Raised when external key bytes are malformed (wrong length, bad point)."""
    pass


class InvalidCommitmentError(CryptoError):
    """Raised when a stored commitment does not match its note fields."""
    pass


# Merkle Tree Errors
class MerkleTreeError(ZKBondException):
    """Base exception for commitment tree errors."""
    pass


class CommitmentNotFoundError(MerkleTreeError):
    """Raised when a commitment is not registered in the tree."""

    def __init__(self, commitment: int):
        self.commitment = commitment
        super().__init__(f"Commitment not found in tree: {commitment:#066x}")


class EmptyTreeError(MerkleTreeError):
    """Raised when a root is requested from a tree with no built leaves."""
    pass


class StaleTreeError(MerkleTreeError):
    """Raised when a proof is requested after an append without a rebuild."""
    pass


class InvalidLeafIndexError(MerkleTreeError):
    """Raised when leaf index is invalid."""
    pass


# JoinSplit Errors
class JoinSplitError(ZKBondException):
    """Base exception for JoinSplit witness errors."""
    pass


class ValueConservationError(JoinSplitError):
    """Raised when input and output values do not balance."""

    def __init__(self, inputs_total: int, outputs_total: int):
        self.inputs_total = inputs_total
        self.outputs_total = outputs_total
        super().__init__(
            f"Value not conserved: inputs sum to {inputs_total}, "
            f"outputs sum to {outputs_total}"
        )


class OwnerMismatchError(JoinSplitError):
    """Raised when an input note is not owned by the spender."""
    pass


class AssetMismatchError(JoinSplitError):
    """Raised when notes of different assets are mixed in one JoinSplit."""
    pass


# Bond Lifecycle Errors
class BondLifecycleError(ZKBondException):
    """Base exception for bond lifecycle rule violations."""
    pass


class MaturityError(BondLifecycleError):
    """Raised when a bond is traded after, or redeemed before, maturity."""
    pass


class DuplicateNullifierError(BondLifecycleError):
    """Raised when two bonds in one trade share a nullifier."""
    pass


# Prover Errors
class ProverError(ZKBondException):
    """Base exception for the external prover boundary."""
    pass


class ProvingFailed(ProverError):
    """Raised when the proving toolchain exits non-zero or produces no proof."""

    def __init__(self, message: str, diagnostic: str = ""):
        self.diagnostic = diagnostic
        if diagnostic:
            message = f"{message}: {diagnostic.strip()}"
        super().__init__(message)
