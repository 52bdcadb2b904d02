"""Conversions between integers, bytes and BN254 scalar field elements.

Field elements are plain ``int`` values in ``[0, FIELD_MODULUS)``. Integers
enter the field by direct modular reduction; the on-chain wire format is the
32-byte big-endian encoding, zero padded.
"""

from typing import Union

# BN254 (alt_bn128) scalar field, the native field of the Noir/Barretenberg circuits
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

FIELD_SIZE = 32  # bytes
U64_MAX = 2**64 - 1


def to_field(value: int) -> int:
    """
    Reduce a non-negative integer into the field.

    Args:
        value: Integer to reduce

    Returns:
        int: value mod FIELD_MODULUS

    Raises:
        ValueError: If value is negative or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected int, got {type(value).__name__}")
    if value < 0:
        raise ValueError("Field inputs must be non-negative")
    return value % FIELD_MODULUS


def is_field_element(value: int) -> bool:
    """Return True if value is a canonical field element."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value < FIELD_MODULUS
    )


def check_field_element(value: int, name: str = "value") -> int:
    """Ensure value is a canonical field element and return it."""
    if not is_field_element(value):
        raise ValueError(f"{name} must be a field element in [0, p)")
    return value


def check_u64(value: int, name: str = "value") -> int:
    """Ensure value fits an unsigned 64-bit integer and return it."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must fit in 64 bits: {value}")
    return value


def field_from_bytes(data: bytes) -> int:
    """
    Decode a 32-byte big-endian field element.

    Raises:
        ValueError: If data is not 32 bytes or encodes a value >= p
    """
    if not isinstance(data, (bytes, bytearray)) or len(data) != FIELD_SIZE:
        raise ValueError(f"Field element must be {FIELD_SIZE} bytes")
    value = int.from_bytes(data, "big")
    if value >= FIELD_MODULUS:
        raise ValueError("Non-canonical field element")
    return value


def field_to_bytes(value: int) -> bytes:
    """Encode a field element as 32 bytes, big-endian, zero padded."""
    check_field_element(value)
    return value.to_bytes(FIELD_SIZE, "big")


def bytes_to_field(data: bytes) -> int:
    """Reduce arbitrary bytes (big-endian) into the field."""
    return int.from_bytes(data, "big") % FIELD_MODULUS


def field_to_hex(value: int) -> str:
    """Encode a field element as 0x-prefixed 64-digit hex."""
    return "0x" + field_to_bytes(value).hex()


def field_from_hex(hex_str: str) -> int:
    """Decode a 0x-prefixed (or bare) hex field element."""
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    return field_from_bytes(bytes.fromhex(hex_str.rjust(FIELD_SIZE * 2, "0")))


def field_to_decimal(value: int) -> str:
    """Decimal text form used by the prover's input records."""
    return str(check_field_element(value))


def field_from_decimal(text: Union[str, int]) -> int:
    """Parse a decimal record back into a canonical field element."""
    return check_field_element(int(text))
