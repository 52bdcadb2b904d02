"""Encoding and decoding utilities."""

from typing import List, Union

from zkbond.utils.field import field_to_bytes


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string.

    Args:
        data: Bytes to convert

    Returns:
        str: Hexadecimal string with '0x' prefix
    """
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hexadecimal string to bytes.

    Args:
        hex_str: Hexadecimal string (with or without '0x' prefix)

    Returns:
        bytes: Decoded bytes

    Raises:
        ValueError: If hex string is invalid
    """
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]

    if len(hex_str) % 2 != 0:
        raise ValueError("Hex string must have even number of characters")

    return bytes.fromhex(hex_str)


def ensure_bytes(data: Union[bytes, str]) -> bytes:
    """Accept raw bytes or a hex string and return bytes."""
    if isinstance(data, bytes):
        return data
    elif isinstance(data, str):
        return hex_to_bytes(data)
    else:
        raise TypeError(f"Expected bytes or str, got {type(data)}")


def u64_to_bytes32(value: int) -> bytes:
    """Left-pad an unsigned integer into a 32-byte big-endian word."""
    return value.to_bytes(32, "big")


def fields_to_bytes32(values: List[int]) -> List[bytes]:
    """Encode a list of field elements as fixed-width 32-byte words."""
    return [field_to_bytes(v) for v in values]
