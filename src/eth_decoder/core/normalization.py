"""
Hex normalization utilities shared by the transaction and calldata decoders.

Raw transactions and calldata reach the decoders as hex text (with or without
a 0x prefix, in any letter case), as raw bytes, or as HexBytes objects from
Web3.py. This module turns all of them into plain immutable bytes so decoders
never deal with format variations.

Unlike bytes.fromhex(), parsing here is strict: whitespace, non-hex characters
and odd digit counts are rejected instead of being skipped or padded.

Usage:
    from eth_decoder.core.normalization import normalize_hex_field

    raw = normalize_hex_field("0xf86c0985...")
"""

import logging
import re

from hexbytes import HexBytes

from ..exceptions import InvalidHexEncodingError

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def strip_hex_prefix(hex_string: str) -> str:
    """Remove a leading 0x / 0X prefix if present."""
    if hex_string[:2] in ("0x", "0X"):
        return hex_string[2:]
    return hex_string


def normalize_hex_field(hex_string: str | HexBytes | bytes | bytearray | None) -> bytes:
    """
    Normalize a hex field to bytes, handling various input formats.

    Handles:
    - Strings with 0x or 0X prefix: "0x1234..."
    - Strings without prefix: "1234..."
    - HexBytes objects (from Web3.py)
    - Raw bytes / bytearray objects
    - Empty values: "0x", "", None

    Args:
        hex_string: Hex data in any supported format

    Returns:
        Raw bytes representation of the hex data

    Raises:
        InvalidHexEncodingError: If the text contains non-hex characters or an
            odd number of hex digits, or the type is not supported

    Examples:
        >>> normalize_hex_field("0x1234")
        b'\\x12\\x34'
        >>> normalize_hex_field("0XABCD")
        b'\\xab\\xcd'
        >>> normalize_hex_field(HexBytes("0x1234"))
        b'\\x12\\x34'
    """
    if hex_string is None:
        return b""

    # HexBytes is a bytes subclass, check it first
    if isinstance(hex_string, HexBytes):
        return bytes(hex_string)

    if isinstance(hex_string, (bytes, bytearray)):
        return bytes(hex_string)

    if isinstance(hex_string, str):
        hex_clean = strip_hex_prefix(hex_string.strip())
        if not hex_clean:
            return b""

        if not _HEX_DIGITS.fullmatch(hex_clean):
            raise InvalidHexEncodingError(
                f"Invalid hex string: {_preview(hex_string)} contains non-hex characters"
            )
        if len(hex_clean) % 2:
            raise InvalidHexEncodingError(
                f"Invalid hex string: {_preview(hex_string)} has an odd number "
                f"of digits ({len(hex_clean)})"
            )

        return bytes.fromhex(hex_clean)

    raise InvalidHexEncodingError(f"Unsupported hex field type: {type(hex_string)}")


def normalize_hex_string(
    hex_data: str | HexBytes | bytes | bytearray | None, with_prefix: bool = True
) -> str:
    """
    Normalize hex data to a consistent lowercase string format.

    Args:
        hex_data: Hex data in any supported format
        with_prefix: If True, include '0x' prefix in output

    Returns:
        Hex string in consistent format

    Examples:
        >>> normalize_hex_string("ABCD", with_prefix=True)
        '0xabcd'
        >>> normalize_hex_string(b"\\x12\\x34", with_prefix=False)
        '1234'
    """
    hex_str = normalize_hex_field(hex_data).hex()
    return f"0x{hex_str}" if with_prefix else hex_str


def _preview(text: str, limit: int = 24) -> str:
    if len(text) <= limit:
        return repr(text)
    return repr(text[:limit] + "...")
