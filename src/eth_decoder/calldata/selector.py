"""
Function selector extraction.

Calldata starts with a 4-byte function selector (the first four bytes of the
keccak-256 hash of the canonical function signature) followed by the
ABI-encoded parameter block.
"""

import logging

from hexbytes import HexBytes

from ..core.normalization import normalize_hex_field
from ..exceptions import CalldataTooShortError, EmptyInputError

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def normalize_calldata(calldata: str | bytes | HexBytes) -> bytes:
    """
    Parse calldata into bytes.

    Raises:
        EmptyInputError: If the calldata is empty
        InvalidHexEncodingError: If hex text is malformed
    """
    data = normalize_hex_field(calldata)
    if not data:
        raise EmptyInputError("calldata")
    return data


def extract_selector(calldata: str | bytes | HexBytes) -> tuple[bytes, bytes]:
    """
    Split calldata into its function selector and parameter block.

    Args:
        calldata: Hex text (optionally 0x-prefixed, any case) or raw bytes

    Returns:
        Tuple of (selector, parameter_block). A bare selector is valid and
        yields an empty parameter block.

    Raises:
        EmptyInputError: If the calldata is empty
        InvalidHexEncodingError: If hex text has non-hex characters or an odd
            number of digits
        CalldataTooShortError: If fewer than 4 bytes are present
    """
    data = normalize_calldata(calldata)

    if len(data) < SELECTOR_SIZE:
        raise CalldataTooShortError(len(data))

    selector = data[:SELECTOR_SIZE]
    logger.debug(
        f"Selector 0x{selector.hex()} with {len(data) - SELECTOR_SIZE} bytes of parameters"
    )
    return selector, data[SELECTOR_SIZE:]
