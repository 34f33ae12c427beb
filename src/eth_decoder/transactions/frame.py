"""
RLP frame access for transaction payloads.

RlpFrameReader strictly decodes a transaction payload (type byte already
stripped) into its top-level RLP item list and exposes typed, field-attributed
accessors on top of the pyrlp sedes. Every failure names the field it was
decoding.

Usage:
    frame = RlpFrameReader(payload)
    frame.expect_item_count(9)
    nonce = frame.uint(0, "nonce")
"""

import logging
from typing import Any

import rlp
from rlp.exceptions import DecodingError, DeserializationError
from rlp.sedes import Binary, CountableList, List, big_endian_int, binary

from ..exceptions import MalformedFrameError, RlpDecodeError
from .models import AccessListEntry

logger = logging.getLogger(__name__)

ADDRESS_SEDES = Binary.fixed_length(20, allow_empty=True)
STORAGE_KEY_SEDES = Binary.fixed_length(32)
ACCESS_LIST_SEDES = CountableList(
    List([Binary.fixed_length(20), CountableList(STORAGE_KEY_SEDES)], strict=True)
)

UINT256_BITS = 256
UINT64_BITS = 64


class RlpFrameReader:
    """
    Positional reader over the top-level items of an RLP-encoded transaction.

    The payload is decoded once, in strict mode: trailing bytes after the
    outer list and non-canonical length prefixes are rejected.
    """

    def __init__(self, payload: bytes):
        """
        Decode the payload into its RLP structure.

        Args:
            payload: RLP bytes of the transaction body

        Raises:
            RlpDecodeError: If the payload is not valid RLP
        """
        try:
            self._items: Any = rlp.decode(bytes(payload), strict=True)
        except DecodingError as e:
            raise RlpDecodeError("frame", e) from e

    @property
    def is_list(self) -> bool:
        return isinstance(self._items, list)

    def item_count(self) -> int:
        """
        Return the number of top-level list elements.

        Raises:
            RlpDecodeError: If the payload is a byte string rather than a list
        """
        if not self.is_list:
            raise RlpDecodeError("frame", "payload is an RLP string, not a list")
        return len(self._items)

    def expect_item_count(self, expected: int) -> None:
        """
        Check the frame holds exactly the given number of items.

        Raises:
            MalformedFrameError: If the payload is not a list or the count differs
        """
        if not self.is_list:
            raise MalformedFrameError(expected, None, "payload is not an RLP list")

        actual = len(self._items)
        logger.debug(f"RLP frame item count: {actual} (expected {expected})")
        if actual != expected:
            raise MalformedFrameError(expected, actual)

    def item(self, index: int, field: str) -> bytes | list:
        """Return the raw RLP item at index."""
        if not self.is_list or not 0 <= index < len(self._items):
            raise RlpDecodeError(field, f"no RLP item at index {index}")
        return self._items[index]

    def uint(self, index: int, field: str, bits: int = UINT256_BITS) -> int:
        """Decode a canonical big-endian unsigned integer of at most `bits` bits."""
        raw = self._scalar(index, field)
        try:
            value = big_endian_int.deserialize(raw)
        except DeserializationError as e:
            raise RlpDecodeError(field, e) from e

        if value.bit_length() > bits:
            raise RlpDecodeError(field, f"value exceeds {bits} bits")
        return value

    def address(self, index: int, field: str) -> bytes | None:
        """
        Decode a 20-byte address, or None for the empty string.

        The empty string is how contract creation is encoded in the `to` slot.
        """
        raw = self._scalar(index, field)
        try:
            address = ADDRESS_SEDES.deserialize(raw)
        except DeserializationError as e:
            raise RlpDecodeError(field, e) from e
        return address or None

    def binary(self, index: int, field: str) -> bytes:
        """Decode an arbitrary-length byte string."""
        raw = self._scalar(index, field)
        try:
            return bytes(binary.deserialize(raw))
        except DeserializationError as e:
            raise RlpDecodeError(field, e) from e

    def access_list(self, index: int, field: str) -> tuple[AccessListEntry, ...]:
        """Decode an EIP-2930 access list: [[address, [storage_key, ...]], ...]."""
        raw = self.item(index, field)
        if not isinstance(raw, list):
            raise RlpDecodeError(field, "expected an RLP list, got a byte string")
        try:
            entries = ACCESS_LIST_SEDES.deserialize(raw)
        except DeserializationError as e:
            raise RlpDecodeError(field, e) from e

        return tuple(
            AccessListEntry(
                address=bytes(address), storage_keys=tuple(bytes(k) for k in keys)
            )
            for address, keys in entries
        )

    def _scalar(self, index: int, field: str) -> bytes:
        raw = self.item(index, field)
        if isinstance(raw, list):
            raise RlpDecodeError(field, "expected a byte string, got an RLP list")
        return raw
