"""
Two-pass ABI parameter decoding.

ABI encoding lays the parameters of a call out as a head region followed by
a tail region:

- Head: one slot per parameter in declaration order. Static values (bool,
  uintN, intN, address, bytesN, and fixed arrays/tuples of those) are stored
  in place; a dynamic value (bytes, string, T[], or any composite containing
  one) stores a 32-byte offset relative to the start of the block.
- Tail: each dynamic value's body. bytes/string bodies are a length word and
  the data; T[] bodies are a length word followed by a nested block with the
  same head/tail layout, one level deeper.

ParameterWalker scans the head first (pass 1), decoding static values and
recording offsets, then resolves every recorded offset in parameter order
(pass 2). All reads go through CalldataCursor, so a short or corrupt buffer
fails with TruncatedCalldataError instead of yielding padded or guessed data.

Usage:
    from eth_decoder.calldata.walker import decode_parameters

    values = decode_parameters(["address", "uint256"], parameter_block)
"""

import logging
from typing import Sequence

from eth_abi.grammar import ABIType, BasicType, TupleType

from ..exceptions import InvalidOffsetError, TruncatedCalldataError, UnrecognizedAbiTypeError
from .cursor import CalldataCursor
from .types import array_dimension, head_size, parse_type_tag
from .values import (
    AbiValue,
    AddressValue,
    ArrayValue,
    BoolValue,
    BytesValue,
    IntValue,
    StringValue,
    TupleValue,
    UIntValue,
    UnparsedValue,
)

logger = logging.getLogger(__name__)


class ParameterWalker:
    """
    Decoder for the parameter block of one function signature.

    The walker holds only the parameter type list; walk() keeps all of its
    state local, so one walker can decode any number of buffers, concurrently
    or not.
    """

    def __init__(self, parameter_types: Sequence[str]):
        self.parameter_types = tuple(parameter_types)

    def walk(self, data: bytes) -> list[AbiValue]:
        """
        Decode a parameter block (calldata with the selector removed).

        Args:
            data: ABI-encoded parameters

        Returns:
            Decoded values, positionally aligned with parameter_types

        Raises:
            TruncatedCalldataError: If any head word, offset, length or body
                lies outside the buffer
            InvalidOffsetError: If a dynamic offset points into the head region

        Notes:
            - An unrecognized type tag still consumes one head word and is
              returned as UnparsedValue so later parameters stay aligned
        """
        cursor = CalldataCursor(data)
        values: list[AbiValue | None] = []
        pending: list[tuple[int, ABIType, int]] = []

        # Pass 1: head scan
        for index, type_tag in enumerate(self.parameter_types):
            try:
                abi_type = parse_type_tag(type_tag)
            except UnrecognizedAbiTypeError as e:
                raw = cursor.read_word()
                logger.warning(f"Parameter {index}: {e}; recording as unparsed")
                values.append(UnparsedValue(type_tag=type_tag, raw=raw, reason=str(e)))
                continue

            if abi_type.is_dynamic:
                offset = cursor.read_uint()
                logger.debug(f"Parameter {index} ({type_tag}): tail offset {offset}")
                pending.append((index, abi_type, offset))
                values.append(None)
            else:
                values.append(_decode_value(abi_type, cursor))

        # Pass 2: tail resolution
        head_end = cursor.position
        for index, abi_type, offset in pending:
            values[index] = _resolve_tail(abi_type, cursor, offset, head_end)

        return values


def decode_parameters(parameter_types: Sequence[str], data: bytes) -> list[AbiValue]:
    """Decode an ABI parameter block for the given type tags."""
    return ParameterWalker(parameter_types).walk(data)


def _resolve_tail(
    abi_type: ABIType, block: CalldataCursor, offset: int, head_end: int
) -> AbiValue:
    if offset < head_end:
        raise InvalidOffsetError(
            f"Offset {offset} for {abi_type.to_type_str()} points into the "
            f"{head_end}-byte head region"
        )
    return _decode_value(abi_type, block.child(offset))


def _decode_sequence(types: Sequence[ABIType], block: CalldataCursor) -> list[AbiValue]:
    """Decode a tuple-like sequence (head then tails) starting at the cursor."""
    head_start = block.position
    values: list[AbiValue | None] = []
    pending: list[tuple[int, ABIType, int]] = []

    for index, abi_type in enumerate(types):
        if abi_type.is_dynamic:
            pending.append((index, abi_type, block.read_uint()))
            values.append(None)
        else:
            values.append(_decode_value(abi_type, block))

    head_end = block.position - head_start
    for index, abi_type, offset in pending:
        values[index] = _resolve_tail(abi_type, block, offset, head_end)

    return values


def _decode_value(abi_type: ABIType, cursor: CalldataCursor) -> AbiValue:
    """Decode one value whose encoding starts at the cursor position."""
    if abi_type.is_array:
        return _decode_array(abi_type, cursor)

    if isinstance(abi_type, TupleType):
        return TupleValue(items=tuple(_decode_sequence(abi_type.components, cursor)))

    if abi_type.is_dynamic:
        return _decode_dynamic_bytes(abi_type, cursor)

    return decode_word(abi_type, cursor.read_word())


def _decode_array(abi_type: ABIType, cursor: CalldataCursor) -> ArrayValue:
    item_type = abi_type.item_type
    size = array_dimension(abi_type)

    if size is None:
        length = cursor.read_uint()
        body = cursor.child(cursor.position)
    else:
        length = size
        body = cursor

    needed = length * head_size(item_type)
    if needed > body.remaining:
        raise TruncatedCalldataError(
            f"Array {abi_type.to_type_str()} of {length} elements needs at least "
            f"{needed} bytes, only {body.remaining} remain"
        )

    items = _decode_sequence([item_type] * length, body)
    return ArrayValue(
        element_type=item_type.to_type_str(), items=tuple(items), size=size
    )


def _decode_dynamic_bytes(abi_type: BasicType, cursor: CalldataCursor) -> AbiValue:
    length = cursor.read_uint()
    if length > cursor.remaining:
        raise TruncatedCalldataError(
            f"{abi_type.base} length {length} exceeds the {cursor.remaining} "
            f"bytes remaining"
        )
    data = cursor.read_bytes(length)

    if abi_type.base == "string":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning(f"String parameter is not valid UTF-8 ({e}); replacing bytes")
            text = data.decode("utf-8", errors="replace")
        return StringValue(value=text, length=length)

    return BytesValue(value=data, size=None)


def decode_word(abi_type: BasicType, word: bytes) -> AbiValue:
    """
    Decode a static basic type from its 32-byte head word.

    Notes:
        - address: right-aligned, the last 20 bytes
        - bool: permissive, only the least-significant byte is inspected and
          any non-zero value is true
        - uintN / intN: arbitrary precision, intN as two's complement. A word
          whose value does not fit in N bits is malformed padding and is
          returned as UnparsedValue
        - bytesN: left-aligned, the first N bytes
    """
    base = abi_type.base

    if base == "uint":
        value = int.from_bytes(word, byteorder="big")
        if value >> abi_type.sub:
            return _out_of_range(abi_type, word)
        return UIntValue(value=value, width=abi_type.sub)
    if base == "int":
        value = int.from_bytes(word, byteorder="big", signed=True)
        bound = 1 << (abi_type.sub - 1)
        if not -bound <= value < bound:
            return _out_of_range(abi_type, word)
        return IntValue(value=value, width=abi_type.sub)
    if base == "address":
        return AddressValue(value=word[-20:])
    if base == "bool":
        return BoolValue(value=word[-1] != 0)
    if base == "bytes":
        return BytesValue(value=word[: abi_type.sub], size=abi_type.sub)

    raise UnrecognizedAbiTypeError(abi_type.to_type_str())


def _out_of_range(abi_type: BasicType, word: bytes) -> UnparsedValue:
    type_tag = abi_type.to_type_str()
    logger.warning(f"Value 0x{word.hex()} does not fit in {type_tag}; recording as unparsed")
    return UnparsedValue(type_tag=type_tag, raw=word, reason=f"value out of range for {type_tag}")
