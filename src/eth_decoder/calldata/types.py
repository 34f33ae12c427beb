"""
ABI type tag recognition.

Type tags are parsed with eth_abi's type grammar (so "uint" normalizes to
"uint256", "bytes33" is rejected, tuples and nested arrays are understood)
and then restricted to the families this decoder knows how to walk:
bool, uintN, intN, address, bytesN, bytes, string, and arrays / tuples built
from them.
"""

from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import ABIType, BasicType, TupleType, normalize, parse

from ..exceptions import UnrecognizedAbiTypeError
from .cursor import WORD_SIZE

SUPPORTED_BASES = frozenset({"bool", "uint", "int", "address", "bytes", "string"})


def parse_type_tag(type_tag: str) -> ABIType:
    """
    Parse and validate an ABI type tag.

    Args:
        type_tag: Type string such as "uint256", "address[]", "(uint8,bytes)[2]"

    Returns:
        The parsed eth_abi type (BasicType or TupleType)

    Raises:
        UnrecognizedAbiTypeError: If the tag is malformed, invalid (e.g. uint7)
            or outside the supported type families (e.g. fixed128x18)
    """
    tag = type_tag.strip()
    if not tag:
        raise UnrecognizedAbiTypeError(type_tag, "empty type tag")

    try:
        abi_type = parse(normalize(tag))
        abi_type.validate()
    except (ParseError, ABITypeError, ValueError) as e:
        # eth_abi reports some grammar violations, such as "()", as ValueError
        raise UnrecognizedAbiTypeError(type_tag, str(e)) from e

    _check_supported(abi_type, type_tag)
    return abi_type


def _check_supported(abi_type: ABIType, type_tag: str) -> None:
    if isinstance(abi_type, TupleType):
        for component in abi_type.components:
            _check_supported(component, type_tag)
    elif isinstance(abi_type, BasicType):
        if abi_type.base not in SUPPORTED_BASES:
            raise UnrecognizedAbiTypeError(
                type_tag, f"unsupported base type {abi_type.base!r}"
            )
    else:
        raise UnrecognizedAbiTypeError(type_tag)


def array_dimension(abi_type: ABIType) -> int | None:
    """Length of the outermost array dimension, or None for a dynamic T[]."""
    last = abi_type.arrlist[-1]
    return last[0] if last else None


def static_size(abi_type: ABIType) -> int:
    """Number of bytes a static type occupies inline in its enclosing head."""
    if abi_type.is_array:
        return array_dimension(abi_type) * static_size(abi_type.item_type)
    if isinstance(abi_type, TupleType):
        return sum(head_size(component) for component in abi_type.components)
    return WORD_SIZE


def head_size(abi_type: ABIType) -> int:
    """Bytes a value of this type takes in a head region (one word if dynamic)."""
    if abi_type.is_dynamic:
        return WORD_SIZE
    return static_size(abi_type)
