"""
ABI calldata decoding.

This package provides selector extraction, signature resolution and a
two-pass ABI parameter decoder, driven either by a text signature or by a
contract ABI.
"""

from .abi import AbiCalldataDecoder, AbiFunction
from .decoder import decode_calldata, decode_with_signature
from .registry import FourByteRegistry, InMemoryResolver, SignatureResolver
from .selector import extract_selector
from .signature import function_selector, parse_function_name, parse_parameter_types
from .values import (
    AbiValue,
    AddressValue,
    ArrayValue,
    BoolValue,
    BytesValue,
    FunctionCall,
    IntValue,
    StringValue,
    TupleValue,
    UIntValue,
    UnparsedValue,
)
from .walker import ParameterWalker, decode_parameters

__all__ = [
    "decode_calldata",
    "decode_with_signature",
    "decode_parameters",
    "extract_selector",
    "function_selector",
    "parse_function_name",
    "parse_parameter_types",
    "AbiCalldataDecoder",
    "AbiFunction",
    "FourByteRegistry",
    "InMemoryResolver",
    "SignatureResolver",
    "ParameterWalker",
    "FunctionCall",
    "AbiValue",
    "AddressValue",
    "ArrayValue",
    "BoolValue",
    "BytesValue",
    "IntValue",
    "StringValue",
    "TupleValue",
    "UIntValue",
    "UnparsedValue",
]
