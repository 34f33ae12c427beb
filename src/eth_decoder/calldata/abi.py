"""
Decode calldata against a contract ABI.

The ABI's function entries are indexed by selector (keccak-256 of the
canonical signature, tuple components collapsed to "(t1,t2)"), so decoding
needs no network lookup. The decoder also works as a signature resolver and
can be plugged into decode_calldata().

Usage:
    from eth_decoder.calldata.abi import AbiCalldataDecoder

    decoder = AbiCalldataDecoder.from_file("abis/l2_output_oracle.json")
    call = decoder.decode("0x9aaab648...")
    print(call.name, call.parameter_names)
"""

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from eth_utils.abi import collapse_if_tuple
from hexbytes import HexBytes

from ..core.utils import load_abi
from .decoder import decode_calldata
from .signature import canonical_signature, function_selector
from .values import FunctionCall

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbiFunction:
    """A callable function entry of an ABI."""

    name: str
    parameter_types: tuple[str, ...]
    parameter_names: tuple[str, ...]
    state_mutability: str

    @property
    def signature(self) -> str:
        return canonical_signature(self.name, list(self.parameter_types))

    @property
    def selector(self) -> bytes:
        return function_selector(self.signature)


def parse_abi_function(entry: dict[str, Any]) -> AbiFunction:
    """
    Build an AbiFunction from one ABI JSON entry.

    Raises:
        ValueError: If the entry has no name or an input has no type
    """
    name = entry.get("name")
    if not name:
        raise ValueError(f"ABI function entry has no name: {entry}")

    inputs = entry.get("inputs") or []
    try:
        parameter_types = tuple(collapse_if_tuple(param) for param in inputs)
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid inputs for ABI function {name}: {e}") from e

    return AbiFunction(
        name=name,
        parameter_types=parameter_types,
        parameter_names=tuple(param.get("name", "") for param in inputs),
        state_mutability=_state_mutability(entry),
    )


def _state_mutability(entry: dict[str, Any]) -> str:
    if entry.get("stateMutability"):
        return entry["stateMutability"]
    # Pre-0.4.16 compilers emit constant/payable flags instead
    if entry.get("constant"):
        return "view"
    if entry.get("payable"):
        return "payable"
    return "nonpayable"


class AbiCalldataDecoder:
    """Calldata decoder backed by a contract ABI."""

    def __init__(self, abi: list[dict[str, Any]]):
        """
        Index the function entries of an ABI.

        Args:
            abi: Parsed ABI (list of entry dictionaries)

        Notes:
            - Entries without a "type" are functions, per the ABI JSON format
            - Constructors, events, errors, fallback and receive are skipped
        """
        self._functions: dict[bytes, AbiFunction] = {}

        for entry in abi:
            if entry.get("type", "function") != "function":
                continue

            function = parse_abi_function(entry)
            selector = function.selector
            if selector in self._functions:
                logger.warning(
                    f"Selector collision 0x{selector.hex()}: "
                    f"{self._functions[selector].signature} and {function.signature}"
                )
                continue
            self._functions[selector] = function

        logger.debug(f"Indexed {len(self._functions)} ABI functions")

    @classmethod
    def from_json(cls, abi_json: str) -> "AbiCalldataDecoder":
        """Create a decoder from ABI JSON text."""
        abi = json.loads(abi_json)
        if not isinstance(abi, list):
            raise ValueError(f"ABI JSON must be an array, got {type(abi).__name__}")
        return cls(abi)

    @classmethod
    def from_file(cls, abi_path: str | Path) -> "AbiCalldataDecoder":
        """Create a decoder from an ABI JSON file."""
        return cls(load_abi(abi_path))

    @property
    def functions(self) -> list[AbiFunction]:
        return list(self._functions.values())

    def get_function(self, selector: bytes) -> AbiFunction | None:
        return self._functions.get(selector)

    def resolve(self, selector: bytes) -> list[str]:
        """Signature resolver: the matching ABI signature, or an empty list."""
        function = self._functions.get(selector)
        return [function.signature] if function else []

    def decode(self, calldata: str | bytes | HexBytes) -> FunctionCall:
        """
        Decode calldata for one of the ABI's functions.

        Returns:
            FunctionCall with parameter names from the ABI, or a selector-only
            FunctionCall when the selector is not in the ABI

        Raises:
            Same hard failures as decode_calldata()
        """
        call = decode_calldata(calldata, resolver=self.resolve)
        function = self._functions.get(call.selector)
        if function is None:
            return call
        return replace(call, parameter_names=function.parameter_names)
