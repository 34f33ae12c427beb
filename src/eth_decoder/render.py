"""
Presentation of decoded values.

Decoders return typed dataclasses; this module turns them into text and
JSON-ready dictionaries:
- integers in decimal
- addresses as 0x-prefixed hex (EIP-55 checksummed by default)
- byte strings as 0x-prefixed hex
- strings as UTF-8 text
- arrays in brackets, tuples in parentheses

Usage:
    from eth_decoder.render import render_call, render_transaction

    print(json.dumps(render_transaction(tx), indent=2))
"""

from typing import Any

from web3 import Web3

from .calldata.values import (
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
from .transactions.models import Transaction


def format_address(address: bytes | None, checksum: bool = True) -> str | None:
    """Format a 20-byte address, or return None for a missing address."""
    if address is None:
        return None
    hex_address = "0x" + address.hex()
    return Web3.to_checksum_address(hex_address) if checksum else hex_address


def render_value(value: AbiValue, checksum: bool = True) -> str:
    """
    Render a decoded ABI value as text.

    Examples:
        UIntValue(1000) -> "1000"
        ArrayValue("uint256", (UIntValue(1), UIntValue(2))) -> "[1, 2]"
    """
    if isinstance(value, BoolValue):
        return "true" if value.value else "false"
    if isinstance(value, (UIntValue, IntValue)):
        return str(value.value)
    if isinstance(value, AddressValue):
        return format_address(value.value, checksum)
    if isinstance(value, BytesValue):
        return "0x" + value.value.hex()
    if isinstance(value, StringValue):
        return value.value
    if isinstance(value, ArrayValue):
        return "[" + ", ".join(render_value(item, checksum) for item in value.items) + "]"
    if isinstance(value, TupleValue):
        return "(" + ", ".join(render_value(item, checksum) for item in value.items) + ")"
    if isinstance(value, UnparsedValue):
        return f"<unparsed {value.type_tag}: 0x{value.raw.hex()}>"
    raise TypeError(f"Cannot render {type(value).__name__}")


def value_to_json(value: AbiValue, checksum: bool = True) -> Any:
    """
    Convert a decoded ABI value to a JSON-serializable structure.

    Integers are emitted as decimal strings so 256-bit values survive
    JSON consumers with 53-bit number precision.
    """
    if isinstance(value, BoolValue):
        return value.value
    if isinstance(value, (ArrayValue, TupleValue)):
        return [value_to_json(item, checksum) for item in value.items]
    if isinstance(value, UnparsedValue):
        return {"unparsed": value.type_tag, "raw": "0x" + value.raw.hex()}
    return render_value(value, checksum)


def render_call(call: FunctionCall, checksum: bool = True) -> dict[str, Any]:
    """
    Convert a FunctionCall to a dictionary.

    Returns:
        {
            "selector": "0x...",
            "signature": str | None,
            "function": str | None,
            "parameters": [{"name": str, "type": str, "value": ...}],
            "candidates": [str]
        }
    """
    names = call.parameter_names or ("",) * len(call.parameter_types)
    parameters = [
        {
            "name": name or f"param{index}",
            "type": type_tag,
            "value": value_to_json(value, checksum),
        }
        for index, (name, type_tag, value) in enumerate(
            zip(names, call.parameter_types, call.parameter_values)
        )
    ]

    return {
        "selector": call.selector_hex,
        "signature": call.signature,
        "function": call.name,
        "parameters": parameters,
        "candidates": list(call.candidates),
    }


def render_transaction(tx: Transaction, checksum: bool = True) -> dict[str, Any]:
    """
    Convert a decoded transaction to a dictionary.

    Only the fields of the transaction's own envelope are present: a legacy
    transaction has gas_price and no chain_id, an EIP-1559 transaction has
    max_fee_per_gas / max_priority_fee_per_gas and no gas_price.
    """
    rendered: dict[str, Any] = {"type": tx.transaction_type.label}

    for name, value in vars(tx).items():
        if name == "to":
            rendered[name] = format_address(value, checksum)
        elif name == "data":
            rendered[name] = "0x" + value.hex()
        elif name == "access_list":
            rendered[name] = [
                {
                    "address": format_address(entry.address, checksum),
                    "storage_keys": ["0x" + key.hex() for key in entry.storage_keys],
                }
                for entry in value
            ]
        else:
            rendered[name] = value

    rendered["contract_creation"] = tx.is_contract_creation
    return rendered
