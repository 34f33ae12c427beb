"""
Re-encode decoded transactions.

Serializes a decoded envelope back to its raw wire form using the same field
layouts and RLP rules the decoders use, so decode(encode(tx)) == tx and
encode(decode(raw)) == raw for canonical input.
"""

from typing import Any

import rlp
from rlp.sedes import big_endian_int

from .decoders import LAYOUTS, FieldKind
from .models import AccessListEntry, Transaction, TransactionType


def encode_transaction(tx: Transaction) -> bytes:
    """
    Encode a transaction to raw bytes, prefixed with its type byte if typed.

    Args:
        tx: A decoded transaction envelope

    Returns:
        Raw transaction bytes
    """
    layout = LAYOUTS[tx.transaction_type]
    items = [_serialize_field(spec.kind, getattr(tx, spec.name)) for spec in layout.fields]
    payload = rlp.encode(items)

    if tx.transaction_type is TransactionType.LEGACY:
        return payload
    return bytes([tx.transaction_type]) + payload


def _serialize_field(kind: FieldKind, value: Any) -> Any:
    if kind in (FieldKind.UINT, FieldKind.CHAIN_ID):
        return big_endian_int.serialize(value)
    if kind is FieldKind.ADDRESS:
        return b"" if value is None else value
    if kind is FieldKind.BYTES:
        return value
    if kind is FieldKind.ACCESS_LIST:
        return [_serialize_access_entry(entry) for entry in value]
    raise ValueError(f"Unknown field kind: {kind}")


def _serialize_access_entry(entry: AccessListEntry) -> list:
    return [entry.address, list(entry.storage_keys)]
