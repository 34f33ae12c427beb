"""
Decode raw Ethereum transactions.

This module turns raw transaction bytes into one of the three envelope
dataclasses (legacy, EIP-2930, EIP-1559). Each envelope is described by a
TransactionLayout: an ordered table mapping every logical field to its RLP
item index and field kind. A single routine decodes any layout, so adding a
new envelope type means adding a table, not a new decode function.

Usage:
    from eth_decoder.transactions.decoders import decode_transaction

    tx = decode_transaction("0xf86c0985...")
    print(tx.nonce, tx.gas_price, tx.to)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hexbytes import HexBytes

from ..core.normalization import normalize_hex_field
from .frame import UINT64_BITS, RlpFrameReader
from .models import (
    AccessListTransaction,
    FeeMarketTransaction,
    LegacyTransaction,
    Transaction,
    TransactionType,
)
from .sniffer import sniff_transaction_type

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    """How a transaction field is stored in its RLP item."""

    UINT = "uint"  # uint256, canonical big-endian
    CHAIN_ID = "chain_id"  # uint64, canonical big-endian
    ADDRESS = "address"  # 20 bytes, or empty for contract creation
    BYTES = "bytes"
    ACCESS_LIST = "access_list"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    index: int
    kind: FieldKind


@dataclass(frozen=True)
class TransactionLayout:
    """Field table for one transaction envelope."""

    transaction_type: TransactionType
    model: type
    fields: tuple[FieldSpec, ...]

    @property
    def item_count(self) -> int:
        return len(self.fields)

    def index_of(self, name: str) -> int:
        """Return the RLP item index of a named field."""
        for spec in self.fields:
            if spec.name == name:
                return spec.index
        raise KeyError(f"{self.transaction_type.label} transactions have no field {name!r}")


def _layout(
    transaction_type: TransactionType, model: type, *fields: tuple[str, FieldKind]
) -> TransactionLayout:
    return TransactionLayout(
        transaction_type=transaction_type,
        model=model,
        fields=tuple(
            FieldSpec(name=name, index=index, kind=kind)
            for index, (name, kind) in enumerate(fields)
        ),
    )


LEGACY_LAYOUT = _layout(
    TransactionType.LEGACY,
    LegacyTransaction,
    ("nonce", FieldKind.UINT),
    ("gas_price", FieldKind.UINT),
    ("gas_limit", FieldKind.UINT),
    ("to", FieldKind.ADDRESS),
    ("value", FieldKind.UINT),
    ("data", FieldKind.BYTES),
    ("v", FieldKind.UINT),
    ("r", FieldKind.UINT),
    ("s", FieldKind.UINT),
)

ACCESS_LIST_LAYOUT = _layout(
    TransactionType.ACCESS_LIST,
    AccessListTransaction,
    ("chain_id", FieldKind.CHAIN_ID),
    ("nonce", FieldKind.UINT),
    ("gas_price", FieldKind.UINT),
    ("gas_limit", FieldKind.UINT),
    ("to", FieldKind.ADDRESS),
    ("value", FieldKind.UINT),
    ("data", FieldKind.BYTES),
    ("access_list", FieldKind.ACCESS_LIST),
    ("v", FieldKind.UINT),
    ("r", FieldKind.UINT),
    ("s", FieldKind.UINT),
)

FEE_MARKET_LAYOUT = _layout(
    TransactionType.FEE_MARKET,
    FeeMarketTransaction,
    ("chain_id", FieldKind.CHAIN_ID),
    ("nonce", FieldKind.UINT),
    ("max_priority_fee_per_gas", FieldKind.UINT),
    ("max_fee_per_gas", FieldKind.UINT),
    ("gas_limit", FieldKind.UINT),
    ("to", FieldKind.ADDRESS),
    ("value", FieldKind.UINT),
    ("data", FieldKind.BYTES),
    ("access_list", FieldKind.ACCESS_LIST),
    ("v", FieldKind.UINT),
    ("r", FieldKind.UINT),
    ("s", FieldKind.UINT),
)

LAYOUTS: dict[TransactionType, TransactionLayout] = {
    layout.transaction_type: layout
    for layout in (LEGACY_LAYOUT, ACCESS_LIST_LAYOUT, FEE_MARKET_LAYOUT)
}


def decode_with_layout(payload: bytes, layout: TransactionLayout) -> Transaction:
    """
    Decode an RLP payload according to a transaction layout.

    Args:
        payload: RLP bytes of the transaction body (type byte stripped)
        layout: Field table of the expected envelope

    Returns:
        Instance of layout.model with every field populated

    Raises:
        MalformedFrameError: If the item count does not match the layout
        RlpDecodeError: If any field fails to decode (first failure wins)
    """
    frame = RlpFrameReader(payload)
    frame.expect_item_count(layout.item_count)

    values = {spec.name: _read_field(frame, spec) for spec in layout.fields}
    return layout.model(**values)


def _read_field(frame: RlpFrameReader, spec: FieldSpec) -> Any:
    if spec.kind is FieldKind.UINT:
        return frame.uint(spec.index, spec.name)
    if spec.kind is FieldKind.CHAIN_ID:
        return frame.uint(spec.index, spec.name, bits=UINT64_BITS)
    if spec.kind is FieldKind.ADDRESS:
        return frame.address(spec.index, spec.name)
    if spec.kind is FieldKind.BYTES:
        return frame.binary(spec.index, spec.name)
    if spec.kind is FieldKind.ACCESS_LIST:
        return frame.access_list(spec.index, spec.name)
    raise ValueError(f"Unknown field kind: {spec.kind}")


def decode_legacy_transaction(payload: bytes) -> LegacyTransaction:
    """Decode a legacy transaction: a bare 9-item RLP list."""
    return decode_with_layout(payload, LEGACY_LAYOUT)


def decode_access_list_transaction(payload: bytes) -> AccessListTransaction:
    """Decode an EIP-2930 body: the 11-item RLP list following the 0x01 byte."""
    return decode_with_layout(payload, ACCESS_LIST_LAYOUT)


def decode_fee_market_transaction(payload: bytes) -> FeeMarketTransaction:
    """Decode an EIP-1559 body: the 12-item RLP list following the 0x02 byte."""
    return decode_with_layout(payload, FEE_MARKET_LAYOUT)


def decode_transaction(raw_tx: str | bytes | HexBytes) -> Transaction:
    """
    Decode a raw signed transaction of any supported envelope type.

    Args:
        raw_tx: Raw transaction as bytes, HexBytes, or hex text (0x optional)

    Returns:
        LegacyTransaction, AccessListTransaction or FeeMarketTransaction

    Raises:
        InvalidHexEncodingError: If hex text is malformed
        EmptyInputError: If the transaction is empty
        UnsupportedTransactionTypeError: If the envelope type is unknown
        MalformedFrameError: If the field count is wrong for the envelope
        RlpDecodeError: If a field cannot be decoded

    Notes:
        - The input is copied to immutable bytes; decoding has no side effects
        - A failure never yields a partially populated transaction
    """
    raw = normalize_hex_field(raw_tx)
    tx_type = sniff_transaction_type(raw)
    layout = LAYOUTS[tx_type]

    payload = raw if tx_type is TransactionType.LEGACY else raw[1:]
    tx = decode_with_layout(payload, layout)

    logger.debug(
        f"Decoded {tx_type.label} transaction: nonce={tx.nonce}, "
        f"{len(tx.data)} bytes of input data"
    )
    return tx
