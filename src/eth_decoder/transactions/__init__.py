"""
Raw transaction decoding.

This package provides decoders for legacy, EIP-2930 and EIP-1559
transaction envelopes.
"""

from .decoders import (
    decode_access_list_transaction,
    decode_fee_market_transaction,
    decode_legacy_transaction,
    decode_transaction,
)
from .encoder import encode_transaction
from .models import (
    AccessListEntry,
    AccessListTransaction,
    FeeMarketTransaction,
    LegacyTransaction,
    Transaction,
    TransactionType,
)
from .sniffer import sniff_transaction_type

__all__ = [
    "decode_transaction",
    "decode_legacy_transaction",
    "decode_access_list_transaction",
    "decode_fee_market_transaction",
    "encode_transaction",
    "sniff_transaction_type",
    "AccessListEntry",
    "AccessListTransaction",
    "FeeMarketTransaction",
    "LegacyTransaction",
    "Transaction",
    "TransactionType",
]
