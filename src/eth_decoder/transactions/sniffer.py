"""
Transaction envelope detection.

The three transaction shapes need different field counts and are not
self-describing past their first byte, so the envelope type is sniffed
before any RLP parsing:

- 0x01 -> EIP-2930 access-list transaction
- 0x02 -> EIP-1559 fee-market transaction
- >= 0x80 -> legacy transaction (the byte is an RLP list/string prefix)
"""

import logging

from ..exceptions import EmptyInputError, UnsupportedTransactionTypeError
from .models import TransactionType

logger = logging.getLogger(__name__)

# Smallest RLP prefix byte; anything below it on the wire is an envelope type
RLP_PREFIX_MIN = 0x80


def sniff_transaction_type(raw_tx: bytes) -> TransactionType:
    """
    Classify a raw transaction by its leading byte.

    Args:
        raw_tx: Raw transaction bytes, including any type byte

    Returns:
        The detected TransactionType

    Raises:
        EmptyInputError: If raw_tx is empty
        UnsupportedTransactionTypeError: If the leading byte is neither a
            known envelope type nor an RLP prefix
    """
    if not raw_tx:
        raise EmptyInputError("transaction")

    first = raw_tx[0]

    if first >= RLP_PREFIX_MIN:
        tx_type = TransactionType.LEGACY
    elif first == TransactionType.ACCESS_LIST:
        tx_type = TransactionType.ACCESS_LIST
    elif first == TransactionType.FEE_MARKET:
        tx_type = TransactionType.FEE_MARKET
    else:
        raise UnsupportedTransactionTypeError(first)

    logger.debug(f"Detected {tx_type.label} transaction (leading byte 0x{first:02x})")
    return tx_type
