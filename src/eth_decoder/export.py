"""
Batch decoding and CSV export of raw transactions.

This module decodes many raw transactions in one pass (optionally decoding
their input data as calldata) and writes a flat CSV for further analysis.

Usage:
    from eth_decoder.export import decode_transactions_batch, export_to_csv

    rows = decode_transactions_batch(raw_transactions)
    export_to_csv(rows, "data/decoded.csv")
"""

import logging
from pathlib import Path
from typing import Any

import pandas as pd
from web3 import Web3

from .calldata.decoder import decode_calldata
from .calldata.registry import SignatureResolver
from .calldata.values import FunctionCall
from .core.normalization import normalize_hex_field
from .exceptions import DecoderError
from .render import format_address, render_value
from .transactions.decoders import decode_transaction
from .transactions.models import Transaction

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "tx_hash",
    "type",
    "chain_id",
    "nonce",
    "to",
    "value",
    "gas_limit",
    "gas_price",
    "max_priority_fee_per_gas",
    "max_fee_per_gas",
    "access_list_size",
    "data_size",
    "selector",
    "function",
    "arguments",
    "status",
    "error",
]


def export_to_csv(rows: list[dict[str, Any]], output_path: str | Path) -> None:
    """
    Export decoded transaction rows to a CSV file.

    Args:
        rows: Row dictionaries from transaction_to_csv_row() or
            decode_transactions_batch()
        output_path: Path to output CSV file (will create parent directories)

    Raises:
        ValueError: If rows is empty
        IOError: If file cannot be written

    Notes:
        - Overwrites existing file at output_path
        - Integer columns are written as decimal text so 256-bit values
          are not coerced to floats
    """
    if not rows:
        raise ValueError("Cannot export empty transaction list")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    df.to_csv(output_path, index=False)

    logger.info(f"Exported {len(rows)} transactions to {output_path}")


def transaction_to_csv_row(
    tx: Transaction, raw_tx: bytes, call: FunctionCall | None = None
) -> dict[str, Any]:
    """
    Convert a decoded transaction (and optionally its decoded call) to a CSV row.

    Args:
        tx: Decoded transaction
        raw_tx: Raw transaction bytes (used for the transaction hash)
        call: Decoded input data, if the transaction carries calldata

    Returns:
        Dictionary keyed by CSV_COLUMNS; fields absent from the envelope are empty
    """
    row: dict[str, Any] = {
        "tx_hash": "0x" + bytes(Web3.keccak(raw_tx)).hex(),
        "type": tx.transaction_type.label,
        "chain_id": _text(getattr(tx, "chain_id", None)),
        "nonce": str(tx.nonce),
        "to": format_address(tx.to) or "",
        "value": str(tx.value),
        "gas_limit": str(tx.gas_limit),
        "gas_price": _text(getattr(tx, "gas_price", None)),
        "max_priority_fee_per_gas": _text(getattr(tx, "max_priority_fee_per_gas", None)),
        "max_fee_per_gas": _text(getattr(tx, "max_fee_per_gas", None)),
        "access_list_size": _text(
            len(tx.access_list) if hasattr(tx, "access_list") else None
        ),
        "data_size": len(tx.data),
        "selector": "0x" + tx.data[:4].hex() if len(tx.data) >= 4 else "",
        "function": "",
        "arguments": "",
        "status": "ok",
        "error": "",
    }

    if call is not None:
        row["function"] = call.signature or ""
        row["arguments"] = "; ".join(render_value(v) for v in call.parameter_values)

    return row


def decode_transactions_batch(
    raw_transactions: list[str | bytes],
    resolver: SignatureResolver | None = None,
) -> list[dict[str, Any]]:
    """
    Decode multiple raw transactions into CSV rows.

    Args:
        raw_transactions: Raw transactions as hex text or bytes
        resolver: Optional signature resolver; when given, input data of
            each transaction is decoded as calldata

    Returns:
        One row per input. Inputs that fail to decode produce a row with
        status "error" and the error message.

    Notes:
        - A failing transaction does not stop the batch
        - Calldata failures keep the transaction fields and record the error
    """
    rows = []
    failed_count = 0

    for index, raw in enumerate(raw_transactions):
        try:
            raw_bytes = normalize_hex_field(raw)
            tx = decode_transaction(raw_bytes)
        except DecoderError as e:
            logger.warning(f"Transaction {index}: {e}")
            rows.append(_error_row(str(e)))
            failed_count += 1
            continue

        call = None
        row_error = ""
        if resolver is not None and len(tx.data) >= 4:
            try:
                call = decode_calldata(tx.data, resolver)
            except DecoderError as e:
                logger.warning(f"Transaction {index}: calldata not decoded: {e}")
                row_error = str(e)

        row = transaction_to_csv_row(tx, raw_bytes, call)
        if row_error:
            row["status"] = "calldata_error"
            row["error"] = row_error
        rows.append(row)

    logger.info(
        f"Decoded {len(rows) - failed_count} transactions ({failed_count} failed)"
    )
    return rows


def _error_row(message: str) -> dict[str, Any]:
    row = {column: "" for column in CSV_COLUMNS}
    row["status"] = "error"
    row["error"] = message
    return row


def _text(value: Any) -> str:
    return "" if value is None else str(value)
