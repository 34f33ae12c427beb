"""
Command line interface for decoding raw transactions and calldata.

Usage:
    eth-decode tx 0xf86c0985...
    eth-decode tx 0x02f8b701... --decode-input --offline
    eth-decode calldata 0xa9059cbb... --signature "transfer(address,uint256)"
    eth-decode calldata 0x9aaab648... --abi abis/l2_output_oracle.json
    eth-decode batch data/raw/transactions.txt --output data/decoded.csv

Settings are read from --config (YAML); without it the defaults apply and
signatures are looked up on 4byte.directory.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from .calldata.abi import AbiCalldataDecoder
from .calldata.decoder import decode_calldata, decode_with_signature
from .calldata.registry import FourByteRegistry, InMemoryResolver, SignatureResolver
from .calldata.values import FunctionCall
from .core.config import DecoderConfig
from .core.inputs import load_raw_inputs
from .core.utils import setup_logging
from .exceptions import DecoderError
from .export import decode_transactions_batch, export_to_csv
from .render import render_call, render_transaction
from .transactions.decoders import decode_transaction

logger = logging.getLogger(__name__)


def build_resolver(config: DecoderConfig, offline: bool = False) -> SignatureResolver:
    """
    Choose the signature resolver for a command.

    With --offline, or when the registry is disabled in the config, only the
    bundled signatures are used; otherwise 4byte.directory is queried.
    """
    if offline or not config.registry.enabled:
        logger.info("Using bundled signatures (registry disabled)")
        return InMemoryResolver.with_known_signatures()
    return FourByteRegistry.from_config(config.registry)


def _decode_call(
    data: bytes | str,
    config: DecoderConfig,
    offline: bool,
    abi_path: Path | None,
    signature: str | None = None,
) -> FunctionCall:
    if signature is not None:
        return decode_with_signature(data, signature)
    if abi_path is not None:
        return AbiCalldataDecoder.from_file(abi_path).decode(data)
    return decode_calldata(data, build_resolver(config, offline))


def _emit(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to decoder config YAML file",
)
@click.option(
    "--log-level",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Logging level (overrides config file)",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None, log_level: str | None) -> None:
    """Decode raw Ethereum transactions and contract calldata."""
    try:
        cfg = DecoderConfig.from_yaml(config) if config else DecoderConfig()
    except ValueError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    setup_logging(level=log_level or cfg.logging.level, log_format=cfg.logging.format)
    ctx.obj = cfg


@main.command()
@click.argument("raw_tx")
@click.option(
    "--decode-input",
    is_flag=True,
    default=False,
    help="Also decode the transaction's input data as a contract call",
)
@click.option(
    "--abi",
    "abi_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Contract ABI JSON used to decode the input data",
)
@click.option(
    "--offline", is_flag=True, default=False, help="Do not query the signature registry"
)
@click.pass_obj
def tx(
    cfg: DecoderConfig,
    raw_tx: str,
    decode_input: bool,
    abi_path: Path | None,
    offline: bool,
) -> None:
    """Decode a raw signed transaction (legacy, EIP-2930 or EIP-1559)."""
    checksum = cfg.output.checksum_addresses

    try:
        transaction = decode_transaction(raw_tx)
        result = render_transaction(transaction, checksum=checksum)

        if decode_input and len(transaction.data) >= 4:
            call = _decode_call(transaction.data, cfg, offline, abi_path)
            result["call"] = render_call(call, checksum=checksum)
    except (DecoderError, ValueError) as e:
        logger.error(f"Failed to decode transaction: {e}")
        sys.exit(1)

    _emit(result)


@main.command()
@click.argument("data")
@click.option(
    "--abi",
    "abi_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Contract ABI JSON used to resolve the selector",
)
@click.option(
    "--signature",
    default=None,
    help='Text signature to decode against, e.g. "transfer(address,uint256)"',
)
@click.option(
    "--offline", is_flag=True, default=False, help="Do not query the signature registry"
)
@click.pass_obj
def calldata(
    cfg: DecoderConfig,
    data: str,
    abi_path: Path | None,
    signature: str | None,
    offline: bool,
) -> None:
    """Decode contract calldata (selector followed by ABI-encoded parameters)."""
    if abi_path is not None and signature is not None:
        raise click.UsageError("--abi and --signature are mutually exclusive")

    try:
        call = _decode_call(data, cfg, offline, abi_path, signature)
    except (DecoderError, ValueError) as e:
        logger.error(f"Failed to decode calldata: {e}")
        sys.exit(1)

    _emit(render_call(call, checksum=cfg.output.checksum_addresses))


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    required=True,
    help="Output CSV file path for decoded transactions",
)
@click.option(
    "--decode-input",
    is_flag=True,
    default=False,
    help="Also decode each transaction's input data",
)
@click.option(
    "--offline", is_flag=True, default=False, help="Do not query the signature registry"
)
@click.pass_obj
def batch(
    cfg: DecoderConfig,
    input_file: Path,
    output: Path,
    decode_input: bool,
    offline: bool,
) -> None:
    """Decode a file of raw transactions (one hex blob per line) into a CSV."""
    logger.info(f"Input file: {input_file}")
    logger.info(f"Output file: {output}")

    raw_transactions = load_raw_inputs(input_file)
    if not raw_transactions:
        logger.error(f"No transactions found in {input_file}")
        sys.exit(1)

    resolver = build_resolver(cfg, offline) if decode_input else None
    rows = decode_transactions_batch(raw_transactions, resolver=resolver)
    export_to_csv(rows, output)

    failed = sum(1 for row in rows if row["status"] == "error")
    logger.info(f"Batch complete: {len(rows) - failed} decoded, {failed} failed")


if __name__ == "__main__":
    main()
