"""
Utility functions for the decoder package.

This module provides:
- Logging configuration for the CLI
- ABI loading from JSON files
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def load_abi(abi_path: str | Path) -> list[dict[str, Any]]:
    """
    Load a contract ABI from a JSON file.

    Accepts either a bare ABI array or a compiler/explorer artifact that
    wraps the array under an "abi" key.

    Args:
        abi_path: Path to the ABI JSON file

    Returns:
        ABI as list of dictionaries

    Raises:
        FileNotFoundError: If ABI file does not exist
        json.JSONDecodeError: If ABI file is not valid JSON
        ValueError: If the JSON does not contain an ABI array

    Example:
        >>> abi = load_abi("abis/l2_output_oracle.json")
        >>> decoder = AbiCalldataDecoder(abi)
    """
    abi_path = Path(abi_path)

    if not abi_path.exists():
        raise FileNotFoundError(f"ABI file not found: {abi_path}")

    try:
        with open(abi_path, "r") as f:
            abi = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in ABI file {abi_path}: {e}")
        raise

    if isinstance(abi, dict) and "abi" in abi:
        abi = abi["abi"]

    if not isinstance(abi, list):
        raise ValueError(
            f"ABI file {abi_path} must contain a JSON array, got {type(abi).__name__}"
        )

    logger.debug(f"Loaded ABI with {len(abi)} entries from {abi_path}")
    return abi


def setup_logging(level: str = "INFO", log_format: str | None = None) -> None:
    """
    Configure logging for the command line interface.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string. Uses default if None.
    """
    if log_format is None:
        log_format = DEFAULT_LOG_FORMAT

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=log_format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from HTTP client loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("web3").setLevel(logging.WARNING)
