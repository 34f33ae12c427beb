"""
Input loading utilities.

Reads raw transactions or calldata blobs from text files for batch decoding.
"""

import logging
from pathlib import Path

from ..exceptions import InvalidHexEncodingError
from .normalization import normalize_hex_string

logger = logging.getLogger(__name__)


def load_raw_inputs(file_path: Path) -> list[str]:
    """
    Load hex-encoded raw transactions (or calldata) from a text file.

    Args:
        file_path: Path to file containing one hex blob per line

    Returns:
        List of hex strings (normalized to lowercase with 0x prefix)

    Raises:
        FileNotFoundError: If file does not exist

    Notes:
        - Empty lines and lines starting with '#' are skipped
        - Lines that are not valid hex are logged and skipped
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Input file not found: {file_path}")

    blobs = []
    with open(file_path, "r") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            try:
                blob = normalize_hex_string(line, with_prefix=True)
            except InvalidHexEncodingError as e:
                logger.warning(f"Line {line_num}: {e}")
                continue

            if blob == "0x":
                logger.warning(f"Line {line_num}: Empty hex blob")
                continue

            blobs.append(blob)

    logger.info(f"Loaded {len(blobs)} hex inputs from {file_path}")
    return blobs
