"""
Bounds-checked reader over ABI-encoded data.

ABI offsets are relative to the start of the block that contains them (the
parameter block after the selector, an array body, a tuple). A
CalldataCursor is a view of one such block: seek() and child() take offsets
relative to the block start, and every read past the end of the underlying
buffer raises TruncatedCalldataError instead of returning short data.
"""

from ..exceptions import TruncatedCalldataError

WORD_SIZE = 32


class CalldataCursor:
    """Read position inside one ABI block of an immutable buffer."""

    def __init__(self, data: bytes, start: int = 0):
        if not 0 <= start <= len(data):
            raise TruncatedCalldataError(
                f"Block start {start} lies outside the {len(data)}-byte buffer"
            )
        self._data = bytes(data)
        self._start = start
        self._position = start

    @property
    def start(self) -> int:
        """Absolute buffer index where this block begins."""
        return self._start

    @property
    def position(self) -> int:
        """Current read position, relative to the block start."""
        return self._position - self._start

    @property
    def remaining(self) -> int:
        """Bytes left in the buffer after the current position."""
        return len(self._data) - self._position

    def seek(self, offset: int) -> None:
        """Move to an offset relative to the block start."""
        self._check_offset(offset)
        self._position = self._start + offset

    def child(self, offset: int) -> "CalldataCursor":
        """Return a cursor for the nested block beginning at offset."""
        self._check_offset(offset)
        return CalldataCursor(self._data, self._start + offset)

    def read_bytes(self, length: int) -> bytes:
        """Read exactly `length` bytes and advance."""
        if length < 0 or length > self.remaining:
            raise TruncatedCalldataError(
                f"Cannot read {length} bytes at position {self._position}: "
                f"only {self.remaining} bytes remain"
            )
        chunk = self._data[self._position : self._position + length]
        self._position += length
        return chunk

    def read_word(self) -> bytes:
        """Read one 32-byte word and advance."""
        return self.read_bytes(WORD_SIZE)

    def read_uint(self) -> int:
        """Read one word as a big-endian unsigned integer."""
        return int.from_bytes(self.read_word(), byteorder="big")

    def _check_offset(self, offset: int) -> None:
        if offset < 0 or self._start + offset > len(self._data):
            raise TruncatedCalldataError(
                f"Offset {offset} from block start {self._start} points past the "
                f"end of the {len(self._data)}-byte buffer"
            )
