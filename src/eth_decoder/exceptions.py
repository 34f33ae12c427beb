"""
Exception hierarchy for transaction and calldata decoding.

Every decoding failure raised by this package derives from DecoderError.
Conditions caused by a bad input value also derive from ValueError, so
callers that only guard against ValueError keep working.

Two conditions are non-fatal and are normally absorbed by the decoders:
- UnrecognizedAbiTypeError: the parameter is reported as an UnparsedValue
- NoSignatureFoundError: the call is reported with its selector only
"""


class DecoderError(Exception):
    """Base class for all decoding errors."""


class EmptyInputError(DecoderError, ValueError):
    """Raised when a transaction or calldata buffer has zero length."""

    def __init__(self, what: str = "input"):
        self.what = what
        super().__init__(f"Empty {what}: nothing to decode")


class UnsupportedTransactionTypeError(DecoderError, ValueError):
    """Raised when the leading byte is not a known transaction envelope type."""

    def __init__(self, type_byte: int):
        self.type_byte = type_byte
        super().__init__(f"Unsupported transaction type: 0x{type_byte:02x}")


class MalformedFrameError(DecoderError, ValueError):
    """Raised when an RLP frame does not hold the expected number of items."""

    def __init__(self, expected: int, actual: int | None, detail: str | None = None):
        self.expected = expected
        self.actual = actual
        message = f"Expected {expected} RLP items, got {actual}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RlpDecodeError(DecoderError, ValueError):
    """Raised when a single transaction field cannot be decoded."""

    def __init__(self, field: str, cause: Exception | str):
        self.field = field
        self.cause = cause
        super().__init__(f"Failed to decode {field}: {cause}")


class CalldataTooShortError(DecoderError, ValueError):
    """Raised when calldata is shorter than a 4-byte function selector."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"Calldata too short: {length} bytes (need at least 4 for a selector)"
        )


class TruncatedCalldataError(DecoderError, ValueError):
    """Raised when a read would run past the end of the calldata buffer."""


class InvalidOffsetError(TruncatedCalldataError):
    """Raised when a dynamic offset points back into its block's head region."""


class InvalidHexEncodingError(DecoderError, ValueError):
    """Raised for hex text with non-hex characters or an odd number of digits."""


class UnrecognizedAbiTypeError(DecoderError, ValueError):
    """Raised for an ABI type tag this decoder does not understand."""

    def __init__(self, type_tag: str, detail: str | None = None):
        self.type_tag = type_tag
        message = f"Unrecognized ABI type: {type_tag!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SignatureLookupError(DecoderError):
    """Raised when the signature registry cannot be reached or answers garbage."""


class NoSignatureFoundError(DecoderError, LookupError):
    """Raised when no signature is known for a selector."""

    def __init__(self, selector: bytes):
        self.selector = selector
        super().__init__(f"No function signature found for 0x{selector.hex()}")
