"""
Typed ABI values and decoded function calls.

Values stay typed through decoding; turning them into text is the job of
eth_decoder.render. Dynamic values (bytes, string, arrays) expose the
length that was read from their length word.
"""

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class BoolValue:
    value: bool


@dataclass(frozen=True)
class UIntValue:
    value: int
    width: int = 256


@dataclass(frozen=True)
class IntValue:
    value: int
    width: int = 256


@dataclass(frozen=True)
class AddressValue:
    value: bytes  # 20 bytes


@dataclass(frozen=True)
class BytesValue:
    """Fixed-size (bytesN, size=N) or dynamic (bytes, size=None) byte string."""

    value: bytes
    size: int | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.size is None

    @property
    def length(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class StringValue:
    value: str
    length: int  # encoded UTF-8 byte length


@dataclass(frozen=True)
class ArrayValue:
    """Fixed-length (T[k], size=k) or dynamic (T[], size=None) array."""

    element_type: str
    items: tuple["AbiValue", ...]
    size: int | None = None

    @property
    def is_dynamic(self) -> bool:
        return self.size is None

    @property
    def length(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class TupleValue:
    items: tuple["AbiValue", ...]


@dataclass(frozen=True)
class UnparsedValue:
    """A parameter whose type tag was not understood; holds its raw head word."""

    type_tag: str
    raw: bytes
    reason: str = ""


AbiValue = Union[
    BoolValue,
    UIntValue,
    IntValue,
    AddressValue,
    BytesValue,
    StringValue,
    ArrayValue,
    TupleValue,
    UnparsedValue,
]


@dataclass(frozen=True)
class FunctionCall:
    """
    A decoded contract call.

    When no signature could be resolved, signature and name are None and
    parameter_types / parameter_values are empty: only the selector is known.
    """

    selector: bytes
    signature: str | None = None
    name: str | None = None
    parameter_types: tuple[str, ...] = ()
    parameter_values: tuple[AbiValue, ...] = ()
    candidates: tuple[str, ...] = field(default=())
    parameter_names: tuple[str, ...] = field(default=())  # known only from an ABI

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()

    @property
    def is_resolved(self) -> bool:
        return self.signature is not None

    @property
    def has_unparsed(self) -> bool:
        return any(isinstance(v, UnparsedValue) for v in self.parameter_values)
