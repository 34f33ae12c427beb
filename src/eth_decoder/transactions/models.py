"""
Decoded transaction envelopes.

Each transaction shape is a frozen dataclass; a decoded transaction is exactly
one of them. Fields that do not exist for a shape are simply absent from its
class (a legacy transaction has no chain_id, a fee-market transaction has no
gas_price), so a value can never carry both fee models at once.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Union


class TransactionType(IntEnum):
    """EIP-2718 envelope type. Legacy transactions carry no type byte."""

    LEGACY = 0x00
    ACCESS_LIST = 0x01  # EIP-2930
    FEE_MARKET = 0x02  # EIP-1559

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]


_TYPE_LABELS = {
    TransactionType.LEGACY: "legacy",
    TransactionType.ACCESS_LIST: "eip2930",
    TransactionType.FEE_MARKET: "eip1559",
}


@dataclass(frozen=True)
class AccessListEntry:
    """An address and the storage slots the transaction pre-declares for it."""

    address: bytes
    storage_keys: tuple[bytes, ...] = ()


class _TransactionFields:
    """Accessors shared by every envelope."""

    to: bytes | None
    v: int
    r: int
    s: int

    @property
    def is_contract_creation(self) -> bool:
        """True when the transaction has no recipient (deploys a contract)."""
        return self.to is None

    @property
    def signature(self) -> tuple[int, int, int]:
        return (self.v, self.r, self.s)


@dataclass(frozen=True)
class LegacyTransaction(_TransactionFields):
    """Pre-EIP-2718 transaction: [nonce, gasPrice, gas, to, value, data, v, r, s]."""

    transaction_type: ClassVar[TransactionType] = TransactionType.LEGACY

    nonce: int
    gas_price: int
    gas_limit: int
    to: bytes | None
    value: int
    data: bytes
    v: int
    r: int
    s: int


@dataclass(frozen=True)
class AccessListTransaction(_TransactionFields):
    """EIP-2930 transaction (type 0x01)."""

    transaction_type: ClassVar[TransactionType] = TransactionType.ACCESS_LIST

    chain_id: int
    nonce: int
    gas_price: int
    gas_limit: int
    to: bytes | None
    value: int
    data: bytes
    access_list: tuple[AccessListEntry, ...]
    v: int
    r: int
    s: int


@dataclass(frozen=True)
class FeeMarketTransaction(_TransactionFields):
    """EIP-1559 transaction (type 0x02)."""

    transaction_type: ClassVar[TransactionType] = TransactionType.FEE_MARKET

    chain_id: int
    nonce: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    gas_limit: int
    to: bytes | None
    value: int
    data: bytes
    access_list: tuple[AccessListEntry, ...]
    v: int
    r: int
    s: int


Transaction = Union[LegacyTransaction, AccessListTransaction, FeeMarketTransaction]
