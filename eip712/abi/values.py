"""
ABI values: one fixed 32-byte word each.

The typed-data scheme pre-hashes every dynamic payload, so the only values
that ever reach the word encoder are the static ABI kinds below. Each value
validates its payload on construction and encodes to exactly one word:

- bool:      left-padded 0x00 / 0x01
- address:   20 bytes, left-padded
- uintN:     big-endian, left-padded; 0 <= v < 2**N
- intN:      two's complement, sign-extended to 256 bits; -2**(N-1) <= v < 2**(N-1)
- bytesN:    N raw bytes, right-padded with zeros (Solidity ABI rule)

Construction errors are typed: `ValueOutOfRange` for integers that do not fit
their width, `MalformedBytesLiteral` for byte payloads of the wrong size.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidArgumentType, MalformedBytesLiteral, ValueOutOfRange
from ..utils.bytes import WORD_SIZE, left_pad32, right_pad32

__all__ = [
    "ABIValue",
    "BoolValue",
    "AddressValue",
    "UIntValue",
    "IntValue",
    "FixedBytesValue",
    "bytes32",
]

ADDRESS_SIZE = 20


class ABIValue:
    """Base of the tagged variant. Subclasses are frozen dataclasses."""

    __slots__ = ()

    @property
    def type_name(self) -> str:
        raise NotImplementedError

    def encode(self) -> bytes:
        """Exactly one 32-byte word."""
        raise NotImplementedError


@dataclass(frozen=True)
class BoolValue(ABIValue):
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise InvalidArgumentType("bool value must be True/False", type="bool")

    @property
    def type_name(self) -> str:
        return "bool"

    def encode(self) -> bytes:
        return left_pad32(b"\x01" if self.value else b"\x00")


@dataclass(frozen=True)
class AddressValue(ABIValue):
    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != ADDRESS_SIZE:
            raise MalformedBytesLiteral(
                f"address must be {ADDRESS_SIZE} bytes, got {len(self.value)}",
                type="address",
            )

    @property
    def type_name(self) -> str:
        return "address"

    def encode(self) -> bytes:
        return left_pad32(self.value)


def _check_bits(bits: int) -> None:
    if bits < 8 or bits > 256 or bits % 8 != 0:
        raise InvalidArgumentType("bit width must be a multiple of 8 in 8..256", bits=bits)


@dataclass(frozen=True)
class UIntValue(ABIValue):
    value: int
    bits: int = 256

    def __post_init__(self) -> None:
        _check_bits(self.bits)
        hi = (1 << self.bits) - 1
        if self.value < 0 or self.value > hi:
            raise ValueOutOfRange(self.type_name, self.value, 0, hi)

    @property
    def type_name(self) -> str:
        return f"uint{self.bits}"

    def encode(self) -> bytes:
        return self.value.to_bytes(WORD_SIZE, "big", signed=False)


@dataclass(frozen=True)
class IntValue(ABIValue):
    value: int
    bits: int = 256

    def __post_init__(self) -> None:
        _check_bits(self.bits)
        lo = -(1 << (self.bits - 1))
        hi = (1 << (self.bits - 1)) - 1
        if self.value < lo or self.value > hi:
            raise ValueOutOfRange(self.type_name, self.value, lo, hi)

    @property
    def type_name(self) -> str:
        return f"int{self.bits}"

    def encode(self) -> bytes:
        return self.value.to_bytes(WORD_SIZE, "big", signed=True)


@dataclass(frozen=True)
class FixedBytesValue(ABIValue):
    value: bytes
    size: int = 32

    def __post_init__(self) -> None:
        if self.size < 1 or self.size > WORD_SIZE:
            raise InvalidArgumentType("bytesN size must be in 1..32", size=self.size)
        if len(self.value) > self.size:
            raise MalformedBytesLiteral(
                f"{self.type_name} payload too long ({len(self.value)} bytes)",
                type=self.type_name,
            )
        if len(self.value) < self.size:
            object.__setattr__(self, "value", self.value.ljust(self.size, b"\x00"))

    @property
    def type_name(self) -> str:
        return f"bytes{self.size}"

    def encode(self) -> bytes:
        return right_pad32(self.value)


def bytes32(digest: bytes) -> FixedBytesValue:
    """Wrap a 32-byte digest as a ``bytes32`` value."""
    return FixedBytesValue(bytes(digest), 32)
