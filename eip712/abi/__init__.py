"""
ABI layer for typed-data hashing: type grammar, one-word values, word packing.
"""

from .encoding import pack, pack_hashed  # noqa: F401
from .types import TypeSpec, parse_int_size, parse_type  # noqa: F401
from .values import (  # noqa: F401
    ABIValue,
    AddressValue,
    BoolValue,
    FixedBytesValue,
    IntValue,
    UIntValue,
    bytes32,
)

__all__ = [
    "pack",
    "pack_hashed",
    "TypeSpec",
    "parse_int_size",
    "parse_type",
    "ABIValue",
    "AddressValue",
    "BoolValue",
    "FixedBytesValue",
    "IntValue",
    "UIntValue",
    "bytes32",
]
