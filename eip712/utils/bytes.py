"""
eip712.utils.bytes
==================

Small byte/hex helpers shared by the ABI layer:

- Hex helpers: to_hex / from_hex / strip0x / has_0x
- Word helpers: left_pad32 / right_pad32

Examples
--------
>>> to_hex(b"\\x01\\x02")
'0x0102'
>>> from_hex('0xdeadbeef')
b'\\xde\\xad\\xbe\\xef'
>>> left_pad32(b"\\x01")[-2:]
b'\\x00\\x01'
"""

from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

WORD_SIZE = 32


def has_0x(s: str) -> bool:
    return s.startswith(("0x", "0X"))


def strip0x(s: str) -> str:
    return s[2:] if has_0x(s) else s


def to_hex(data: BytesLike, *, prefix: bool = True) -> str:
    """Return lowercase hex string of data."""
    h = bytes(data).hex()
    return f"0x{h}" if prefix else h


def from_hex(h: str) -> bytes:
    """
    Parse a hex string with or without 0x prefix.

    Odd-length input is left-padded with a zero nibble, the way wallets
    commonly emit short hex literals such as ``0x1``.
    """
    if not isinstance(h, str):
        raise TypeError("from_hex expects str")
    h = strip0x(h.strip())
    if len(h) % 2 == 1:
        h = "0" + h
    try:
        return bytes.fromhex(h)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def left_pad32(data: BytesLike) -> bytes:
    data_b = bytes(data)
    if len(data_b) > WORD_SIZE:
        raise ValueError(f"word overflow: {len(data_b)} > {WORD_SIZE}")
    return data_b.rjust(WORD_SIZE, b"\x00")


def right_pad32(data: BytesLike) -> bytes:
    data_b = bytes(data)
    if len(data_b) > WORD_SIZE:
        raise ValueError(f"word overflow: {len(data_b)} > {WORD_SIZE}")
    return data_b.ljust(WORD_SIZE, b"\x00")


__all__ = [
    "BytesLike",
    "WORD_SIZE",
    "has_0x",
    "strip0x",
    "to_hex",
    "from_hex",
    "left_pad32",
    "right_pad32",
]
