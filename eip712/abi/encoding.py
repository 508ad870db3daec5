"""
Word encoder for typed-data hashing.

Every ABI value here is static and occupies exactly one 32-byte word, so a
tuple of values is encoded as the plain concatenation of their words:

    pack([v1, v2, ..., vN]) = word(v1) || word(v2) || ... || word(vN)

No head/tail offsets, no length prefixes, no separators. Validation happens
when values are constructed (see eip712.abi.values); this module only packs.
"""

from __future__ import annotations

from typing import Iterable, List

from ..utils.hash import keccak256
from .values import ABIValue

__all__ = ["pack", "pack_hashed"]


def pack(values: Iterable[ABIValue]) -> bytes:
    """Concatenate the 32-byte words of *values* in order."""
    words: List[bytes] = [v.encode() for v in values]
    return b"".join(words)


def pack_hashed(values: Iterable[ABIValue]) -> bytes:
    """Keccak-256 of ``pack(values)``; the step that closes every struct and array."""
    return keccak256(pack(values))
