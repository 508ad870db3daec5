"""
eip712.utils.hash
=================

Keccak-256, the digest primitive every step of typed-data hashing uses.

This is the pre-standard Keccak padding (Ethereum-style), *not* NIST SHA3-256;
hashlib.sha3_256 gives different output and would break interoperability
with external verifiers. The provider is pycryptodome's `Crypto.Hash.keccak`.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak

from .bytes import BytesLike

ZERO32 = b"\x00" * 32


def keccak256(data: BytesLike) -> bytes:
    """Keccak-256 digest of *data* (bytes in, 32 bytes out)."""
    h = _keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def keccak256_text(text: str) -> bytes:
    """Digest of the UTF-8 encoding of *text*."""
    return keccak256(text.encode("utf-8"))


__all__ = ["ZERO32", "keccak256", "keccak256_text"]
