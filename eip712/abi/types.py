"""
Type grammar for typed-data field tokens.

A field type is a compact textual micro-grammar:

    token    := base dims
    base     := "bool" | "address" | "string" | "bytes" | "bytes" N
              | "uint" N | "int" N | <struct name>
    dims     := ( "[" [digits] "]" )*

`parse_type` turns a token into a frozen `TypeSpec` once, so the encoder can
dispatch on structured data instead of re-slicing the raw string at every
recursion level. Dimensions are kept in source order, so the *last* entry is
the outermost array: ``uint8[2][]`` is a dynamic array of ``uint8[2]``.

Whether a non-primitive base names a struct is a property of the schema, not
of the token, so the parser reports such bases as ``kind == "other"`` and
leaves the lookup to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from ..errors import InvalidArgumentType

__all__ = [
    "KIND_BOOL",
    "KIND_ADDRESS",
    "KIND_STRING",
    "KIND_BYTES",
    "KIND_FIXED_BYTES",
    "KIND_UINT",
    "KIND_INT",
    "KIND_OTHER",
    "TypeSpec",
    "parse_int_size",
    "parse_type",
    "base_type",
    "has_brackets",
]

KIND_BOOL = "bool"
KIND_ADDRESS = "address"
KIND_STRING = "string"
KIND_BYTES = "bytes"
KIND_FIXED_BYTES = "fixed_bytes"
KIND_UINT = "uint"
KIND_INT = "int"
KIND_OTHER = "other"


@dataclass(frozen=True)
class TypeSpec:
    raw: str
    base: str
    kind: str
    bits: int = 0
    size: int = 0
    dims: Tuple[Optional[int], ...] = ()

    @property
    def is_array(self) -> bool:
        return bool(self.dims)

    @property
    def is_primitive(self) -> bool:
        return self.kind != KIND_OTHER

    @property
    def array_size(self) -> Optional[int]:
        """Declared length of the outermost dimension (None when dynamic)."""
        if not self.dims:
            raise InvalidArgumentType("not an array type", type=self.raw)
        return self.dims[-1]

    def element(self) -> "TypeSpec":
        """Spec of one element: the token with its outermost ``[...]`` removed."""
        if not self.dims:
            raise InvalidArgumentType("not an array type", type=self.raw)
        return TypeSpec(
            raw=self.raw[: self.raw.rindex("[")],
            base=self.base,
            kind=self.kind,
            bits=self.bits,
            size=self.size,
            dims=self.dims[:-1],
        )


def parse_int_size(token: str, prefix: str) -> int:
    """
    Width of a ``uintN``/``intN`` token, or -1 when the token does not match.

    Valid widths are multiples of 8 in 8..256; bare ``uint``/``int`` do not
    match.
    """
    if not token.startswith(prefix):
        return -1
    digits = token[len(prefix):]
    if not digits.isdigit():
        return -1
    size = int(digits)
    if size < 8 or size > 256 or size % 8 != 0:
        return -1
    return size


def _fixed_bytes_size(token: str) -> int:
    digits = token[len("bytes"):]
    if not digits.isdigit():
        return -1
    n = int(digits)
    return n if 1 <= n <= 32 else -1


def has_brackets(token: str) -> bool:
    return "[" in token or "]" in token


def _split_dims(token: str) -> Tuple[str, Tuple[Optional[int], ...]]:
    dims = []
    rest = token
    while rest.endswith("]"):
        open_at = rest.rfind("[")
        if open_at <= 0:
            raise InvalidArgumentType("malformed array type", type=token)
        inner = rest[open_at + 1 : -1]
        if inner == "":
            dims.append(None)
        elif inner.isdigit():
            # Parsed but never checked against the element count.
            dims.append(int(inner))
        else:
            raise InvalidArgumentType("malformed array size", type=token, size=inner)
        rest = rest[:open_at]
    if has_brackets(rest):
        raise InvalidArgumentType("malformed array type", type=token)
    dims.reverse()
    return rest, tuple(dims)


@lru_cache(maxsize=1024)
def parse_type(token: str) -> TypeSpec:
    """
    Parse a field type token into a `TypeSpec`.

    Raises InvalidArgumentType for empty tokens and malformed bracket syntax
    (unbalanced brackets, non-numeric sizes). Unknown bases are not an error
    here; they come back as ``kind == "other"``.
    """
    if not isinstance(token, str) or not token:
        raise InvalidArgumentType("type token must be a non-empty string", type=token)

    base, dims = _split_dims(token)

    if base in (KIND_BOOL, KIND_ADDRESS, KIND_STRING, KIND_BYTES):
        return TypeSpec(raw=token, base=base, kind=base, dims=dims)

    if base.startswith("uint"):
        bits = parse_int_size(base, "uint")
        if bits > 0:
            return TypeSpec(raw=token, base=base, kind=KIND_UINT, bits=bits, dims=dims)
    elif base.startswith("int"):
        bits = parse_int_size(base, "int")
        if bits > 0:
            return TypeSpec(raw=token, base=base, kind=KIND_INT, bits=bits, dims=dims)
    elif base.startswith("bytes"):
        size = _fixed_bytes_size(base)
        if size > 0:
            return TypeSpec(raw=token, base=base, kind=KIND_FIXED_BYTES, size=size, dims=dims)

    return TypeSpec(raw=token, base=base, kind=KIND_OTHER, dims=dims)


def base_type(token: str) -> str:
    """
    Element type name with every array dimension removed.

    Lenient: used for dependency discovery, where malformed tokens simply
    resolve to nothing instead of failing.
    """
    at = token.find("[")
    return token if at < 0 else token[:at]
