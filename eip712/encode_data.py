"""
Struct and field encoding.

`encode_data` turns one struct instance into its packed word stream:

    encode_data(T, v) = hash_type(T) || word(field_1) || ... || word(field_n)

and `hash_struct` is the Keccak-256 of that. Each field becomes exactly one
32-byte word:

- struct            → hash_struct of the nested value (zero word if null)
- array             → keccak(word(e_1) || ... || word(e_k)), elements
                      encoded against the element type (nested arrays recurse)
- string / bytes    → keccak of the UTF-8 string
- bool, address,
  uintN, intN, bytesN → the ABI value itself

Two rule sets coexist (see `SignVersion`):

- legacy (v3): arrays raise `ArrayNotSupported`; a primitive field that
  matches no rule is left out of the stream.
- current (v4/latest): a field that matches no rule raises
  `InvalidArgumentType`.

In both, a null or missing struct value encodes as 32 zero bytes.

Recursion is bounded by `Config.max_depth`; hitting the interpreter stack
limit first is reported the same way.
"""

from __future__ import annotations

import re
import sys
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .abi.encoding import pack, pack_hashed
from .abi.types import (
    KIND_ADDRESS,
    KIND_BOOL,
    KIND_BYTES,
    KIND_FIXED_BYTES,
    KIND_INT,
    KIND_STRING,
    KIND_UINT,
    TypeSpec,
    base_type,
    has_brackets,
    parse_type,
)
from .abi.values import (
    ABIValue,
    AddressValue,
    BoolValue,
    FixedBytesValue,
    IntValue,
    UIntValue,
    bytes32,
)
from .config import get_config
from .encode_type import hash_type_normalized
from .errors import (
    ArrayNotSupported,
    EncodingDepthExceeded,
    InvalidArgumentType,
    MalformedBytesLiteral,
    TypedDataError,
    UnresolvedType,
    field_context,
)
from .logging import get_logger
from .schema import SignVersion, TypeSchema, normalize_types
from .utils.bytes import from_hex, has_0x, strip0x
from .utils.hash import ZERO32, keccak256, keccak256_text

__all__ = ["encode_field", "encode_data", "hash_struct"]

log = get_logger(__name__)

# Optional minus, then decimal digits or 0x-hex digits. Nothing else.
_INT_LITERAL = re.compile(r"-?(0[xX][0-9a-fA-F]+|[0-9]+)")


# ──────────────────────────────────────────────────────────────────────────────
# Public API
# ──────────────────────────────────────────────────────────────────────────────


def encode_field(
    types: Mapping[str, Iterable[Any]],
    name: str,
    raw_type: str,
    value: Any,
    version: Any = SignVersion.LATEST,
    *,
    max_depth: Optional[int] = None,
) -> Optional[ABIValue]:
    """
    Encode one field value to a single ABI value.

    Returns None when the value matches no encoding rule; the struct encoder
    turns that into an error (current mode) or drops the field (legacy mode).
    """
    schema = normalize_types(types)
    enc = _FieldEncoder(schema, SignVersion.parse(version), _limit(max_depth))
    try:
        return enc.field(name, raw_type, value, 0)
    except RecursionError as e:
        raise _stack_exhausted(enc.limit, raw_type) from e


def encode_data(
    types: Mapping[str, Iterable[Any]],
    type_name: str,
    data: Any,
    version: Any = SignVersion.LATEST,
    *,
    max_depth: Optional[int] = None,
) -> bytes:
    """Type hash word followed by one word per encoded field, packed."""
    schema = normalize_types(types)
    enc = _FieldEncoder(schema, SignVersion.parse(version), _limit(max_depth))
    try:
        return enc.struct(type_name, data, 0)
    except RecursionError as e:
        raise _stack_exhausted(enc.limit, type_name) from e


def hash_struct(
    types: Mapping[str, Iterable[Any]],
    type_name: str,
    data: Any,
    version: Any = SignVersion.LATEST,
    *,
    max_depth: Optional[int] = None,
) -> bytes:
    return keccak256(encode_data(types, type_name, data, version, max_depth=max_depth))


def _limit(max_depth: Optional[int]) -> int:
    return max_depth if max_depth is not None else get_config().max_depth


def _stack_exhausted(limit: int, type_name: str) -> EncodingDepthExceeded:
    # max_depth set above what the interpreter stack can hold.
    log.warning(
        "interpreter recursion limit reached before max_depth",
        extra={"max_depth": limit, "recursion_limit": sys.getrecursionlimit()},
    )
    return EncodingDepthExceeded(
        limit, type=type_name, recursion_limit=sys.getrecursionlimit()
    )


# ──────────────────────────────────────────────────────────────────────────────
# Recursive encoder
# ──────────────────────────────────────────────────────────────────────────────


class _FieldEncoder:
    """Carries the schema, rule set and depth limit through one encode call."""

    __slots__ = ("types", "version", "limit", "_type_hashes")

    def __init__(self, types: TypeSchema, version: SignVersion, limit: int) -> None:
        self.types = types
        self.version = version
        self.limit = limit
        self._type_hashes: Dict[str, bytes] = {}

    def type_hash(self, type_name: str) -> bytes:
        th = self._type_hashes.get(type_name)
        if th is None:
            th = self._type_hashes[type_name] = hash_type_normalized(self.types, type_name)
        return th

    def _enter(self, depth: int, type_name: str) -> None:
        if depth > self.limit:
            raise EncodingDepthExceeded(self.limit, type=type_name)

    # ----- structs -----

    def struct(self, type_name: str, data: Any, depth: int) -> bytes:
        if type_name not in self.types:
            raise UnresolvedType(type_name)
        self._enter(depth, type_name)
        if not isinstance(data, Mapping):
            raise InvalidArgumentType(
                "struct value must be an object", type=type_name, value=data
            )

        words: List[ABIValue] = [bytes32(self.type_hash(type_name))]
        for f in self.types[type_name]:
            value = data.get(f.name)
            try:
                if self.version.is_legacy:
                    word = self._legacy_field(f.name, f.type, value, depth)
                else:
                    word = self.field(f.name, f.type, value, depth)
                    if word is None:
                        raise self._absent(f.name, f.type)
            except TypedDataError as e:
                if "field" in e.data:
                    raise
                raise field_context(e, f.name, f.type) from e

            if word is None:
                log.debug(
                    "legacy mode: omitting field with no encodable value",
                    extra={"struct": type_name, "field": f.name, "field_type": f.type},
                )
                continue
            words.append(word)
        return pack(words)

    def _struct_word(self, type_name: str, data: Any, depth: int) -> ABIValue:
        return bytes32(keccak256(self.struct(type_name, data, depth + 1)))

    def _absent(self, name: str, raw_type: str) -> InvalidArgumentType:
        base = base_type(raw_type)
        if base not in self.types and not parse_type(base).is_primitive:
            return UnresolvedType(base, field=name)
        return InvalidArgumentType(
            "field has no encodable value", field=name, type=raw_type
        )

    def _null_struct(self, name: str, raw_type: str) -> ABIValue:
        log.debug(
            "null struct value encoded as zero word",
            extra={"field": name, "field_type": raw_type},
        )
        return bytes32(ZERO32)

    # ----- legacy (v3) -----

    def _legacy_field(self, name: str, raw_type: str, value: Any, depth: int) -> Optional[ABIValue]:
        if raw_type in self.types:
            if value is None:
                return self._null_struct(name, raw_type)
            return self._struct_word(raw_type, value, depth)
        if has_brackets(raw_type):
            raise ArrayNotSupported(raw_type, field=name)
        return _primitive(parse_type(raw_type), value)

    # ----- current (v4 / latest) -----

    def field(self, name: str, raw_type: str, value: Any, depth: int) -> Optional[ABIValue]:
        if self.version.is_legacy:
            return self._legacy_field(name, raw_type, value, depth)

        if raw_type in self.types:
            if value is None:
                return self._null_struct(name, raw_type)
            return self._struct_word(raw_type, value, depth)

        spec = parse_type(raw_type)
        if spec.is_array:
            return self._array(name, spec, value, depth)
        return _primitive(spec, value)

    def _array(self, name: str, spec: TypeSpec, value: Any, depth: int) -> Optional[ABIValue]:
        if not isinstance(value, (list, tuple)):
            return None
        self._enter(depth + 1, spec.raw)
        # A declared [N] is not checked against len(value).
        elem = spec.element()
        words: List[ABIValue] = []
        for i, item in enumerate(value):
            word = self.field(name, elem.raw, item, depth + 1)
            if word is None:
                raise InvalidArgumentType(
                    "array element has no encodable value",
                    field=name,
                    type=elem.raw,
                    index=i,
                )
            words.append(word)
        return bytes32(pack_hashed(words))


# ──────────────────────────────────────────────────────────────────────────────
# Primitive values
# ──────────────────────────────────────────────────────────────────────────────


def _primitive(spec: TypeSpec, value: Any) -> Optional[ABIValue]:
    if spec.is_array:
        return None
    kind = spec.kind

    if kind in (KIND_STRING, KIND_BYTES):
        if not isinstance(value, str):
            return None
        return bytes32(keccak256_text(value))

    if kind == KIND_BOOL:
        return BoolValue(value) if isinstance(value, bool) else None

    if kind == KIND_ADDRESS:
        if not isinstance(value, str):
            return None
        return AddressValue(_address_bytes(value))

    if kind in (KIND_UINT, KIND_INT):
        n = _int_value(value)
        if n is None:
            return None
        if kind == KIND_UINT:
            return UIntValue(n, spec.bits)
        return IntValue(n, spec.bits)

    if kind == KIND_FIXED_BYTES:
        if not isinstance(value, str):
            return None
        payload = _hex_bytes(value, spec.raw) if has_0x(value) else value.encode("utf-8")
        return FixedBytesValue(payload, spec.size)

    return None


def _int_value(value: Any) -> Optional[int]:
    """Integer from a JSON number or a decimal / 0x-hex string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        s = value.strip()
        if not _INT_LITERAL.fullmatch(s):
            return None
        neg = s.startswith("-")
        body = s[1:] if neg else s
        n = int(body, 16) if has_0x(body) else int(body, 10)
        return -n if neg else n
    return None


def _hex_bytes(value: str, type_name: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError as e:
        raise MalformedBytesLiteral(str(e), type=type_name, value=value) from e


def _address_bytes(value: str) -> bytes:
    digits = strip0x(value.strip())
    if len(digits) != 40:
        raise MalformedBytesLiteral(
            "address must be 20 bytes (40 hex digits)", type="address", value=value
        )
    return _hex_bytes(digits, "address")
