"""
Typed documents and the signable-hash pipeline.

    domain_separator = hash_struct("EIP712Domain", domain)
    message_hash     = hash_struct(primary_type, message)
    signable_hash    = keccak(0x19 || 0x01 || domain_separator || message_hash)

`TypedData` holds the four parts of a document (schema, primary type, domain
record, message), validates the invariants that do not depend on encoding,
and exposes each intermediate digest so wallets can display them for review.
Any encoding failure aborts the whole computation; no partial digest is ever
returned.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .config import get_config
from .encode_data import encode_data as _encode_data
from .encode_type import encode_type_normalized, hash_type_normalized
from .errors import InvalidTypedData
from .logging import get_logger
from .schema import DOMAIN_TYPE, Field, SignVersion, normalize_types
from .utils.bytes import to_hex
from .utils.hash import keccak256

__all__ = [
    "EIP191_PREFIX",
    "TypedData",
    "signable_hash",
    "hash_typed_data",
]

log = get_logger(__name__)

# EIP-191 version byte 0x01: structured data.
EIP191_PREFIX = b"\x19\x01"


@dataclass(frozen=True)
class TypedData:
    types: Mapping[str, Tuple[Field, ...]]
    primary_type: str
    domain: Mapping[str, Any]
    message: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", normalize_types(self.types))
        if not isinstance(self.primary_type, str) or self.primary_type not in self.types:
            raise InvalidTypedData(
                "primaryType must name a declared type", primary_type=self.primary_type
            )
        if DOMAIN_TYPE not in self.types:
            raise InvalidTypedData(f"types must declare {DOMAIN_TYPE}")
        if not isinstance(self.domain, Mapping):
            raise InvalidTypedData("domain must be an object")
        if not isinstance(self.message, Mapping):
            raise InvalidTypedData("message must be an object")

    # ----- construction -----

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "TypedData":
        """Build from the wallet JSON shape: types / primaryType / domain / message."""
        if not isinstance(obj, Mapping):
            raise InvalidTypedData("typed data must be an object")
        missing = [k for k in ("types", "primaryType", "domain", "message") if k not in obj]
        if missing:
            raise InvalidTypedData("typed data is missing keys", missing=missing)
        return cls(
            types=obj["types"],
            primary_type=obj["primaryType"],
            domain=obj["domain"],
            message=obj["message"],
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "TypedData":
        try:
            obj = json.loads(text)
        except ValueError as e:
            raise InvalidTypedData(f"invalid JSON: {e}") from e
        return cls.from_dict(obj)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "types": {k: [f.to_dict() for f in v] for k, v in self.types.items()},
            "primaryType": self.primary_type,
            "domain": dict(self.domain),
            "message": dict(self.message),
        }

    # ----- intermediate digests -----

    @property
    def type_hash(self) -> bytes:
        """Type hash of the primary type."""
        return hash_type_normalized(self.types, self.primary_type)

    def encode_type(self, type_name: Optional[str] = None) -> str:
        return encode_type_normalized(self.types, type_name or self.primary_type)

    def encode_data(self, type_name: str, data: Any, version: Any = None) -> bytes:
        return _encode_data(self.types, type_name, data, _version(version))

    def hash_struct(self, type_name: str, data: Any, version: Any = None) -> bytes:
        return keccak256(self.encode_data(type_name, data, version))

    def domain_separator(self, version: Any = None) -> bytes:
        return self.hash_struct(DOMAIN_TYPE, self.domain, version)

    def message_hash(self, version: Any = None) -> bytes:
        return self.hash_struct(self.primary_type, self.message, version)

    def signable_hash(self, version: Any = None) -> bytes:
        """
        Final 32-byte digest to hand to the signer.

        `version` defaults to `Config.default_version`.
        """
        v = _version(version)
        domain_hash = self.domain_separator(v)
        message_hash = self.message_hash(v)
        digest = keccak256(EIP191_PREFIX + domain_hash + message_hash)
        log.debug(
            "signable hash computed",
            extra={
                "primary_type": self.primary_type,
                "version": v.value,
                "domain_hash": to_hex(domain_hash),
                "message_hash": to_hex(message_hash),
                "digest": to_hex(digest),
            },
        )
        return digest


def _version(version: Any) -> SignVersion:
    if version is None:
        return get_config().default_version
    return SignVersion.parse(version)


def signable_hash(document: TypedData, version: Any = None) -> bytes:
    return document.signable_hash(version)


def hash_typed_data(
    obj: Union[TypedData, Mapping[str, Any], str, bytes],
    version: Any = None,
) -> bytes:
    """Signable hash of a `TypedData`, a wallet-JSON mapping, or a JSON string."""
    if isinstance(obj, TypedData):
        doc = obj
    elif isinstance(obj, (str, bytes)):
        doc = TypedData.from_json(obj)
    else:
        doc = TypedData.from_dict(obj)
    return doc.signable_hash(version)
