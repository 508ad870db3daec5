"""
Type schema model and dependency resolution.

A schema maps a struct name to its ordered field list. Field order is part of
the hashed data: it decides encoding order and appears verbatim in the
canonical type signature, so schemas are normalized into tuples and never
re-sorted.

Schemas are accepted in the JSON shape wallets send::

    {"Person": [{"name": "name", "type": "string"},
                {"name": "wallet", "type": "address"}]}

Unknown field types are *not* rejected here; they fail at encode time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Set, Tuple

from .abi.types import base_type
from .errors import ConfigError, InvalidTypedData

__all__ = [
    "DOMAIN_TYPE",
    "SignVersion",
    "Field",
    "TypeSchema",
    "normalize_types",
    "find_dependencies",
]

DOMAIN_TYPE = "EIP712Domain"


class SignVersion(str, Enum):
    """
    Encoding rule set.

    V3 is the legacy rule set: arrays are rejected and fields that match no
    encoding rule are silently omitted. V4 (and LATEST, its alias) supports
    arrays, hashes null structs to a zero word and rejects unencodable fields.
    """

    V3 = "v3"
    V4 = "v4"
    LATEST = "latest"

    @property
    def is_legacy(self) -> bool:
        return self is SignVersion.V3

    @classmethod
    def parse(cls, value: Any) -> "SignVersion":
        if isinstance(value, SignVersion):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            value = f"v{value}"
        if isinstance(value, str):
            s = value.strip().lower()
            for member in cls:
                if member.value == s:
                    return member
        raise ConfigError("unknown sign version", version=value)


@dataclass(frozen=True)
class Field:
    name: str
    type: str

    @classmethod
    def from_obj(cls, obj: Any) -> "Field":
        if isinstance(obj, Field):
            return obj
        if isinstance(obj, Mapping):
            name, typ = obj.get("name"), obj.get("type")
        elif isinstance(obj, (tuple, list)) and len(obj) == 2:
            name, typ = obj
        else:
            raise InvalidTypedData("field descriptor must be {name, type}", field=obj)
        if not isinstance(name, str) or not isinstance(typ, str) or not typ:
            raise InvalidTypedData("field name/type must be strings", field=obj)
        return cls(name=name, type=typ)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": self.type}


TypeSchema = Mapping[str, Tuple[Field, ...]]


def normalize_types(types: Mapping[str, Iterable[Any]]) -> Dict[str, Tuple[Field, ...]]:
    """Coerce a JSON-shaped schema into ``{name: (Field, ...)}`` keeping field order."""
    if not isinstance(types, Mapping):
        raise InvalidTypedData("types must be a mapping of type name to fields")
    out: Dict[str, Tuple[Field, ...]] = {}
    for name, fields in types.items():
        if not isinstance(name, str) or not name:
            raise InvalidTypedData("type names must be non-empty strings", type=name)
        if isinstance(fields, (str, bytes)) or not isinstance(fields, Iterable):
            raise InvalidTypedData("type fields must be a list", type=name)
        out[name] = tuple(Field.from_obj(f) for f in fields)
    return out


def find_dependencies(
    types: TypeSchema,
    primary_type: str,
    found: Optional[Set[str]] = None,
) -> Set[str]:
    """
    Every struct name reachable from *primary_type*, itself included.

    Array fields contribute their element type. Types already in *found* are
    not expanded again, which keeps self- and mutually-recursive schemas
    finite. A *primary_type* that is not a schema key contributes nothing.
    """
    if found is None:
        found = set()
    if primary_type in found or primary_type not in types:
        return found
    found.add(primary_type)
    for f in types[primary_type]:
        find_dependencies(types, base_type(f.type), found)
    return found
