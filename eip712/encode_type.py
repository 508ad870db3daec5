"""
Canonical type signatures and type hashes.

    encode_type(Mail) = "Mail(Person from,Person to,string contents)"
                        "Person(string name,address wallet)"

The primary type comes first; every other reachable struct follows in
lexicographic order, so two schemas that declare the same types in a
different order produce the same signature.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from .errors import UnresolvedType
from .schema import TypeSchema, find_dependencies, normalize_types
from .utils.hash import keccak256_text

__all__ = ["encode_type", "hash_type", "encode_type_normalized", "hash_type_normalized"]


def encode_type_normalized(types: TypeSchema, primary_type: str) -> str:
    if primary_type not in types:
        raise UnresolvedType(primary_type)
    deps = find_dependencies(types, primary_type)
    deps.discard(primary_type)
    ordered: List[str] = [primary_type] + sorted(deps)
    parts: List[str] = []
    for name in ordered:
        params = ",".join(f"{f.type} {f.name}" for f in types[name])
        parts.append(f"{name}({params})")
    return "".join(parts)


def hash_type_normalized(types: TypeSchema, primary_type: str) -> bytes:
    return keccak256_text(encode_type_normalized(types, primary_type))


def encode_type(types: Mapping[str, Iterable[Any]], primary_type: str) -> str:
    """Canonical signature string of *primary_type* and its dependencies."""
    return encode_type_normalized(normalize_types(types), primary_type)


def hash_type(types: Mapping[str, Iterable[Any]], primary_type: str) -> bytes:
    """Keccak-256 of the UTF-8 canonical signature (the "type hash")."""
    return hash_type_normalized(normalize_types(types), primary_type)
