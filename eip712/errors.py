"""
eip712.errors
-------------

Typed error model for typed-data hashing.

Design goals
------------
- One root `TypedDataError` with machine-friendly `code` and optional `data`.
- Concrete subclasses for every way an encode call can fail.
- Context helpers so callers learn *which* field/type triggered a failure.
- Safe JSON representation (`to_dict`) suitable for logs and RPC bridges.

Every failure is permanent: the pipeline is pure, so retrying with the same
document yields the same error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "TypedDataErrorCode",
    "TypedDataError",
    "InvalidArgumentType",
    "UnresolvedType",
    "ArrayNotSupported",
    "ValueOutOfRange",
    "MalformedBytesLiteral",
    "EncodingDepthExceeded",
    "InvalidTypedData",
    "ConfigError",
    "field_context",
]


class TypedDataErrorCode(str, Enum):
    INVALID_ARGUMENT_TYPE = "EIP712/INVALID_ARGUMENT_TYPE"
    UNRESOLVED_TYPE = "EIP712/UNRESOLVED_TYPE"
    ARRAY_NOT_SUPPORTED = "EIP712/ARRAY_NOT_SUPPORTED"
    VALUE_OUT_OF_RANGE = "EIP712/VALUE_OUT_OF_RANGE"
    MALFORMED_BYTES = "EIP712/MALFORMED_BYTES"
    DEPTH_EXCEEDED = "EIP712/DEPTH_EXCEEDED"
    INVALID_TYPED_DATA = "EIP712/INVALID_TYPED_DATA"
    CONFIG = "EIP712/CONFIG"


@dataclass(eq=False)
class TypedDataError(Exception):
    """
    Root error for typed-data encoding.

    Attributes
    ----------
    code: str
        Machine-stable error code (see TypedDataErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (field name, type token, value preview).
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(f"{_code_str(self.code)}: {self.message}")

    def with_context(self, **ctx: Any) -> "TypedDataError":
        """Return a copy with extra context merged; existing keys win."""
        d = {k: _coerce_json(v) for k, v in ctx.items()}
        d.update(self.data)
        err = _clone(self)
        err.data = d
        return err

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe shape suitable for logs/RPC bridges."""
        return {
            "code": _code_str(self.code),
            "message": self.message,
            "data": _coerce_json(self.data),
        }

    def __str__(self) -> str:
        parts = [f"{_code_str(self.code)}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class InvalidArgumentType(TypedDataError):
    CODE = TypedDataErrorCode.INVALID_ARGUMENT_TYPE

    def __init__(self, message="invalid argument type", **data: Any) -> None:
        super().__init__(
            code=self.CODE,
            message=message,
            data=_jsonmap(data),
        )


class UnresolvedType(InvalidArgumentType):
    """A type token is neither a primitive nor a key of the schema."""

    CODE = TypedDataErrorCode.UNRESOLVED_TYPE

    def __init__(self, type_name: str, **data: Any) -> None:
        super().__init__(f"unresolved type: {type_name}", type=type_name, **data)


class ArrayNotSupported(TypedDataError):
    def __init__(self, type_name: str, **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.ARRAY_NOT_SUPPORTED,
            message=f"arrays are not supported in legacy mode: {type_name}",
            data=_jsonmap({"type": type_name, **data}),
        )


class ValueOutOfRange(TypedDataError):
    def __init__(self, kind: str, value: Any, lo: int, hi: int, **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.VALUE_OUT_OF_RANGE,
            message=f"{kind} out of range [{lo}, {hi}]",
            data=_jsonmap({"type": kind, "value": value, **data}),
        )


class MalformedBytesLiteral(TypedDataError):
    def __init__(self, message="malformed bytes literal", **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.MALFORMED_BYTES,
            message=message,
            data=_jsonmap(data),
        )


class EncodingDepthExceeded(TypedDataError):
    def __init__(self, limit: int, **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.DEPTH_EXCEEDED,
            message=f"nesting depth exceeds {limit}",
            data=_jsonmap({"limit": limit, **data}),
        )


class InvalidTypedData(TypedDataError):
    def __init__(self, message="invalid typed data document", **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.INVALID_TYPED_DATA,
            message=message,
            data=_jsonmap(data),
        )


class ConfigError(TypedDataError):
    def __init__(self, message="invalid configuration", **data: Any) -> None:
        super().__init__(
            code=TypedDataErrorCode.CONFIG,
            message=message,
            data=_jsonmap(data),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _clone(err: TypedDataError) -> TypedDataError:
    # Subclass __init__ signatures differ; bypass them and copy state.
    new = Exception.__new__(type(err))
    new.__dict__.update(err.__dict__)
    new.data = dict(err.data)
    new.args = err.args
    return new


def _code_str(code: Any) -> str:
    return code.value if isinstance(code, Enum) else str(code)


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; hex-encode bytes; stringify the rest.
    if v is None or isinstance(v, (bool, int, float, str)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    if isinstance(v, (list, tuple)):
        return [_coerce_json(x) for x in v]
    if isinstance(v, dict):
        return {str(k): _coerce_json(x) for k, x in v.items()}
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


def field_context(err: TypedDataError, name: Optional[str], type_name: str) -> TypedDataError:
    """Attach the innermost field/type to an error that does not carry one yet."""
    ctx: Dict[str, Any] = {"type": type_name}
    if name is not None:
        ctx["field"] = name
    return err.with_context(**ctx)
