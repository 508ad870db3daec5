"""
eip712: typed structured data hashing.

Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import Config, get_config, set_config  # noqa: F401
from .errors import (  # noqa: F401
    ArrayNotSupported,
    ConfigError,
    EncodingDepthExceeded,
    InvalidArgumentType,
    InvalidTypedData,
    MalformedBytesLiteral,
    TypedDataError,
    UnresolvedType,
    ValueOutOfRange,
)

# Schema & encoders
from .schema import DOMAIN_TYPE, Field, SignVersion, find_dependencies  # noqa: F401
from .encode_type import encode_type, hash_type  # noqa: F401
from .encode_data import encode_data, encode_field, hash_struct  # noqa: F401

# Documents
from .typed_data import TypedData, hash_typed_data, signable_hash  # noqa: F401

# Utilities
from .utils.bytes import to_hex  # noqa: F401
from .utils.hash import keccak256  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "Config", "get_config", "set_config",
    "TypedDataError", "InvalidArgumentType", "UnresolvedType", "ArrayNotSupported",
    "ValueOutOfRange", "MalformedBytesLiteral", "EncodingDepthExceeded",
    "InvalidTypedData", "ConfigError",
    # Schema & encoders
    "DOMAIN_TYPE", "Field", "SignVersion", "find_dependencies",
    "encode_type", "hash_type",
    "encode_field", "encode_data", "hash_struct",
    # Documents
    "TypedData", "signable_hash", "hash_typed_data",
    # Utils
    "to_hex", "keccak256",
]
