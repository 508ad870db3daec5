from .bytes import from_hex, strip0x, to_hex  # noqa: F401
from .hash import ZERO32, keccak256, keccak256_text  # noqa: F401

__all__ = ["from_hex", "strip0x", "to_hex", "ZERO32", "keccak256", "keccak256_text"]
