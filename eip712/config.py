"""
Library configuration: default sign version, recursion limit, log settings.

- Sane defaults; overrides via environment variables (EIP712_*).
- Immutable; build a new instance with `Config.with_overrides`.
- A process-wide default is available through `get_config()` / `set_config()`.
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .errors import ConfigError
from .schema import SignVersion

_DEFAULT_MAX_DEPTH = 64
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")
_LOG_FORMATS = ("text", "json")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v not in (None, "") else default


def _parse_int(name: str, val: str) -> int:
    try:
        return int(val, 0)
    except ValueError as e:
        raise ConfigError(f"{name} must be int", value=val) from e


@dataclass(frozen=True)
class Config:
    default_version: SignVersion = SignVersion.LATEST
    max_depth: int = _DEFAULT_MAX_DEPTH
    log_level: str = "WARNING"
    log_format: str = field(default="text")

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_version", SignVersion.parse(self.default_version))
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ConfigError("max_depth must be a positive int", max_depth=self.max_depth)
        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ConfigError("unknown log level", log_level=self.log_level)
        object.__setattr__(self, "log_level", level)
        fmt = str(self.log_format).lower()
        if fmt not in _LOG_FORMATS:
            raise ConfigError("log_format must be 'text' or 'json'", log_format=self.log_format)
        object.__setattr__(self, "log_format", fmt)

    @classmethod
    def from_env(cls, prefix: str = "EIP712_") -> "Config":
        """
        Create config from environment variables:

        EIP712_VERSION      (v3 | v4 | latest)
        EIP712_MAX_DEPTH    (int)
        EIP712_LOG_LEVEL    (DEBUG, INFO, ...)
        EIP712_LOG_FORMAT   (text | json)
        """
        depth = _env(f"{prefix}MAX_DEPTH")
        return cls(
            default_version=SignVersion.parse(_env(f"{prefix}VERSION", "latest")),
            max_depth=_parse_int(f"{prefix}MAX_DEPTH", depth) if depth else _DEFAULT_MAX_DEPTH,
            log_level=_env(f"{prefix}LOG_LEVEL", "WARNING") or "WARNING",
            log_format=_env(f"{prefix}LOG_FORMAT", "text") or "text",
        )

    @classmethod
    def with_overrides(cls, base: Optional["Config"] = None, **overrides: Any) -> "Config":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["default_version"] = self.default_version.value
        return d


_current: Optional[Config] = None


def get_config() -> Config:
    """Process default, loaded from the environment on first use."""
    global _current
    if _current is None:
        _current = Config.from_env()
    return _current


def set_config(cfg: Optional[Config]) -> None:
    """Replace the process default; ``None`` reloads from the environment on next use."""
    global _current
    _current = cfg


__all__ = ["Config", "get_config", "set_config"]
