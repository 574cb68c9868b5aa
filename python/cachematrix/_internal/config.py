from __future__ import annotations

import logging
import numbers
import os
from dataclasses import dataclass, fields, replace
from typing import Any

import numpy as np


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Process-wide knobs for cachematrix.

    Defaults come from ``CACHEMATRIX_*`` environment variables the first time
    settings are read; ``configure()`` overrides individual fields afterwards.
    """

    default_tol: float = float(np.finfo(np.float64).eps)
    ill_conditioned_rcond: float = 1e-8
    log_cache_hits: bool = True
    hit_log_level: int = logging.INFO
    edge_items: int = 4


_ENV_VARS = {
    "default_tol": "CACHEMATRIX_TOL",
    "ill_conditioned_rcond": "CACHEMATRIX_WARN_RCOND",
    "log_cache_hits": "CACHEMATRIX_LOG_HITS",
    "hit_log_level": "CACHEMATRIX_HIT_LOG_LEVEL",
    "edge_items": "CACHEMATRIX_EDGE_ITEMS",
}

_settings: Settings | None = None


def _parse_bool(env_var: str, raw: str) -> bool:
    token = raw.strip().lower()
    if token in _TRUE:
        return True
    if token in _FALSE:
        return False
    raise ValueError(f"{env_var} must be a boolean flag (1/0, true/false, yes/no, on/off); got {raw!r}")


def _parse_level(env_var: str, raw: Any) -> int:
    if isinstance(raw, int):
        return raw
    token = str(raw).strip()
    if token.isdigit():
        return int(token)
    level = logging.getLevelName(token.upper())
    if not isinstance(level, int):
        raise ValueError(f"{env_var} must be a logging level name or number; got {raw!r}")
    return level


def _parse_field(name: str, env_var: str, raw: str) -> Any:
    if name == "log_cache_hits":
        return _parse_bool(env_var, raw)
    if name == "hit_log_level":
        return _parse_level(env_var, raw)
    try:
        if name == "edge_items":
            value: Any = int(raw)
            if value < 1:
                raise ValueError
            return value
        return float(raw)
    except ValueError:
        raise ValueError(f"{env_var} has an invalid value: {raw!r}") from None


def _from_environment() -> Settings:
    overrides: dict[str, Any] = {}
    for name, env_var in _ENV_VARS.items():
        raw = os.environ.get(env_var)
        if raw is None or raw.strip() == "":
            continue
        overrides[name] = _parse_field(name, env_var, raw)
    return Settings(**overrides)


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = _from_environment()
    return _settings


def _coerce_override(name: str, value: Any) -> Any:
    if isinstance(value, str):
        return _parse_field(name, name, value)
    if name == "log_cache_hits":
        if isinstance(value, bool):
            return value
    elif isinstance(value, bool):
        # bool is an Integral; numeric fields reject it
        pass
    elif name == "hit_log_level":
        if isinstance(value, numbers.Integral):
            return int(value)
    elif name == "edge_items":
        if isinstance(value, numbers.Integral) and value >= 1:
            return int(value)
    elif isinstance(value, numbers.Real):
        return float(value)
    raise ValueError(f"{name} has an invalid value: {value!r}")


def configure(**overrides: Any) -> Settings:
    """Override individual settings fields and return the new settings.

    Values are checked the same way as their environment variables; strings
    are parsed like the environment values.
    """
    global _settings
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError(f"Unknown cachematrix setting(s): {', '.join(unknown)}")
    checked = {name: _coerce_override(name, value) for name, value in overrides.items()}
    _settings = replace(get_settings(), **checked)
    return _settings


def reset_settings() -> None:
    """Drop overrides; the environment is re-read on the next access."""
    global _settings
    _settings = None
