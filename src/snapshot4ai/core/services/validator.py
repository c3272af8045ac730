from __future__ import annotations

"""
Configuration Validation Service.

Normalizes configuration coming from disk or the command line into strictly
typed values. Invalid values fall back to defaults and produce a warning, or
raise in strict mode.
"""

import logging
from typing import Any, Dict, List, Tuple

from snapshot4ai.domain.config import get_default_config
from snapshot4ai.infra.logging.config import _LEVEL_MAP

logger = logging.getLogger(__name__)

MAX_CONCURRENCY_CAP = 64


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          the list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("input_path", "target_model", "version"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    merged["log_file"] = _as_str(merged.get("log_file"), "", "log_file", warnings, strict)
    merged["show_sizes"] = _as_bool(merged.get("show_sizes"), defaults["show_sizes"], "show_sizes", warnings, strict)
    merged["max_concurrency"] = _as_concurrency(merged.get("max_concurrency"), warnings, strict)
    merged["log_level"] = _as_level(merged.get("log_level"), warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_concurrency(value: Any, warnings: List[str], strict: bool) -> int:
    """Coerce the sibling read concurrency into 1..MAX_CONCURRENCY_CAP."""
    fallback = 1
    if value is None:
        return fallback

    number: Any = value
    if isinstance(value, str) and not strict:
        try:
            number = int(value.strip())
            warnings.append(f"Field 'max_concurrency' converted from '{value}' to {number}.")
        except ValueError:
            number = None

    if isinstance(number, bool) or not isinstance(number, int):
        msg = f"Invalid field 'max_concurrency': expected int, received {type(value).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using fallback.")
        return fallback

    if number < 1 or number > MAX_CONCURRENCY_CAP:
        msg = f"Field 'max_concurrency' must be between 1 and {MAX_CONCURRENCY_CAP}, got {number}."
        if strict:
            raise ValueError(msg)
        clamped = min(max(number, 1), MAX_CONCURRENCY_CAP)
        warnings.append(f"{msg} Clamped to {clamped}.")
        return clamped

    return number


def _as_level(value: Any, warnings: List[str], strict: bool) -> str:
    """Ensure the log level is one of the known severity names."""
    if value is None:
        return "INFO"
    if isinstance(value, str) and value.strip().upper() in _LEVEL_MAP:
        return value.strip().upper()

    msg = f"Invalid field 'log_level': unknown level {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using INFO.")
    return "INFO"
