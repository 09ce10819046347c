# common/validators.py

"""
IDENTIFIER VALIDATORS

National IDs (cedula) are 11 digits; provider RNCs are 9 digits.
Providers may also be registered under an 11-digit national ID.
Dashes and spaces are tolerated on input and stripped.
"""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[-\s]")
_NATIONAL_ID = re.compile(r"^\d{11}$")
_RNC = re.compile(r"^\d{9}$")


def _strip(value) -> str:
    return _SEPARATORS.sub("", str(value or ""))


def normalize_national_id(value) -> str | None:
    """Return the bare 11-digit national ID, or None if the shape is wrong."""
    cleaned = _strip(value)
    if not _NATIONAL_ID.match(cleaned):
        return None
    return cleaned


def is_valid_national_id(value) -> bool:
    return normalize_national_id(value) is not None


def normalize_provider_id(value) -> str | None:
    """Return a bare RNC (9 digits) or national ID (11 digits), else None."""
    cleaned = _strip(value)
    if _RNC.match(cleaned) or _NATIONAL_ID.match(cleaned):
        return cleaned
    return None


def is_valid_provider_id(value) -> bool:
    return normalize_provider_id(value) is not None


def to_positive_int(value, *, field_name: str = "quantity") -> int:
    """
    Quantity normalizer.
    Quantities are whole units; bools and fractional strings are rejected.
    Raises ValueError with a field-specific message.
    """
    if value is None or value == "":
        raise ValueError(f"{field_name} is required")

    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a whole number")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise ValueError(f"{field_name} must be a whole number")

    if qty <= 0:
        raise ValueError(f"{field_name} must be greater than zero")

    return qty


def to_non_negative_int(value, *, field_name: str = "quantity") -> int:
    """Like to_positive_int, but zero is accepted (absolute stock targets)."""
    if value == 0 and not isinstance(value, bool):
        return 0
    if isinstance(value, str) and value.strip() == "0":
        return 0
    return to_positive_int(value, field_name=field_name)
