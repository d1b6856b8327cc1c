"""
CEP grammar: 5 digits, an optional hyphen, 3 digits.

Validation and normalization are separate steps. Only a bare 8-digit code is
rewritten; a code that already carries the hyphen passes through untouched.
"""

from typing import Optional

from cep_service.core.exceptions import InvalidCEPError

_DIGITS = frozenset("0123456789")


def _all_digits(chunk: str) -> bool:
    # str.isdigit() also accepts non-ASCII digits such as "٣"
    return bool(chunk) and all(ch in _DIGITS for ch in chunk)


def is_valid_cep(raw: Optional[str]) -> bool:
    """Checks `raw` against the full grammar, with nothing before or after."""
    if not raw:
        return False
    if len(raw) == 8:
        return _all_digits(raw)
    if len(raw) == 9:
        return raw[5] == "-" and _all_digits(raw[:5]) and _all_digits(raw[6:])
    return False


def normalize_cep(raw: str) -> str:
    """Inserts the hyphen after the fifth digit of a bare 8-digit code."""
    if len(raw) == 8 and _all_digits(raw):
        return f"{raw[:5]}-{raw[5:]}"
    return raw


def parse_cep(raw: Optional[str]) -> str:
    """
    Validates and normalizes a CEP.

    Raises:
        InvalidCEPError: If `raw` is missing or does not match the grammar.
    """
    if not is_valid_cep(raw):
        raise InvalidCEPError(raw_code=raw)
    return normalize_cep(raw)
