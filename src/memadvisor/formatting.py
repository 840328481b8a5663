"""Exact decimal rendering of byte quantities.

The scheduler parses suggestions back into an exact numeric type, so
``format_bytes`` never uses exponent notation or float conversion:
``parse_bytes(format_bytes(x)) == x`` for every finite, non-negative x.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from memadvisor.exceptions import FormatError

# Plain decimal only: no sign, no exponent, no whitespace, no unit suffix.
_PLAIN_DECIMAL_RE = re.compile(r"\d+(\.\d+)?")

_IEC_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")
_KIB = Decimal(1024)


def format_bytes(value: Decimal) -> str:
    """Render *value* as a plain decimal string without losing digits."""
    if not isinstance(value, Decimal):
        raise FormatError(f"expected Decimal, got {type(value).__name__}")
    if not value.is_finite() or value < 0:
        raise FormatError(f"cannot format byte quantity {value}")
    if value.is_zero():
        return "0"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def parse_bytes(text: str) -> Decimal:
    """Parse a string produced by :func:`format_bytes` back to a Decimal."""
    if not isinstance(text, str) or not _PLAIN_DECIMAL_RE.fullmatch(text):
        raise FormatError(f"not a plain decimal byte quantity: {text!r}")
    try:
        return Decimal(text)
    except InvalidOperation as exc:  # pragma: no cover - regex already guards
        raise FormatError(f"not a plain decimal byte quantity: {text!r}") from exc


def humanize_bytes(value: Decimal) -> str:
    """Format *value* with IEC units for display, e.g. ``"3.60 GiB"``."""
    amount = Decimal(value)
    for unit in _IEC_UNITS[:-1]:
        if amount < _KIB:
            break
        amount /= _KIB
    else:
        unit = _IEC_UNITS[-1]
    if unit == "B":
        return f"{amount:.0f} B"
    return f"{amount:.2f} {unit}"
