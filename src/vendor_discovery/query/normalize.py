# query/normalize.py
"""Normalization helpers for raw query and control values.

Everything coming from a URL or a UI control is a string (or missing). These
helpers turn such values into typed Python values and return ``None`` instead
of raising when a value cannot be parsed, so that callers can fall back to a
default.
"""

from __future__ import annotations
import math
from typing import Optional, Any

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# ---------------------------------------------------------------------------
# Normalization helpers
# ---------------------------------------------------------------------------

def normalize_float(v: Any) -> Optional[float]:
    """Convert *v* to ``float`` if possible, otherwise ``None``.

    ``None`` is also returned for empty strings, ``nan``/``inf`` and values
    that cannot be parsed. A comma is accepted as the decimal separator.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        result = float(v)
    else:
        try:
            result = float(str(v).strip().replace(",", "."))
        except (ValueError, TypeError):
            return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def normalize_int(v: Any) -> Optional[int]:
    """Convert *v* to ``int`` if possible, otherwise ``None``.

    Integral floats (``3.0``, ``"3.0"``) are accepted, fractional ones are
    rejected: a page number of ``2.5`` is malformed, not page 2.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    f = normalize_float(v)
    if f is None or not f.is_integer():
        return None
    return int(f)


def normalize_non_negative(v: Any) -> Optional[float]:
    """Like :func:`normalize_float` but negative values become ``None``."""
    f = normalize_float(v)
    if f is None or f < 0:
        return None
    return f


def normalize_bool(v: Any) -> Optional[bool]:
    """Accept real booleans and the usual string spellings (``"true"``, ``"1"``)."""
    if v is None:
        return None
    if isinstance(v, bool):
        return v
    s = str(v).strip().lower()
    if s in _TRUE_VALUES:
        return True
    if s in _FALSE_VALUES:
        return False
    return None


def normalize_text(v: Any) -> Optional[str]:
    """Strip whitespace, empty strings become ``None``."""
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def normalize_rating(v: Any) -> Optional[int]:
    """Return an exact star value ``1..5`` or ``None``.

    Out-of-range values are dropped, not clamped: only exact star values are
    meaningful facets.
    """
    r = normalize_int(v)
    if r is None or r < 1 or r > 5:
        return None
    return r


def format_number(v: float) -> str:
    """Render ``500.0`` as ``"500"`` and ``12.5`` as ``"12.5"``."""
    if float(v).is_integer():
        return str(int(v))
    return repr(float(v))

# End of file
