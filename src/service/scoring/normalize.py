"""
Input normalizers shared by every scoring module.

Application, bureau and system-check payloads arrive from several upstream
systems and mix types freely: booleans may be ``True``, ``1``, ``"yes"`` or
``"Y"``; amounts may be numbers or strings such as ``"120,000"``. All coercion
happens here so the scoring modules only ever see clean Python values.

None of these functions raise for malformed input. Unparseable values fall
back to a documented default.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y"})
_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")


def as_bool(value: Any) -> bool:
    """
    Tolerant boolean coercion.

    ``True``, ``1`` and the strings ``"true"``, ``"1"``, ``"yes"``, ``"y"``
    (case-insensitive, whitespace ignored) are true. Everything else is false.
    """
    if value is True:
        return True
    if isinstance(value, bool) or value is None:
        return False
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def as_optional_float(value: Any) -> Optional[float]:
    """Parse a number or numeric string, returning None when absent or invalid."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def as_float(value: Any, default: float = 0.0) -> float:
    """Parse a number or numeric string, falling back to ``default``."""
    number = as_optional_float(value)
    return default if number is None else number


def as_int(value: Any, default: int = 0) -> int:
    """Parse an integer, truncating fractional input."""
    number = as_optional_float(value)
    return default if number is None else int(number)


def as_text(value: Any) -> str:
    """Stripped string form of a value; empty string for None."""
    if value is None:
        return ""
    return str(value).strip()


def as_date(value: Any) -> Optional[date]:
    """
    Parse a calendar date.

    Accepts ``date``/``datetime`` objects and ISO strings (``YYYY-MM-DD``,
    optionally followed by a time component). Returns None when the value
    cannot be read as a real calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    match = _DATE_PREFIX.match(value.strip())
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def employment_category(value: Any) -> str:
    """
    Map free-text employment type onto a canonical category.

    Returns one of ``permanent``, ``contractual``, ``self_employed``,
    ``probation``, ``retired`` or ``other``. Empty input maps to
    ``permanent``, the default employment type for salaried applicants.
    """
    text = as_text(value).lower().replace("_", "-")
    if not text:
        return "permanent"
    if text in ("permanent", "employed", "salaried"):
        return "permanent"
    if text.startswith("contract"):
        return "contractual"
    if "self" in text or text == "business":
        return "self_employed"
    if text.startswith("probation"):
        return "probation"
    if text in ("retired", "pensioner"):
        return "retired"
    return "other"


def lower_text(value: Any) -> str:
    return as_text(value).lower()
