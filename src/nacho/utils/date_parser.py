from __future__ import annotations
import datetime
from typing import Optional
import re

ACH_DATE_FORMAT = "YYMMDD"

# Map schema tokens -> strptime
# Case-insensitive; longer tokens first to avoid partial replacements.
_TOKEN_MAP = [
    (re.compile(r"YYYY", re.IGNORECASE), "%Y"),
    (re.compile(r"YY", re.IGNORECASE), "%y"),
    (re.compile(r"MM", re.IGNORECASE), "%m"),
    (re.compile(r"DD", re.IGNORECASE), "%d"),
]


def _normalize_format(fmt: str) -> str:
    """
    Converts schema-style tokens (YYYY, YY, MM, DD) to strptime tokens.

    :param fmt: The format string to normalize.
    :return: Normalized format string compatible with strptime.
    """
    out = fmt
    for pat, repl in _TOKEN_MAP:
        out = pat.sub(repl, out)
    return out


def _matches_format_exact(value: str, fmt: str) -> bool:
    """
    Parses with strptime, then requires exact match via strftime (strict).

    :param value: The date string to check.
    :param fmt: The format string to use for parsing.
    :return: True if the value matches the format exactly, False otherwise.
    """
    try:
        dt = datetime.datetime.strptime(value, fmt)
    except ValueError:
        return False
    return dt.strftime(fmt) == value


def parse_date(value: Optional[str], fmt: str = ACH_DATE_FORMAT) -> bool:
    """
    Check that a date string matches ``fmt`` exactly (zero padding and literals enforced).

    :param value: The date string to check.
    :param fmt: Schema tokens (``YYMMDD``) or a strptime format.
    :return: True if the date string can be parsed, False otherwise.
    """
    if not value or not isinstance(value, str):
        return False
    norm = _normalize_format(fmt) if "%" not in fmt else fmt
    return _matches_format_exact(value, norm)


def coerce_date(value: str, fmt: str = ACH_DATE_FORMAT) -> str:
    """Coerce a date string into canonical ISO (YYYY-MM-DD).

    :raises ValueError: if parsing fails or value empty.
    """
    token = (value or "").strip()
    if token == "":
        raise ValueError("empty date")
    norm = _normalize_format(fmt) if "%" not in fmt else fmt
    try:
        return datetime.datetime.strptime(token, norm).date().isoformat()
    except ValueError:
        raise ValueError(f"bad date: {value}") from None


__all__ = [
    "ACH_DATE_FORMAT",
    "parse_date",
    "coerce_date",
]
