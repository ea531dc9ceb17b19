"""Explicit numeric token parsing shared by the scenario loader and submission reader.

Parsers return ``None`` instead of raising, so callers decide how a bad token
is reported (``ScenarioFormatError`` vs. a ``MalformedLine`` record).
"""

from __future__ import annotations

import re
from decimal import Decimal

_INT_RE = re.compile(r"[+-]?\d+")
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_int(token: str) -> int | None:
    token = token.strip()
    if not _INT_RE.fullmatch(token):
        return None
    return int(token)


def parse_decimal(token: str) -> Decimal | None:
    """Parse a plain decimal literal (no exponent, no thousands separators)."""
    token = token.strip()
    if not _DECIMAL_RE.fullmatch(token):
        return None
    return Decimal(token)
