# utils.py
from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from config import settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Returns a module logger with a single stream handler attached.

    Calling it again for the same name reuses the existing handler, so modules
    can call it at import time without duplicating output.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    return logger


# ---------------------------------------------------------------------------
# Number helpers
# ---------------------------------------------------------------------------

def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Converts text or a number to a finite Decimal.

    Floats go through str() so 0.1 stays 0.1 rather than its binary expansion.
    Returns None for blanks, booleans, non-numeric text, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    if not result.is_finite():
        return None
    return result


INT_LITERAL = re.compile(r"[+-]?\d{1,18}")


def to_int(value: Any) -> Optional[int]:
    """
    Converts text or a number to an int. Text must be a plain integer
    literal: "3" gives 3, while "3.5", "1e9" and "abc" give None. Numbers
    are accepted when whole, so 3.0 gives 3.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, Decimal):
        # Exponent form like 1E+5000000 would expand to millions of digits.
        if not value.is_finite() or value.adjusted() > 18 or value != value.to_integral_value():
            return None
        return int(value)
    text = str(value).strip()
    if not INT_LITERAL.fullmatch(text):
        return None
    return int(text)


def format_money(value: Decimal) -> str:
    """Formats an amount with thousands separators and two decimals: 1234.5 -> '1,234.50'."""
    return f"{value:,.2f}"
