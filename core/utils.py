# core/utils.py

import math
from datetime import datetime, timezone


def normalize_email(email: str) -> str:
    """Emails are identity keys; compare and store them trimmed and lower-case."""
    return (email or "").strip().lower()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_int_or_none(value):
    """
    Lenient integer parse for query strings: "6", "6.0" and 6 all give 6,
    blanks, garbage and non-finite numbers ("inf", "1e999", "nan") give None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
        try:
            value = float(value)
        except (ValueError, TypeError):
            return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return int(value)
    return None
