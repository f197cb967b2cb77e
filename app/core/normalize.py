import re
import uuid
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def digits_only(value) -> str:
    """Strip everything but 0-9 ("555-0100" -> "5550100")."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def clean_text(value):
    if isinstance(value, str):
        return value.strip()
    return value


def fold_text(value) -> str:
    """Unicode-aware lowercase form used for case-insensitive matching ("Élodie" -> "élodie")."""
    if value is None:
        return ""
    return str(value).casefold()


def new_id() -> str:
    return uuid.uuid4().hex


def normalize_id(value) -> Optional[str]:
    """Return the canonical 32-hex form of a record id, or None if it is not one."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return uuid.UUID(value.strip()).hex
    except ValueError:
        return None
