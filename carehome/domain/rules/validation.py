from __future__ import annotations

import re

_EMAIL_RE = re.compile(r"^[A-Za-z0-9+_.-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})$")
_PHONE_RE = re.compile(r"^\+?[0-9]{10,15}$")
_ID_RE = re.compile(r"^[A-Z0-9]{3,10}$")
_DOSAGE_RE = re.compile(r"^\d+(\.\d+)?\s*(mg|g|ml|units?|tablets?|pills?)$")

def is_valid_email(value: str | None) -> bool:
    return value is not None and _EMAIL_RE.fullmatch(value) is not None

def is_valid_phone(value: str | None) -> bool:
    if value is None:
        return False
    return _PHONE_RE.fullmatch(re.sub(r"\s", "", value)) is not None

def is_valid_id(value: str | None) -> bool:
    return value is not None and _ID_RE.fullmatch(value.upper()) is not None

def is_valid_gender(value: str | None) -> bool:
    return value is not None and value.upper() in {"M", "F"}

def is_valid_dosage(value: str | None) -> bool:
    return value is not None and _DOSAGE_RE.fullmatch(value.strip().lower()) is not None

def clean_string(value: str | None) -> str:
    return (value or "").strip()

def format_name(value: str | None) -> str:
    words = clean_string(value).lower().split()
    return " ".join(word[:1].upper() + word[1:] for word in words)
