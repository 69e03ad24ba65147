import re
from datetime import datetime, timezone

import phonenumbers


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_phone(phone: str, region: str | None = None) -> str:
    clean = re.sub(r"[^\d+]", "", phone or "")
    if not clean:
        raise ValueError("Phone number cannot be empty.")

    try:
        parsed = phonenumbers.parse(clean, None if clean.startswith("+") else region)
    except phonenumbers.NumberParseException:
        raise ValueError("Invalid phone number format. Use e.g. +919812345678")

    if not phonenumbers.is_valid_number(parsed):
        raise ValueError("Invalid phone number. Use full international format.")

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def normalize_email(email: str) -> str:
    return email.strip().lower()
