from __future__ import annotations

import re

# E.164: "+", a non-zero leading digit, 7-15 digits in total.
_E164_RE = re.compile(r"\+[1-9][0-9]{6,14}")


def is_valid_e164(phone: str) -> bool:
    """
    True for "+224620123456", False for "224620123456" (no plus),
    "+0123456789" (leading zero) and "+123456" (too short).
    """
    if not isinstance(phone, str):
        return False
    # ASCII digits only; fullmatch also rejects a trailing newline
    return _E164_RE.fullmatch(phone) is not None


def to_whatsapp_format(phone: str) -> str:
    # Cloud API wants digits only; strip exactly one leading "+". No validation here.
    if phone.startswith("+"):
        return phone[1:]
    return phone


def mask_phone(phone: str) -> str:
    """
    Log-safe form of a phone number: country code prefix + last 4.

    "+224620123456" -> "+224****3456", "12345" -> "****2345", "1234" -> "****".
    Never use the result on the wire.
    """
    phone = phone or ""
    if len(phone) <= 4:
        return "****"
    prefix = phone[:4] if phone.startswith("+") else ""
    return f"{prefix}****{phone[-4:]}"
