"""Shared helpers for client-supplied contact details."""

import re

_FORMATTING = re.compile(r"[\s().\-/]+")
_DIGITS_ONLY = re.compile(r"\+?\d*")


def clean_client_phone(raw: str) -> str:
    """Drop the usual phone punctuation, keeping digits and one leading +.

    Anything else that is not a digit is left in place, so the caller's
    digit-count check rejects it instead of silently dropping letters.

        >>> clean_client_phone(" (11) 98765-4321 ")
        '11987654321'
        >>> clean_client_phone("+55 11 98765 4321")
        '+5511987654321'
    """
    return _FORMATTING.sub("", raw.strip())


def phone_is_digits(phone: str) -> bool:
    return _DIGITS_ONLY.fullmatch(phone) is not None
