"""Email, phone and postal code normalizers."""

from __future__ import annotations

import re
from typing import Any

from learning_pass.infrastructure.cleansing.registry import RuleCategory, rule

_EMAIL = re.compile(
    r"^[A-Za-z0-9._%+'\-]+@[A-Za-z0-9\-]+(?:\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$"
)
_PHONE_SEPARATORS = re.compile(r"[+().\/]")
_PHONE = re.compile(r"^[\d-]{3,16}$")
_POSTAL_NOISE = re.compile(r"[\s\-()]")
_POSTAL_CODE = re.compile(r"^[A-Z]\d[A-Z]\d[A-Z]\d$")


@rule(
    name="normalize_email",
    category=RuleCategory.CONTACT,
    description="Accept local@domain.tld addresses, case preserved",
)
def normalize_email(value: Any) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    return text if _EMAIL.match(text) else ""


@rule(
    name="normalize_phone",
    category=RuleCategory.CONTACT,
    description="Strip + ( ) . / and join digit groups with hyphens",
)
def normalize_phone(value: Any) -> str:
    """
    ``'+1(780) 242-5555'`` -> ``'1-780-242-5555'``.

    The result must be 3 to 16 digits or hyphens, anything with letters is
    rejected.
    """
    if value is None:
        return ""
    text = _PHONE_SEPARATORS.sub(" ", str(value)).strip()
    text = re.sub(r"\s+", "-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text if _PHONE.match(text) else ""


@rule(
    name="normalize_postal_code",
    category=RuleCategory.ADDRESS,
    description="Canadian postal code A9A9A9, upper-cased",
)
def normalize_postal_code(value: Any) -> str:
    if value is None:
        return ""
    text = _POSTAL_NOISE.sub("", str(value)).upper()
    return text if _POSTAL_CODE.match(text) else ""


__all__ = ["normalize_email", "normalize_phone", "normalize_postal_code"]
