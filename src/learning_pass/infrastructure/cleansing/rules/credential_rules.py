"""Password, PIN and barcode normalizers.

PINs derived from passwords use a Java ``String.hashCode`` compatible hash so
that PINs issued by earlier registrations stay reproducible.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator, Optional

from learning_pass.infrastructure.cleansing.registry import RuleCategory, rule

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 4
PASSWORD_MAX_LENGTH = 125
# Letters, digits and the punctuation the OPAC login accepts. Quotes, slashes,
# backslash, backtick, '?', brackets, '|' and whitespace are refused.
PASSWORD_SAFE_CHARS = r"A-Za-z0-9!@#$%^&*_+=~.,:;\-"
DEFAULT_PASSWORD_PATTERN = re.compile(f"^[{PASSWORD_SAFE_CHARS}]+$")

MIN_BARCODE_WIDTH = 1
DEFAULT_BARCODE_MIN = 1
DEFAULT_BARCODE_MAX = 100

_FOUR_DIGITS = re.compile(r"^\d{4}$")
_DIGITS = re.compile(r"^\d+$")
_LOOSE_BARCODE = re.compile(r"^[a-z0-9_]+$", re.IGNORECASE)


def _utf16_units(text: str) -> Iterator[int]:
    for char in text:
        code_point = ord(char)
        if code_point > 0xFFFF:
            code_point -= 0x10000
            yield 0xD800 + (code_point >> 10)
            yield 0xDC00 + (code_point & 0x3FF)
        else:
            yield code_point


def hash_code(value: Any) -> int:
    """
    Absolute value of the Java ``String.hashCode`` of ``value``.

    ``h = h * 31 + unit`` over UTF-16 code units, truncated to a signed 32-bit
    integer after every step.

    Example:
        >>> hash_code("HelloWorld")
        439329280
    """
    result = 0
    for unit in _utf16_units("" if value is None else str(value)):
        result = (result * 31 + unit) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return abs(result)


@rule(
    name="four_digit_pin",
    category=RuleCategory.CREDENTIAL,
    description="Keep a four digit PIN, otherwise hash the value modulo 10000",
)
def four_digit_pin(value: Any) -> str:
    """``'HelloWorld'`` -> ``'9280'``. The result is not zero-padded."""
    text = "" if value is None else str(value)
    if not text:
        return ""
    if _FOUR_DIGITS.match(text):
        return text
    return str(hash_code(text) % 10000)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@rule(
    name="normalize_password",
    category=RuleCategory.CREDENTIAL,
    description="Accept OPAC-safe passwords, optionally converting them to a PIN",
)
def normalize_password(
    value: Any,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
    regex: Optional[str] = None,
    password_to_pin: bool = False,
) -> str:
    """
    Validate a password.

    Args:
        value: candidate password
        minimum: minimum length, default 4
        maximum: maximum length, default 125
        regex: pattern replacing the default character rule
        password_to_pin: return ``four_digit_pin(value)`` instead of the password

    Returns:
        The accepted password (or PIN), or ``""`` when rejected.
    """
    if value is None:
        return ""
    text = str(value)
    low = minimum if _is_positive_int(minimum) else PASSWORD_MIN_LENGTH
    high = maximum if _is_positive_int(maximum) else PASSWORD_MAX_LENGTH
    if not low <= len(text) <= high:
        return ""

    if regex:
        try:
            accepted = re.search(regex, text) is not None
        except re.error as exc:
            logger.error("Invalid password regex %r: %s", regex, exc)
            return ""
    else:
        accepted = DEFAULT_PASSWORD_PATTERN.match(text) is not None
    if not accepted:
        return ""

    return four_digit_pin(text) if password_to_pin else text


@rule(
    name="normalize_barcode",
    category=RuleCategory.CREDENTIAL,
    description="Alphanumeric/underscore barcode, upper-cased",
)
def normalize_barcode(value: Any, min_width: int = MIN_BARCODE_WIDTH) -> str:
    """``'some_bar_code'`` -> ``'SOME_BAR_CODE'``; ``'USER-ID'`` is rejected."""
    text = "" if value is None else str(value).strip()
    if not text or not _LOOSE_BARCODE.match(text):
        return ""
    if len(text) < max(min_width, MIN_BARCODE_WIDTH):
        return ""
    return text.upper()


@rule(
    name="numeric_barcode",
    category=RuleCategory.CREDENTIAL,
    description="Digit-only barcode whose length lies within [minimum, maximum]",
)
def numeric_barcode(value: Any, minimum: Any = None, maximum: Any = None) -> str:
    """
    Accept a digit string of an allowed length.

    An invalid ``maximum`` (not a positive integer, not above the minimum
    width or not above ``minimum``) becomes 100; an invalid ``minimum`` (not a
    positive integer or not below a valid ``maximum``) becomes 1.
    """
    max_ok = (
        _is_positive_int(maximum)
        and maximum > MIN_BARCODE_WIDTH
        and (not _is_positive_int(minimum) or maximum > minimum)
    )
    high = maximum if max_ok else DEFAULT_BARCODE_MAX
    if not max_ok and maximum is not None:
        logger.warning("Invalid barcode maximum %r, using %d", maximum, DEFAULT_BARCODE_MAX)

    min_ok = (
        _is_positive_int(minimum)
        and minimum >= MIN_BARCODE_WIDTH
        and _is_positive_int(maximum)
        and minimum < maximum
    )
    low = minimum if min_ok else DEFAULT_BARCODE_MIN
    if not min_ok and minimum is not None:
        logger.warning("Invalid barcode minimum %r, using %d", minimum, DEFAULT_BARCODE_MIN)

    text = "" if value is None else str(value).strip()
    if not _DIGITS.match(text):
        return ""
    return text if low <= len(text) <= high else ""


@rule(
    name="prefixed_barcode",
    category=RuleCategory.CREDENTIAL,
    description="Library prefix followed by a numeric card number",
)
def prefixed_barcode(
    value: Any,
    prefix: str = "",
    minimum: Any = None,
    maximum: Any = None,
    regex: Optional[str] = None,
) -> str:
    """
    Build ``prefix + card number``.

    The ``minimum``/``maximum`` window applies to the whole barcode, so the
    card number window shrinks by the prefix length (the minimum only while it
    stays at least 1). A barcode longer than a valid ``maximum`` is rejected
    even when the shrunken card number window falls back to the defaults.
    """
    prefix = prefix or ""
    width = len(prefix)
    total_max = maximum if _is_positive_int(maximum) else None
    if _is_positive_int(minimum) and minimum - width >= MIN_BARCODE_WIDTH:
        minimum -= width
    if _is_positive_int(maximum):
        maximum -= width

    body = numeric_barcode(value, minimum, maximum)
    if not body:
        return ""
    barcode = f"{prefix}{body}"
    if total_max is not None and len(barcode) > total_max:
        return ""
    if regex:
        try:
            if re.search(regex, barcode) is None:
                return ""
        except re.error as exc:
            logger.error("Invalid barcode regex %r: %s", regex, exc)
            return ""
    return barcode


__all__ = [
    "hash_code",
    "four_digit_pin",
    "normalize_password",
    "normalize_barcode",
    "numeric_barcode",
    "prefixed_barcode",
]
