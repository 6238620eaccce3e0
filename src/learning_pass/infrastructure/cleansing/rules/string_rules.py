"""Name, street and general string normalizers."""

from __future__ import annotations

import re
from typing import Any, Tuple

from learning_pass.infrastructure.cleansing.registry import RuleCategory, rule

_STREET_BODY = re.compile(r"[a-z0-9](?:.*[a-z0-9.])?")


def _as_text(value: Any) -> str:
    # Lists, mappings and booleans are not text.
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ""
    return str(value)


@rule(
    name="trim_whitespace",
    category=RuleCategory.STRING,
    description="Strip surrounding whitespace; None becomes an empty string",
)
def trim_whitespace(value: Any) -> str:
    return _as_text(value).strip()


@rule(
    name="capitalize",
    category=RuleCategory.STRING,
    description="Capitalize every word and every hyphenated part",
)
def capitalize(value: Any) -> str:
    """
    Capitalize each whitespace and hyphen separated token.

    ``'capt.-mike-stink-belly'`` -> ``'Capt.-Mike-Stink-Belly'``,
    ``'USER-ID'`` -> ``'User-Id'``. Whitespace runs collapse to one space.
    """
    groups = []
    for group in _as_text(value).split("-"):
        words = [word[:1].upper() + word[1:].lower() for word in group.split()]
        groups.append(" ".join(words))
    return "-".join(groups)


@rule(
    name="normalize_street",
    category=RuleCategory.ADDRESS,
    description="Lower-case, hyphens to spaces, trim to the address body, capitalize",
)
def normalize_street(value: Any) -> str:
    text = _as_text(value).lower().replace("-", " ")
    match = _STREET_BODY.search(text)
    if not match:
        return ""
    return capitalize(match.group(0))


def _split_name(value: Any) -> Tuple[str, str]:
    text = " ".join(_as_text(value).split())
    if "," in text:
        last, _, first = text.partition(",")
        return first.strip(), last.strip()
    tokens = text.split(" ")
    if len(tokens) == 1:
        # One word serves as both first and last name.
        return tokens[0], tokens[0]
    return tokens[0], " ".join(tokens[1:])


@rule(
    name="first_name",
    category=RuleCategory.NAME,
    description="First name from 'First Last' or 'Last, First'",
)
def first_name(value: Any) -> str:
    return capitalize(_split_name(value)[0])


@rule(
    name="last_name",
    category=RuleCategory.NAME,
    description="Last name from 'First Last' or 'Last, First'",
)
def last_name(value: Any) -> str:
    return capitalize(_split_name(value)[1])


@rule(
    name="middle_name",
    category=RuleCategory.NAME,
    description="Capitalized middle name(s)",
)
def middle_name(value: Any) -> str:
    return capitalize(value)


@rule(
    name="split_comma_string",
    category=RuleCategory.STRING,
    description="Part before (first=True) or after the first comma",
)
def split_comma_string(value: Any, first: bool = True) -> str:
    """``'EDMONTON,AB'`` -> ``'EDMONTON'`` or ``'AB'``."""
    parts = _as_text(value).split(",", 1)
    if first:
        return parts[0].strip()
    return parts[1].strip() if len(parts) > 1 else ""


__all__ = [
    "trim_whitespace",
    "capitalize",
    "normalize_street",
    "first_name",
    "last_name",
    "middle_name",
    "split_comma_string",
]
