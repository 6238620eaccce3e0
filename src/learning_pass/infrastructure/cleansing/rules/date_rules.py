"""Date normalizers."""

from __future__ import annotations

from datetime import date
from typing import Any, Union

from learning_pass.infrastructure.cleansing.registry import RuleCategory, rule
from learning_pass.utils.date_parser import parse_date, to_ansi_date


@rule(
    name="parse_date_value",
    category=RuleCategory.DATE,
    description="Parse a customer date into a Python date ('' when unparseable)",
)
def parse_date_value(value: Any) -> Union[date, str]:
    parsed = parse_date(value)
    return parsed if parsed is not None else ""


@rule(
    name="ansi_date",
    category=RuleCategory.DATE,
    description="Render a date as YYYYMMDD ('' when unparseable)",
)
def ansi_date(value: Any) -> str:
    return to_ansi_date(value)


__all__ = ["parse_date_value", "ansi_date"]
