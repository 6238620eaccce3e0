"""Validation error collection.

Field rejections are collected while a customer is validated and handed back
to the caller as plain strings; nothing here raises.

Usage:
    >>> reporter = ValidationErrorReporter()
    >>> reporter.collect_error(
    ...     field_name="email",
    ...     error_type="rejected",
    ...     error_message="Invalid email address",
    ...     original_value="a@b",
    ... )
    >>> reporter.messages()
    ['Invalid email address']
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from learning_pass.utils.logging import REDACTED_VALUE, get_logger

logger = get_logger(__name__)

# Values of these fields never appear in error records.
SECRET_FIELDS = frozenset({"pin", "password"})


@dataclass(frozen=True)
class ValidationError:
    """Single field error.

    Attributes:
        field_name: Customer field that failed
        error_type: rejected, unmapped, required, structural ...
        error_message: Human-readable error description
        original_value: Sanitized raw value
    """

    field_name: str
    error_type: str
    error_message: str
    original_value: str


class ValidationErrorReporter:
    """Collect field errors for one customer conversion."""

    def __init__(self) -> None:
        self.errors: List[ValidationError] = []

    def collect_error(
        self,
        field_name: str,
        error_type: str,
        error_message: str,
        original_value: Any = None,
    ) -> None:
        sanitized_value = self._sanitize_value(field_name, original_value)
        self.errors.append(
            ValidationError(
                field_name=field_name,
                error_type=error_type,
                error_message=error_message,
                original_value=sanitized_value,
            )
        )
        logger.info(
            "customer.field_error",
            field=field_name,
            error_type=error_type,
            value=sanitized_value,
        )

    def messages(self) -> List[str]:
        return [error.error_message for error in self.errors]

    def broken_fields(self, error_type: Optional[str] = None) -> List[str]:
        fields: List[str] = []
        for error in self.errors:
            if error_type and error.error_type != error_type:
                continue
            if error.field_name not in fields:
                fields.append(error.field_name)
        return fields

    def has_errors(self) -> bool:
        return bool(self.errors)

    @staticmethod
    def _sanitize_value(field_name: str, value: Any, max_length: int = 50) -> str:
        if value is None:
            return ""
        if field_name in SECRET_FIELDS:
            return REDACTED_VALUE
        text = str(value).replace("\n", " ").replace("\r", " ")
        if len(text) > max_length:
            text = text[: max_length - 3] + "..."
        return text
