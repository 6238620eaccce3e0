"""Registration outcome codes and the response built from a conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Sequence

from learning_pass.domain.customer.models import EMPTY_CUSTOMER_ERROR, NormalizedCustomer


class RegistrationStatus(IntEnum):
    SUCCESS = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    INCOMPLETE = 206
    MAL_FORMED = 400
    API_KEY_PROBLEM = 401
    NOT_ALLOWED = 405
    TOO_MANY_REQUESTS = 429
    INTERNAL_ERROR = 500
    NOT_IMPLEMENTED = 501

    @property
    def base_message(self) -> str:
        return BASE_MESSAGES[self]

    @property
    def is_error(self) -> bool:
        return self >= RegistrationStatus.ACCEPTED


BASE_MESSAGES: Dict[RegistrationStatus, str] = {
    RegistrationStatus.SUCCESS: "Thank you for registering!",
    RegistrationStatus.CREATED: "Thank you for registering!",
    RegistrationStatus.ACCEPTED: "Thank you, your account will be loaded shortly.",
    RegistrationStatus.NO_CONTENT: "No customer data received.",
    RegistrationStatus.INCOMPLETE: "Some required fields are incorrect or missing",
    RegistrationStatus.MAL_FORMED: "Hmm, required fields are missing or broken",
    RegistrationStatus.API_KEY_PROBLEM: "Sorry, your API key is missing, or invalid.",
    RegistrationStatus.NOT_ALLOWED: "Sorry, this customer isn't allowed to use this service",
    RegistrationStatus.TOO_MANY_REQUESTS: "Why do you keep hounding me?",
    RegistrationStatus.INTERNAL_ERROR: "Somethings not right at our end.",
    RegistrationStatus.NOT_IMPLEMENTED: "Are you using the correct request method?",
}


@dataclass
class RegistrationResponse:
    """Status plus the messages reported back to the registering partner."""

    status: RegistrationStatus = RegistrationStatus.SUCCESS
    messages: List[str] = field(default_factory=list)
    customer_id: str = ""

    @property
    def has_errors(self) -> bool:
        return self.status.is_error

    def summary(self) -> str:
        """``'Thank you for registering!: 2122..., message, message'``"""
        text = self.status.base_message
        if self.customer_id:
            text += f": {self.customer_id}"
        for message in self.messages:
            text += f", {message}"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": int(self.status),
            "error": self.has_errors,
            "barcode": self.customer_id,
            "messages": list(self.messages),
        }

    @classmethod
    def from_conversion(
        cls,
        customer: NormalizedCustomer,
        errors: Sequence[str],
        missing: Sequence[str] = (),
        written: Optional[bool] = None,
    ) -> "RegistrationResponse":
        """
        Fold a conversion outcome into a response.

        Args:
            customer: validated customer
            errors: validator error messages
            missing: required fields still blank
            written: flat write outcome, ``None`` when nothing was written
        """
        messages = list(errors)
        if EMPTY_CUSTOMER_ERROR in messages:
            return cls(RegistrationStatus.NO_CONTENT, messages)
        if missing:
            return cls(RegistrationStatus.INCOMPLETE, messages, customer.barcode)
        if written is False:
            return cls(RegistrationStatus.ACCEPTED, messages, customer.barcode)
        status = RegistrationStatus.CREATED if written else RegistrationStatus.SUCCESS
        return cls(status, messages, customer.barcode)
