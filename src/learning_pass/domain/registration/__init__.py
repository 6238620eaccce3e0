"""Registration response codes."""

from learning_pass.domain.registration.status import (
    BASE_MESSAGES,
    RegistrationResponse,
    RegistrationStatus,
)

__all__ = ["BASE_MESSAGES", "RegistrationResponse", "RegistrationStatus"]
