"""
Customer validation pipeline.

``validate`` runs one raw registration payload through every stage:

    START -> FIELDS_NORMALIZED -> DEFAULTS_APPLIED -> NOTE_HOOK_APPLIED -> DONE

Field failures are collected and the pipeline keeps going, so the caller
always gets a best-effort ``NormalizedCustomer`` together with the list of
error messages. Nothing in here raises for malformed customer data.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from learning_pass.domain.customer.models import (
    CUSTOMER_FIELDS,
    EMPTY_CUSTOMER_ERROR,
    NormalizedCustomer,
    is_blank,
)
from learning_pass.domain.customer.policy import PolicyResolver
from learning_pass.domain.notes.service import apply_note_hook
from learning_pass.infrastructure.cleansing import split_comma_string
from learning_pass.infrastructure.settings.policy_schema import (
    FieldPolicy,
    PolicyLike,
    coerce_policy,
    effective_policy,
)
from learning_pass.utils.error_reporter import ValidationErrorReporter
from learning_pass.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIBRARY_NAME = "The library"


class ValidationStage(str, Enum):
    START = "start"
    FIELDS_NORMALIZED = "fields_normalized"
    DEFAULTS_APPLIED = "defaults_applied"
    NOTE_HOOK_APPLIED = "note_hook_applied"
    DONE = "done"


def required_fields_message(library_name: Optional[str]) -> str:
    return f"{library_name or DEFAULT_LIBRARY_NAME} registration requires valid data in these fields:"


def missing_required_fields(customer: Any, policy: PolicyLike) -> List[str]:
    """Required fields (in policy order) that are still blank on ``customer``."""
    if isinstance(customer, NormalizedCustomer):
        record: Mapping[str, Any] = customer.to_record()
    else:
        record = customer or {}
    return [field for field in coerce_policy(policy).required if is_blank(record.get(field))]


class CustomerValidator:
    """Validate raw customer payloads for one library/partner pairing.

    The validator only holds read-only policy; every ``validate`` call works on
    its own resolver, error reporter and working record.
    """

    def __init__(
        self,
        library_policy: PolicyLike,
        partner_policy: PolicyLike = None,
        *,
        today: Optional[date] = None,
        apply_hook: bool = True,
    ) -> None:
        self.library_policy: FieldPolicy = coerce_policy(library_policy)
        self.partner_policy: FieldPolicy = coerce_policy(partner_policy)
        self.policy: FieldPolicy = effective_policy(self.partner_policy, self.library_policy)
        self.today = today
        self.apply_hook = apply_hook

    def validate(self, raw: Any) -> Tuple[NormalizedCustomer, List[str]]:
        stage = ValidationStage.START
        logger.debug("customer.stage", stage=stage.value)

        if not isinstance(raw, Mapping) or not raw:
            logger.warning("customer.structural_error", input_type=type(raw).__name__)
            return NormalizedCustomer(), [EMPTY_CUSTOMER_ERROR]

        reporter = ValidationErrorReporter()
        resolver = PolicyResolver(
            self.partner_policy,
            self.library_policy,
            today=self.today,
            reporter=reporter,
            lenient_fields=set(self.policy.optional) - set(self.policy.required),
        )

        record = self._prepare(raw)
        normalized: Dict[str, Any] = {}
        for field in CUSTOMER_FIELDS:
            value = record.get(field)
            normalized[field] = "" if is_blank(value) else resolver.normalize(field, value)
        stage = ValidationStage.FIELDS_NORMALIZED
        logger.debug("customer.stage", stage=stage.value)

        for field in CUSTOMER_FIELDS:
            if is_blank(normalized[field]):
                normalized[field] = resolver.default_for(field)
        normalized = resolver.merge_fields(normalized)

        missing = missing_required_fields(normalized, self.policy)
        for field in missing:
            if field not in reporter.broken_fields():
                logger.info("customer.required_field_missing", field=field)
        stage = ValidationStage.DEFAULTS_APPLIED
        logger.debug("customer.stage", stage=stage.value)

        customer = NormalizedCustomer.from_record(normalized)
        if self.apply_hook:
            customer = apply_note_hook(customer, self.policy)
        stage = ValidationStage.NOTE_HOOK_APPLIED
        logger.debug("customer.stage", stage=stage.value)

        errors = reporter.messages()
        if missing:
            errors.append(required_fields_message(self.library_policy.name))
            errors.extend(f'"{field}"' for field in missing)

        stage = ValidationStage.DONE
        logger.debug("customer.stage", stage=stage.value, error_count=len(errors))
        return customer, errors

    @staticmethod
    def _prepare(raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Drop unknown keys and split ``city`` of the form ``Edmonton, AB``."""
        record: Dict[str, Any] = {}
        for key, value in raw.items():
            if key in CUSTOMER_FIELDS:
                record[key] = value
            else:
                logger.warning("customer.unknown_field_dropped", field=key)

        city = record.get("city")
        if isinstance(city, str) and "," in city and is_blank(record.get("province")):
            record["city"] = split_comma_string(city, first=True)
            record["province"] = split_comma_string(city, first=False)
        return record


def validate(
    raw: Any,
    library_policy: PolicyLike,
    partner_policy: PolicyLike = None,
    today: Optional[date] = None,
) -> Tuple[NormalizedCustomer, List[str]]:
    """Validate one payload; see ``CustomerValidator.validate``."""
    return CustomerValidator(library_policy, partner_policy, today=today).validate(raw)
