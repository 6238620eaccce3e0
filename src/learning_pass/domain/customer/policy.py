"""
Policy resolution for customer fields.

Each field resolves in this order:

1. the customer's own value, once it passes its normalizer,
2. the partner's default / map entry,
3. the library's default,
4. empty, which the validator reports when the field is required.

``PolicyResolver`` works on the partner policy layered over the library
policy (see ``FieldPolicy.layered_over``). The module-level ``get_*`` helpers
build a throw-away resolver, so they can be called with plain dictionaries:

    >>> get_branch("EPLCLV", {"branch": {"default": "EPLMNA", "valid": ["EPLMNA", "EPLCLV"]}})
    'EPLCLV'
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from learning_pass.domain.customer.models import NEVER_EXPIRES, is_blank
from learning_pass.infrastructure.cleansing import (
    capitalize,
    normalize_barcode,
    normalize_password,
    prefixed_barcode,
    registry,
)
from learning_pass.infrastructure.settings.policy_schema import (
    FieldPolicy,
    PolicyLike,
    effective_policy,
)
from learning_pass.utils.date_parser import age_in_years, date_from_days, parse_date
from learning_pass.utils.error_reporter import ValidationErrorReporter
from learning_pass.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_STATUS = "OK"
DEFAULT_MAX_AGE = 120

DateOrText = Union[date, str]


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _lookup(mapping: Mapping[str, str], value: str) -> Optional[str]:
    """Exact key first, then a case-insensitive match on the configured keys."""
    if value in mapping:
        return mapping[value]
    folded = value.casefold()
    for key, mapped in mapping.items():
        if key.casefold() == folded:
            return mapped
    return None


class PolicyResolver:
    """Resolve customer fields against an effective policy.

    A resolver belongs to one conversion: rejections are collected on its
    ``reporter``. Fields listed in ``lenient_fields`` are cleaned when
    possible but their rejections are only logged.
    """

    def __init__(
        self,
        partner_policy: PolicyLike = None,
        library_policy: PolicyLike = None,
        *,
        today: Optional[date] = None,
        reporter: Optional[ValidationErrorReporter] = None,
        lenient_fields: Iterable[str] = (),
    ) -> None:
        self.policy: FieldPolicy = effective_policy(partner_policy, library_policy)
        self.today = today or date.today()
        self.reporter = reporter or ValidationErrorReporter()
        self.lenient_fields = frozenset(lenient_fields)
        self._normalizers: Dict[str, Callable[[Any], Any]] = {
            "gender": self.normalize_gender,
            "status": self.normalize_status,
            "type": self.normalize_type,
            "dob": self.normalize_dob,
            "expiry": self.normalize_expiry,
            "branch": self.normalize_branch,
            "barcode": self.normalize_barcode,
            "pin": self.normalize_pin,
            "city": self.normalize_city,
            "province": self.normalize_province,
            "country": self.normalize_country,
        }

    # --- Error notes ------------------------------------------------------------
    def _reject(self, field: str, error_type: str, message: str, value: Any) -> None:
        if field in self.lenient_fields:
            logger.debug("policy.optional_field_rejected", field=field, error_type=error_type)
            return
        self.reporter.collect_error(field, error_type, message, value)

    # --- Generic entry points ---------------------------------------------------
    def resolve_field(self, field: str, raw_value: Any) -> Any:
        """Customer value if it normalizes, else the field's default."""
        value = self.normalize(field, raw_value) if not is_blank(raw_value) else ""
        if is_blank(value):
            value = self.default_for(field)
        return value

    def normalize(self, field: str, raw_value: Any) -> Any:
        """Normalize a supplied value without applying defaults."""
        normalizer = self._normalizers.get(field)
        if normalizer is not None:
            return normalizer(raw_value)
        value = registry.apply_rules(raw_value, registry.get_field_rules(field))
        if is_blank(value) and not is_blank(raw_value):
            self._reject(field, "rejected", f'Invalid {field} "{_text(raw_value)}"', raw_value)
        return value

    def default_for(self, field: str) -> Any:
        if field == "status":
            return _text(self.get_from_default("status")) or DEFAULT_STATUS
        if field == "expiry":
            return self.policy_expiry()
        if field == "branch":
            branch = self.policy.branch
            return _text(branch.default) if branch else ""
        value = self.get_from_default(field)
        return value if isinstance(value, date) else _text(value)

    def get_from_default(self, field: str) -> Any:
        """Partner default, then library default, then ''."""
        value = self.policy.defaults.get(field)
        return "" if value is None else value

    # --- Mapped fields ----------------------------------------------------------
    def _mapped(self, field: str, raw_value: Any, mapping: Mapping[str, str]) -> str:
        value = _text(raw_value)
        if not value or not mapping:
            return value
        mapped = _lookup(mapping, value)
        if mapped is None:
            self._reject(field, "unmapped", f'Unrecognized {field} "{value}"', value)
            return ""
        return mapped

    def normalize_gender(self, raw_value: Any) -> str:
        return self._mapped("gender", raw_value, self.policy.gender_map)

    def normalize_status(self, raw_value: Any) -> str:
        return self._mapped("status", raw_value, self.policy.status_map)

    def normalize_type(self, raw_value: Any) -> str:
        return self._mapped("type", raw_value, self.policy.type_profiles)

    # --- Dates ------------------------------------------------------------------
    def normalize_dob(self, raw_value: Any) -> DateOrText:
        """Birth date inside the configured age window, or ''."""
        if is_blank(raw_value):
            return ""
        born = parse_date(raw_value)
        if born is None:
            self._reject("dob", "rejected", f'Invalid date of birth "{_text(raw_value)}"', raw_value)
            return ""
        age = age_in_years(born, self.today)
        if age is None or age < 0:
            self._reject("dob", "rejected", "Date of birth is in the future", raw_value)
            return ""

        age_policy = self.policy.age
        minimum = age_policy.minimum if age_policy else None
        maximum = age_policy.maximum if age_policy else None
        if minimum is not None and minimum < 0:
            logger.warning("policy.negative_minimum_age", minimum=minimum)
        if maximum is None:
            maximum = DEFAULT_MAX_AGE
        elif maximum < 0:
            logger.warning("policy.negative_maximum_age", maximum=maximum)
            maximum = abs(maximum)

        if minimum is not None and minimum > 0 and age < minimum:
            self._reject("dob", "age", f"Customer must be at least {minimum} years old", raw_value)
            return ""
        if age > maximum:
            self._reject("dob", "age", f"Customer age exceeds {maximum} years", raw_value)
            return ""
        return born

    def normalize_expiry(self, raw_value: Any) -> DateOrText:
        """Customer expiry if today or later; past dates defer to policy."""
        if is_blank(raw_value):
            return ""
        expires = parse_date(raw_value)
        if expires is None:
            self._reject("expiry", "rejected", f'Invalid expiry date "{_text(raw_value)}"', raw_value)
            return ""
        if expires < self.today:
            logger.info("policy.past_expiry_replaced", expiry=expires.isoformat())
            return ""
        return expires

    def policy_expiry(self) -> DateOrText:
        expiry = self.policy.expiry
        if expiry is None:
            return ""
        if expiry.date:
            if expiry.date.strip().upper() == NEVER_EXPIRES:
                return NEVER_EXPIRES
            parsed = parse_date(expiry.date)
            if parsed is None:
                logger.warning("policy.invalid_expiry_date", date=expiry.date)
                return ""
            return parsed
        if expiry.days is not None:
            return date_from_days(expiry.days, self.today)
        return ""

    # --- Branch -----------------------------------------------------------------
    def normalize_branch(self, raw_value: Any) -> str:
        value = _text(raw_value).upper()
        branch = self.policy.branch
        if not value or branch is None:
            return ""
        if value in (code.upper() for code in branch.valid):
            return value
        logger.info("policy.branch_not_valid", branch=value)
        return ""

    # --- Credentials ------------------------------------------------------------
    def normalize_barcode(self, raw_value: Any) -> str:
        barcodes = self.policy.barcodes
        if barcodes is None or not barcodes.is_configured():
            value = normalize_barcode(raw_value)
        else:
            value = prefixed_barcode(
                raw_value,
                prefix=barcodes.prefix,
                minimum=barcodes.minimum,
                maximum=barcodes.maximum,
                regex=barcodes.regex,
            )
        if not value and not is_blank(raw_value):
            self._reject("barcode", "rejected", f'Invalid barcode "{_text(raw_value)}"', raw_value)
        return value

    def normalize_pin(self, raw_value: Any) -> str:
        passwords = self.policy.passwords
        if passwords is None:
            value = normalize_password(raw_value)
        else:
            value = normalize_password(
                raw_value,
                minimum=passwords.minimum,
                maximum=passwords.maximum,
                regex=passwords.regex,
                password_to_pin=passwords.password_to_pin,
            )
        if not value and not is_blank(raw_value):
            self._reject("pin", "rejected", "Password or PIN does not meet the library's rules", raw_value)
        return value

    # --- Address ----------------------------------------------------------------
    def normalize_city(self, raw_value: Any) -> str:
        return capitalize(_text(raw_value))

    def normalize_province(self, raw_value: Any) -> str:
        value = _text(raw_value)
        if len(value) == 2 and value.isalpha():
            return value.upper()
        return capitalize(value)

    def normalize_country(self, raw_value: Any) -> str:
        return capitalize(_text(raw_value))

    # --- Record level -----------------------------------------------------------
    def merge_fields(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply the ``merge`` policy, returning a new record.

        ``{"delimiter": ", ", "fields": {"city": ["city", "province"]}}`` turns
        city ``Edmonton`` and province ``AB`` into city ``Edmonton, AB``.
        """
        result = dict(record)
        merge = self.policy.merge
        if merge is None or not merge.fields:
            return result
        for target, sources in merge.fields.items():
            values = [str(result[source]) for source in sources if not is_blank(result.get(source))]
            result[target] = merge.delimiter.join(values)
        return result

    # --- Public per-field accessors -------------------------------------------
    def get_gender(self, value: Any) -> str:
        return self.resolve_field("gender", value)

    def get_status(self, value: Any) -> str:
        return self.resolve_field("status", value)

    def get_type(self, value: Any) -> str:
        return self.resolve_field("type", value)

    def get_dob(self, value: Any) -> DateOrText:
        return self.normalize_dob(value)

    def get_expiry(self, value: Any) -> DateOrText:
        return self.resolve_field("expiry", value)

    def get_branch(self, value: Any) -> str:
        return self.resolve_field("branch", value)

    def get_barcode(self, value: Any) -> str:
        return self.normalize_barcode(value)

    def get_password(self, value: Any) -> str:
        return self.normalize_pin(value)

    def get_city(self, value: Any) -> str:
        return self.resolve_field("city", value)

    def get_province(self, value: Any) -> str:
        return self.resolve_field("province", value)

    def get_country(self, value: Any) -> str:
        return self.resolve_field("country", value)


def resolve_field(
    field: str,
    raw_value: Any,
    partner_policy: PolicyLike = None,
    library_policy: PolicyLike = None,
    today: Optional[date] = None,
) -> Any:
    return PolicyResolver(partner_policy, library_policy, today=today).resolve_field(field, raw_value)


def get_from_default(field: str, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> Any:
    return PolicyResolver(partner_policy, library_policy).get_from_default(field)


def get_gender(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_gender(value)


def get_status(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_status(value)


def get_type(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_type(value)


def get_dob(
    value: Any,
    partner_policy: PolicyLike = None,
    library_policy: PolicyLike = None,
    today: Optional[date] = None,
) -> DateOrText:
    return PolicyResolver(partner_policy, library_policy, today=today).get_dob(value)


def get_expiry(
    value: Any,
    partner_policy: PolicyLike = None,
    library_policy: PolicyLike = None,
    today: Optional[date] = None,
) -> DateOrText:
    """
    ``get_expiry("", {"expiry": {"date": "NEVER"}})`` -> ``'NEVER'``; a past
    customer date falls back to the same policy value.
    """
    return PolicyResolver(partner_policy, library_policy, today=today).get_expiry(value)


def get_branch(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_branch(value)


def get_barcode(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_barcode(value)


def get_password(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_password(value)


def get_city(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_city(value)


def get_province(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_province(value)


def get_country(value: Any, partner_policy: PolicyLike = None, library_policy: PolicyLike = None) -> str:
    return PolicyResolver(partner_policy, library_policy).get_country(value)


def merge_fields(
    record: Mapping[str, Any],
    partner_policy: PolicyLike = None,
    library_policy: PolicyLike = None,
) -> Dict[str, Any]:
    return PolicyResolver(partner_policy, library_policy).merge_fields(record)
