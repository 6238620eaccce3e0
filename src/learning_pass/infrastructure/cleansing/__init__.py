"""
Learning Pass field normalizers.

Every normalizer is a pure function registered by name. Malformed input never
raises: a rejected value comes back as an empty string.

Usage:
    # 1. Call a normalizer directly
    from learning_pass.infrastructure.cleansing import normalize_postal_code

    normalize_postal_code(" n2V-2V4 ")  # 'N2V2V4'

    # 2. Run the chain configured for a customer field
    from learning_pass.infrastructure.cleansing import registry

    registry.apply_rules(raw, registry.get_field_rules("email"))

    # 3. Register a custom normalizer
    from learning_pass.infrastructure.cleansing import rule, RuleCategory

    @rule(
        name="upper_case",
        category=RuleCategory.STRING,
        description="Upper-case the value",
    )
    def upper_case(value):
        return str(value).upper()
"""

from typing import Any, Dict, List

from learning_pass.infrastructure.cleansing.registry import (
    CleansingRegistry,
    CleansingRule,
    RuleCategory,
    get_cleansing_registry,
    registry,
    rule,
)
from learning_pass.infrastructure.cleansing.rules.contact_rules import (
    normalize_email,
    normalize_phone,
    normalize_postal_code,
)
from learning_pass.infrastructure.cleansing.rules.credential_rules import (
    four_digit_pin,
    hash_code,
    normalize_barcode,
    normalize_password,
    numeric_barcode,
    prefixed_barcode,
)
from learning_pass.infrastructure.cleansing.rules.date_rules import (
    ansi_date,
    parse_date_value,
)
from learning_pass.infrastructure.cleansing.rules.string_rules import (
    capitalize,
    first_name,
    last_name,
    middle_name,
    normalize_street,
    split_comma_string,
    trim_whitespace,
)

__all__: list[str] = [
    "registry",
    "rule",
    "RuleCategory",
    "CleansingRule",
    "CleansingRegistry",
    "get_cleansing_registry",
    "list_available_rules",
    "normalize_email",
    "normalize_phone",
    "normalize_postal_code",
    "hash_code",
    "four_digit_pin",
    "normalize_password",
    "normalize_barcode",
    "numeric_barcode",
    "prefixed_barcode",
    "parse_date_value",
    "ansi_date",
    "trim_whitespace",
    "capitalize",
    "normalize_street",
    "first_name",
    "last_name",
    "middle_name",
    "split_comma_string",
]


def list_available_rules() -> List[Dict[str, Any]]:
    """List every registered normalizer."""
    return [
        {
            "name": rule_obj.name,
            "category": rule_obj.category.value,
            "description": rule_obj.description,
        }
        for rule_obj in registry.list_all_rules()
    ]
