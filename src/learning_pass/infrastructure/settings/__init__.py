"""
Policy configuration.

Components:
- policy_schema: pydantic models for library and partner policy files
- loader: YAML policy file loaders
"""

from learning_pass.infrastructure.settings.loader import (
    PolicyConfigError,
    load_library_policy,
    load_partner_policies,
    load_policy_file,
)
from learning_pass.infrastructure.settings.policy_schema import (
    AgePolicy,
    BarcodePolicy,
    BranchPolicy,
    ExpiryPolicy,
    FieldPolicy,
    MergePolicy,
    NotesPolicy,
    PasswordPolicy,
    coerce_policy,
    effective_policy,
)

__all__: list[str] = [
    # Schema models
    "AgePolicy",
    "BarcodePolicy",
    "BranchPolicy",
    "ExpiryPolicy",
    "FieldPolicy",
    "MergePolicy",
    "NotesPolicy",
    "PasswordPolicy",
    "coerce_policy",
    "effective_policy",
    # Loader functions
    "PolicyConfigError",
    "load_library_policy",
    "load_partner_policies",
    "load_policy_file",
]
