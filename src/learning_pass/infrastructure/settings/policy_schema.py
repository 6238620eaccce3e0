"""Pydantic schema for library and partner customer policy.

Library-wide policy (config/library.yml) and every partner policy
(config/partners/*.yml) share the FieldPolicy shape. Only the keys declared
here are honored; anything else in a policy mapping is logged and ignored.
"""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = structlog.get_logger(__name__)


class _PolicySection(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    def is_configured(self) -> bool:
        """True when the section sets at least one option."""
        return bool(self.model_fields_set)


class BarcodePolicy(_PolicySection):
    """Barcode window and optional library prefix."""

    prefix: str = Field(default="", description="Prefix prepended to the card number")
    # Left untyped: invalid bounds fall back to defaults with a warning at use time.
    minimum: Any = Field(default=None, description="Minimum barcode length")
    maximum: Any = Field(default=None, description="Maximum barcode length")
    regex: Optional[str] = Field(default=None, description="Extra pattern the barcode must match")


class PasswordPolicy(_PolicySection):
    minimum: Optional[int] = Field(default=None, description="Minimum password length")
    maximum: Optional[int] = Field(default=None, description="Maximum password length")
    regex: Optional[str] = Field(default=None, description="Replacement acceptance pattern")
    password_to_pin: bool = Field(
        default=False,
        alias="passwordToPin",
        description="Convert an accepted password into a four digit PIN",
    )


class AgePolicy(_PolicySection):
    minimum: Optional[int] = Field(default=None, description="Minimum age in years")
    maximum: Optional[int] = Field(default=None, description="Maximum age in years")


class ExpiryPolicy(_PolicySection):
    date: Optional[str] = Field(default=None, description="Fixed expiry date or NEVER")
    days: Optional[int] = Field(default=None, description="Days from today until expiry")

    @field_validator("date", mode="before")
    @classmethod
    def _date_as_text(cls, value: Any) -> Any:
        # Unquoted YAML dates arrive as datetime.date.
        if isinstance(value, datetime.date):
            return value.isoformat()
        return value


class BranchPolicy(_PolicySection):
    default: Optional[str] = Field(default=None, description="Fallback branch code")
    valid: List[str] = Field(default_factory=list, description="Accepted branch codes")


class MergePolicy(_PolicySection):
    delimiter: str = Field(default="", description="Separator placed between merged values")
    fields: Dict[str, List[str]] = Field(
        default_factory=dict, description="target field -> ordered source fields"
    )


class NotesPolicy(_PolicySection):
    hook: Optional[str] = Field(
        default=None,
        description="Registered note hook name or 'package.module:attribute' reference",
    )


class FieldPolicy(BaseModel):
    """Per-field customer policy for a library or a partner."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: Optional[str] = Field(default=None, description="Library or partner name")
    defaults: Dict[str, Any] = Field(default_factory=dict, description="Fallback field values")
    gender_map: Dict[str, str] = Field(default_factory=dict, alias="genderMap")
    status_map: Dict[str, str] = Field(default_factory=dict, alias="statusMap")
    type_profiles: Dict[str, str] = Field(default_factory=dict, alias="typeProfiles")
    barcodes: Optional[BarcodePolicy] = None
    passwords: Optional[PasswordPolicy] = None
    age: Optional[AgePolicy] = None
    expiry: Optional[ExpiryPolicy] = None
    branch: Optional[BranchPolicy] = None
    required: List[str] = Field(default_factory=list, description="Mandatory customer fields")
    optional: List[str] = Field(default_factory=list, description="Accepted optional fields")
    merge: Optional[MergePolicy] = None
    notes: Optional[NotesPolicy] = None
    flat_defaults: Dict[str, Any] = Field(
        default_factory=dict,
        alias="flatDefaults",
        description="Symphony tag -> default value",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_unrecognized_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        known = set()
        for field_name, field_info in cls.model_fields.items():
            known.add(field_name)
            if field_info.alias:
                known.add(field_info.alias)
        unknown = [key for key in data if key not in known]
        if unknown:
            logger.warning(
                "policy.unrecognized_keys",
                policy=data.get("name"),
                keys=sorted(str(key) for key in unknown),
            )
        return {key: value for key, value in data.items() if key in known}

    def layered_over(self, library: "FieldPolicy") -> "FieldPolicy":
        """Return the effective policy of this partner on top of ``library``.

        Sections and maps are taken whole from the partner when it configures
        them, otherwise from the library. ``defaults`` merge key by key,
        ``required``/``optional`` are unioned. The library keeps its name and
        flat defaults; partner flat defaults are applied by the serializer.
        """
        def pick(partner_value: Any, library_value: Any) -> Any:
            if isinstance(partner_value, _PolicySection):
                return partner_value if partner_value.is_configured() else library_value
            return partner_value or library_value

        return FieldPolicy(
            name=library.name or self.name,
            defaults={**library.defaults, **self.defaults},
            gender_map=pick(self.gender_map, library.gender_map),
            status_map=pick(self.status_map, library.status_map),
            type_profiles=pick(self.type_profiles, library.type_profiles),
            barcodes=pick(self.barcodes, library.barcodes),
            passwords=pick(self.passwords, library.passwords),
            age=pick(self.age, library.age),
            expiry=pick(self.expiry, library.expiry),
            branch=pick(self.branch, library.branch),
            required=_union(library.required, self.required),
            optional=_union(library.optional, self.optional),
            merge=pick(self.merge, library.merge),
            notes=pick(self.notes, library.notes),
            flat_defaults=dict(library.flat_defaults),
        )


PolicyLike = Union[FieldPolicy, Mapping[str, Any], None]


def _union(first: List[str], second: List[str]) -> List[str]:
    merged: List[str] = []
    for item in [*first, *second]:
        if item not in merged:
            merged.append(item)
    return merged


def coerce_policy(policy: PolicyLike) -> FieldPolicy:
    """Accept a FieldPolicy, a plain mapping or None."""
    if policy is None:
        return FieldPolicy()
    if isinstance(policy, FieldPolicy):
        return policy
    return FieldPolicy.model_validate(dict(policy))


def effective_policy(partner: PolicyLike, library: PolicyLike = None) -> FieldPolicy:
    """Layer ``partner`` over ``library``; either may be omitted."""
    return coerce_policy(partner).layered_over(coerce_policy(library))
