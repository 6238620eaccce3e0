from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from learning_pass.domain.flat.tags import is_symphony_tag
from learning_pass.utils.logging import get_logger

logger = get_logger(__name__)

EMPTY_CUSTOMER_ERROR = "Customer json data empty or missing."
NEVER_EXPIRES = "NEVER"

# Canonical customer fields, in record (and flat output) order.
CUSTOMER_FIELDS = (
    "firstName",
    "middleName",
    "lastName",
    "preferredName",
    "dob",
    "gender",
    "email",
    "phone",
    "street",
    "city",
    "province",
    "country",
    "postalCode",
    "careOf",
    "barcode",
    "pin",
    "type",
    "expiry",
    "branch",
    "status",
    "notes",
)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


class NormalizedCustomer(BaseModel):
    """Validated customer record.

    Instances are immutable; every transformation returns a new record via
    ``model_copy(update=...)`` or ``from_record``. ``extra_tags`` holds Symphony
    tags (USER_CATEGORY1 ...) written by a note hook.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    first_name: str = Field("", alias="firstName")
    middle_name: str = Field("", alias="middleName")
    last_name: str = Field("", alias="lastName")
    preferred_name: str = Field("", alias="preferredName")
    dob: Optional[date] = Field(None, description="Date of birth")
    gender: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    province: str = ""
    country: str = ""
    postal_code: str = Field("", alias="postalCode")
    care_of: str = Field("", alias="careOf")
    barcode: str = ""
    pin: str = ""
    type: str = Field("", description="Customer type / Symphony profile")
    expiry: Union[date, str] = Field("", description="Expiry date, 'NEVER' or ''")
    branch: str = ""
    status: str = ""
    notes: str = ""
    extra_tags: Dict[str, str] = Field(default_factory=dict, alias="extraTags")

    def to_record(self) -> Dict[str, Any]:
        """Ordered ``{canonical field or tag: value}`` mapping, blanks included."""
        record = self.model_dump(by_alias=True, exclude={"extra_tags"})
        record["dob"] = self.dob if self.dob is not None else ""
        record.update(self.extra_tags)
        return record

    def is_empty(self) -> bool:
        return all(is_blank(value) for value in self.to_record().values())

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> "NormalizedCustomer":
        """Build a record from canonical fields plus Symphony tags; other keys are dropped."""
        fields: Dict[str, Any] = {}
        tags: Dict[str, str] = {}
        for key, value in (record or {}).items():
            if key in CUSTOMER_FIELDS:
                fields[key] = _field_value(key, value)
            elif is_symphony_tag(key):
                if not is_blank(value):
                    tags[key] = str(value)
            else:
                logger.warning("customer.unknown_field_dropped", field=key)
        return cls.model_validate({**fields, "extraTags": tags})


def _field_value(key: str, value: Any) -> Any:
    if key == "dob":
        return value if isinstance(value, date) else None
    if key == "expiry":
        return value if isinstance(value, date) else ("" if value is None else str(value))
    return "" if value is None else str(value)
