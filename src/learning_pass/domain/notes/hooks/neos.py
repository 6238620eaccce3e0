"""NEOS consortium hook: derives USER_CATEGORY1 from the customer type."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, Mapping

if TYPE_CHECKING:
    from learning_pass.infrastructure.settings.policy_schema import FieldPolicy

NEOS_USER_CATEGORY1: Mapping[str, str] = MappingProxyType(
    {
        # University of Alberta
        "UA-ACADM": "UASTAFF",
        "UA-EXTRNL": "UASTAFF",
        "UA-GRAD": "UANEW",
        "UA-STAFF": "UASTAFF",
        "UA-UGRD": "UANEW",
        "UA-UGSPEC": "UANEW",
        # Concordia
        "CUA-ACADM": "CONCACADM",
        "CUA-GRAD": "CONCGRAD",
        "CUA-STAFF": "CONCSTAFF",
        "CUA-UGRD": "CONCUGRAD",
        # King's
        "KING-ACADM": "KINGSACADM",
        "KING-STAFF": "KINGSSTAFF",
        "KING-STDNT": "KINGSSTDNT",
        # MacEwan
        "MAC-DSSTAF": "GMUDSTAFF",
        "MAC-DSSTUD": "GMUDSTU",
        "MAC-RETIRE": "GMUSTAFF",
        "MAC-STAFF": "GMUSTAFF",
        "MAC-STDNT": "GMUSTUDENT",
        # NorQuest
        "NQ-STAFF": "NQSTAFF",
        "NQ-STAFFOC": "NQSTAFFOC",
        "NQ-STDNT": "NQSTDNT",
        "NQ-STUDOC": "NQSTUDOC",
    }
)


class NeosNoteHook:
    """Sets USER_CATEGORY1, or an error note for an unknown type."""

    name = "neos"

    def apply(self, customer: Dict[str, Any], partner_policy: FieldPolicy) -> None:
        customer_type = customer.get("type", "")
        category = NEOS_USER_CATEGORY1.get(customer_type)
        if category:
            customer["USER_CATEGORY1"] = category
        else:
            customer["notes"] = f'Error undefined NEOS user cat1:"{customer_type}"'
