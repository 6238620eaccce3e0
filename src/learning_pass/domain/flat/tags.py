"""Symphony ILS tag vocabulary, block layout and library flat defaults.

All tables are read-only for the life of the process.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

DOCUMENT_BOUNDARY = "*** DOCUMENT BOUNDARY ***"
FORM_TYPE = "FORM=LDUSER"


class Block(Enum):
    """Delimited tag groups, in output order."""

    ADDR1 = "USER_ADDR1"
    ADDR2 = "USER_ADDR2"
    ADDR3 = "USER_ADDR3"
    XINFO = "USER_XINFO"

    @property
    def begin_line(self) -> str:
        return f".{self.value}_BEGIN."

    @property
    def end_line(self) -> str:
        return f".{self.value}_END."


BLOCK_ORDER: Tuple[Block, ...] = (Block.ADDR1, Block.ADDR2, Block.ADDR3, Block.XINFO)

SYMPHONY_TAGS = frozenset(
    {
        "USER_ID",
        "USER_GROUP_ID",
        "USER_NAME",
        "USER_FIRST_NAME",
        "USER_MIDDLE_NAME",
        "USER_LAST_NAME",
        "USER_PREFERRED_NAME",
        "USER_NAME_DSP_PREF",
        "USER_LIBRARY",
        "USER_PROFILE",
        "USER_PREF_LANG",
        "USER_PIN",
        "USER_STATUS",
        "USER_ROUTING_FLAG",
        "USER_CHG_HIST_RULE",
        "USER_LAST_ACTIVITY",
        "USER_PRIV_GRANTED",
        "USER_PRIV_EXPIRES",
        "USER_BIRTH_DATE",
        "USER_CATEGORY1",
        "USER_CATEGORY2",
        "USER_CATEGORY3",
        "USER_CATEGORY4",
        "USER_CATEGORY5",
        "USER_ACCESS",
        "USER_ENVIRONMENT",
        "USER_MAILINGADDR",
        "STREET",
        "CITY/STATE",
        "CITYPROV",
        "CITY/PROV",
        "POSTALCODE",
        "PHONE",
        "PHONE1",
        "HOMEPHONE",
        "EMAIL",
        "CARE/OF",
        "NOTIFY_VIA",
        "NOTE",
        "RETRNMAIL",
    }
)

# Customer field -> tag. province and country have no Symphony tag.
FIELD_TAGS: Mapping[str, str] = MappingProxyType(
    {
        "firstName": "USER_FIRST_NAME",
        "middleName": "USER_MIDDLE_NAME",
        "lastName": "USER_LAST_NAME",
        "preferredName": "USER_PREFERRED_NAME",
        "dob": "USER_BIRTH_DATE",
        "gender": "USER_CATEGORY2",
        "email": "EMAIL",
        "phone": "PHONE",
        "street": "STREET",
        "city": "CITY/STATE",
        "postalCode": "POSTALCODE",
        "careOf": "CARE/OF",
        "barcode": "USER_ID",
        "pin": "USER_PIN",
        "type": "USER_PROFILE",
        "expiry": "USER_PRIV_EXPIRES",
        "branch": "USER_LIBRARY",
        "status": "USER_STATUS",
        "notes": "NOTE",
    }
)

DATE_TAGS = frozenset({"USER_BIRTH_DATE", "USER_PRIV_EXPIRES", "USER_PRIV_GRANTED", "USER_LAST_ACTIVITY"})

TAG_BLOCKS: Mapping[str, Block] = MappingProxyType(
    {
        "EMAIL": Block.ADDR1,
        "PHONE": Block.ADDR1,
        "PHONE1": Block.ADDR1,
        "HOMEPHONE": Block.ADDR1,
        "STREET": Block.ADDR1,
        "CITY/STATE": Block.ADDR1,
        "CITYPROV": Block.ADDR1,
        "CITY/PROV": Block.ADDR1,
        "POSTALCODE": Block.ADDR1,
        "CARE/OF": Block.ADDR1,
        "NOTE": Block.XINFO,
        "NOTIFY_VIA": Block.XINFO,
        "RETRNMAIL": Block.XINFO,
    }
)

LIBRARY_FLAT_DEFAULTS: Tuple[Tuple[str, object], ...] = (
    ("USER_NAME_DSP_PREF", 0),
    ("USER_PREF_LANG", "ENGLISH"),
    ("USER_ROUTING_FLAG", "Y"),
    ("USER_CHG_HIST_RULE", "ALLCHARGES"),
    ("USER_ACCESS", "PUBLIC"),
    ("USER_ENVIRONMENT", "PUBLIC"),
    ("USER_MAILINGADDR", 1),
    ("NOTIFY_VIA", "PHONE"),
    ("RETRNMAIL", "YES"),
)


def is_symphony_tag(name: str) -> bool:
    return name in SYMPHONY_TAGS
