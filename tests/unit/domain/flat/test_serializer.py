"""
Unit tests for the Symphony flat serializer.

The expected documents are the exact byte layout Symphony's loadflatuser
accepts: inline tags, then library/partner defaults, then the address and
extended-info blocks.
"""

from datetime import date

import pytest

from learning_pass.domain.customer.models import EMPTY_CUSTOMER_ERROR, NormalizedCustomer
from learning_pass.domain.flat.serializer import FlatRecord, FlatSerializer, flat_line, to_flat
from learning_pass.domain.flat.tags import Block

CUSTOMER = {
    "firstName": "Lewis",
    "middleName": "Fastest",
    "lastName": "Hamilton",
    "dob": "1974-08-22",
    "gender": "",
    "email": "example@gmail.com",
    "phone": "780-555-1212",
    "street": "11535 74 Ave.",
    "city": "Edmonton",
    "province": "AB",
    "country": "",
    "postalCode": "T6G0G9",
    "barcode": "1101223334444",
    "pin": "IlikeBread",
    "type": "MAC-DSSTUD",
    "expiry": "2021-08-22",
    "careOf": "Doe, John",
    "branch": "",
    "status": "OK",
    "notes": "Hi",
}

HEADER_AND_INLINE = (
    "*** DOCUMENT BOUNDARY ***\n"
    "FORM=LDUSER\n"
    ".USER_FIRST_NAME.   |aLewis\n"
    ".USER_MIDDLE_NAME.   |aFastest\n"
    ".USER_LAST_NAME.   |aHamilton\n"
    ".USER_BIRTH_DATE.   |a19740822\n"
    ".USER_ID.   |a1101223334444\n"
    ".USER_PIN.   |aIlikeBread\n"
    ".USER_PROFILE.   |aMAC-DSSTUD\n"
    ".USER_PRIV_EXPIRES.   |a20210822\n"
    ".USER_STATUS.   |aOK\n"
    ".USER_NAME_DSP_PREF.   |a0\n"
    ".USER_PREF_LANG.   |aENGLISH\n"
    ".USER_ROUTING_FLAG.   |aY\n"
    ".USER_CHG_HIST_RULE.   |aALLCHARGES\n"
    ".USER_ACCESS.   |aPUBLIC\n"
    ".USER_ENVIRONMENT.   |aPUBLIC\n"
    ".USER_MAILINGADDR.   |a1\n"
)

ADDRESS_BLOCK = (
    ".USER_ADDR1_BEGIN.\n"
    ".EMAIL.   |aexample@gmail.com\n"
    ".PHONE.   |a780-555-1212\n"
    ".STREET.   |a11535 74 Ave.\n"
    ".CITY/STATE.   |aEdmonton\n"
    ".POSTALCODE.   |aT6G0G9\n"
    ".CARE/OF.   |aDoe, John\n"
    ".USER_ADDR1_END.\n"
)

EXPECTED_FLAT = (
    HEADER_AND_INLINE
    + ADDRESS_BLOCK
    + ".USER_XINFO_BEGIN.\n"
    ".NOTE.   |aHi\n"
    ".NOTIFY_VIA.   |aPHONE\n"
    ".RETRNMAIL.   |aYES\n"
    ".USER_XINFO_END.\n"
)

EXPECTED_ECONSENT_FLAT = (
    HEADER_AND_INLINE
    + ".USER_CATEGORY5.   |aECONSENT\n"
    + ADDRESS_BLOCK
    + ".USER_XINFO_BEGIN.\n"
    ".NOTE.   |aHi\n"
    ".NOTIFY_VIA.   |aPHONE\n"
    ".RETRNMAIL.   |aNO\n"
    ".USER_XINFO_END.\n"
)

PARTNER_DEFAULTS = {"NOTIFY_VIA": "PHONE", "RETRNMAIL": "YES"}


@pytest.mark.unit
class TestWellFormedFlat:
    """Full documents."""

    def test_raw_customer(self):
        record = to_flat(CUSTOMER, PARTNER_DEFAULTS)

        assert record.errors == []
        assert record.stringify() == EXPECTED_FLAT

    def test_normalized_customer(self):
        customer = NormalizedCustomer.model_validate(
            {**CUSTOMER, "dob": date(1974, 8, 22), "expiry": date(2021, 8, 22)}
        )

        assert to_flat(customer, PARTNER_DEFAULTS).stringify() == EXPECTED_FLAT

    def test_partner_defaults_replace_and_append(self):
        partner = {"USER_CATEGORY5": "ECONSENT", "NOTIFY_VIA": "PHONE", "RETRNMAIL": "NO"}

        assert to_flat(CUSTOMER, partner).stringify() == EXPECTED_ECONSENT_FLAT

    def test_library_defaults_alone(self):
        assert to_flat(CUSTOMER).stringify() == EXPECTED_FLAT


@pytest.mark.unit
class TestEdgeCases:
    """Empty input, unknown tags and value rendering."""

    @pytest.mark.parametrize("customer", [None, {}, {"firstName": "  "}, NormalizedCustomer()])
    def test_empty_customer(self, customer):
        record = to_flat(customer)

        assert record.errors == [EMPTY_CUSTOMER_ERROR]
        assert record.stringify() == ""
        assert not record.ok

    def test_unknown_default_tag_dropped(self):
        text = to_flat(CUSTOMER, {"FOO": "bar"}).stringify()

        assert "FOO" not in text
        assert text == EXPECTED_FLAT

    def test_unknown_customer_key_dropped(self):
        text = to_flat({**CUSTOMER, "favouriteColour": "red"}, PARTNER_DEFAULTS).stringify()

        assert text == EXPECTED_FLAT

    def test_never_expiry_kept_verbatim(self):
        text = to_flat({**CUSTOMER, "expiry": "NEVER"}).stringify()

        assert ".USER_PRIV_EXPIRES.   |aNEVER\n" in text

    def test_unparseable_date_omitted(self):
        text = to_flat({**CUSTOMER, "dob": "22/08/1974"}).stringify()

        assert "USER_BIRTH_DATE" not in text

    def test_extra_tags_emitted_inline(self):
        customer = NormalizedCustomer(first_name="Lewis", extra_tags={"USER_CATEGORY1": "GMUDSTU"})

        lines = to_flat(customer).lines

        assert lines[2:4] == [".USER_FIRST_NAME.   |aLewis", ".USER_CATEGORY1.   |aGMUDSTU"]

    def test_customer_tag_wins_over_default(self):
        customer = NormalizedCustomer(first_name="Lewis", extra_tags={"USER_CATEGORY5": "CUSTOM"})

        text = to_flat(customer, {"USER_CATEGORY5": "ECONSENT"}).stringify()

        assert ".USER_CATEGORY5.   |aCUSTOM\n" in text
        assert "ECONSENT" not in text

    def test_empty_blocks_not_written(self):
        text = to_flat({"firstName": "Lewis"}, library_defaults=()).stringify()

        assert text == "*** DOCUMENT BOUNDARY ***\nFORM=LDUSER\n.USER_FIRST_NAME.   |aLewis\n"


@pytest.mark.unit
class TestFlatSerializer:
    """Serializer instances."""

    def test_buffers_are_per_call(self):
        serializer = FlatSerializer()

        first = serializer.to_flat(CUSTOMER, PARTNER_DEFAULTS).stringify()
        second = serializer.to_flat(CUSTOMER, PARTNER_DEFAULTS).stringify()

        assert first == second == EXPECTED_FLAT

    def test_library_defaults_from_mapping(self):
        serializer = FlatSerializer({"USER_PREF_LANG": "FRENCH"})

        text = serializer.to_flat({"firstName": "Lewis"}).stringify()

        assert text.endswith(".USER_FIRST_NAME.   |aLewis\n.USER_PREF_LANG.   |aFRENCH\n")

    def test_custom_block_routing(self):
        serializer = FlatSerializer((), tag_blocks={"EMAIL": Block.ADDR2})

        lines = serializer.to_flat({"email": "a@b.ca"}).lines

        assert lines[2:] == [".USER_ADDR2_BEGIN.", ".EMAIL.   |aa@b.ca", ".USER_ADDR2_END."]

    def test_flat_line(self):
        assert flat_line("USER_ID", "21221012345678") == ".USER_ID.   |a21221012345678"

    def test_record_ok(self):
        assert FlatRecord(lines=["x"]).ok
        assert not FlatRecord(lines=["x"], errors=["e"]).ok
