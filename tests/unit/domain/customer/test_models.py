"""Unit tests for NormalizedCustomer."""

from datetime import date

import pytest
from pydantic import ValidationError

from learning_pass.domain.customer.models import CUSTOMER_FIELDS, NormalizedCustomer, is_blank


@pytest.mark.unit
class TestIsBlank:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_values(self, value):
        assert is_blank(value)

    @pytest.mark.parametrize("value", ["x", 0, date(2021, 1, 1)])
    def test_non_blank_values(self, value):
        assert not is_blank(value)


@pytest.mark.unit
class TestNormalizedCustomer:
    """Record conversion and immutability."""

    def test_record_follows_canonical_field_order(self):
        record = NormalizedCustomer().to_record()

        assert tuple(record) == CUSTOMER_FIELDS
        assert record["dob"] == ""

    def test_aliases_and_field_names_accepted(self):
        by_alias = NormalizedCustomer.model_validate({"firstName": "Lewis", "postalCode": "T6G0G9"})
        by_name = NormalizedCustomer(first_name="Lewis", postal_code="T6G0G9")

        assert by_alias == by_name
        assert by_alias.get("firstName") == "Lewis"

    def test_is_frozen(self):
        customer = NormalizedCustomer(first_name="Lewis")

        with pytest.raises(ValidationError):
            customer.first_name = "Max"

    def test_model_copy_returns_new_record(self):
        customer = NormalizedCustomer(first_name="Lewis")
        updated = customer.model_copy(update={"notes": "Hi"})

        assert customer.notes == ""
        assert updated.notes == "Hi"

    def test_extra_tags_follow_fields(self):
        customer = NormalizedCustomer(notes="Hi", extra_tags={"USER_CATEGORY1": "GMUDSTU"})
        record = customer.to_record()

        assert list(record)[-1] == "USER_CATEGORY1"
        assert record["USER_CATEGORY1"] == "GMUDSTU"

    def test_is_empty(self):
        assert NormalizedCustomer().is_empty()
        assert not NormalizedCustomer(email="a@b.ca").is_empty()


@pytest.mark.unit
class TestFromRecord:
    """Building a customer from a working record."""

    def test_keeps_fields_and_symphony_tags(self):
        customer = NormalizedCustomer.from_record(
            {
                "firstName": "Lewis",
                "dob": date(1974, 8, 22),
                "expiry": "NEVER",
                "USER_CATEGORY1": "GMUDSTU",
                "favouriteColour": "red",
            }
        )

        assert customer.first_name == "Lewis"
        assert customer.dob == date(1974, 8, 22)
        assert customer.expiry == "NEVER"
        assert customer.extra_tags == {"USER_CATEGORY1": "GMUDSTU"}
        assert "favouriteColour" not in customer.to_record()

    def test_non_date_dob_dropped(self):
        assert NormalizedCustomer.from_record({"dob": "not a date"}).dob is None

    def test_blank_tags_dropped(self):
        assert NormalizedCustomer.from_record({"USER_CATEGORY1": ""}).extra_tags == {}

    def test_none_values_become_empty(self):
        customer = NormalizedCustomer.from_record({"email": None, "expiry": None})

        assert customer.email == ""
        assert customer.expiry == ""

    def test_none_record(self):
        assert NormalizedCustomer.from_record(None).is_empty()
