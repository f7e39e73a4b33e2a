"""Unit tests for payload validation and truck business rules."""

import pytest

from conftest import truck_payload
from truck_sales.models import Truck, Inquiry
from truck_sales.validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_inquiry,
    enforce_rules_truck,
    validate_payload,
)


POLICY = ModelValidationPolicy(
    writable_fields={"title", "year", "mileage", "featured", "description", "vin", "images"},
    required_on_create={"title", "year"},
    list_fields={"images"},
)


def _validate(payload, partial=True):
    return validate_payload(model=Truck, payload=payload, policy=POLICY, partial=partial)


class TestValidatePayload:

    def test_strips_strings_and_parses_int_strings(self):
        patch = _validate({"title": "  F-150  ", "year": "2022"})
        assert patch == {"title": "F-150", "year": 2022}

    @pytest.mark.parametrize("value", [2022.5, "2022.0", "2e3", True, "", [2022]])
    def test_rejects_non_integers(self, value):
        with pytest.raises(ValidationError) as exc:
            _validate({"year": value})
        assert exc.value.field == "year"

    def test_boolean_must_be_bool(self):
        assert _validate({"featured": False}) == {"featured": False}
        with pytest.raises(ValidationError):
            _validate({"featured": "yes"})

    def test_missing_required_on_create(self):
        with pytest.raises(ValidationError) as exc:
            _validate({"title": "F-150"}, partial=False)
        assert exc.value.field == "year"

    def test_partial_skips_required(self):
        assert _validate({"mileage": 10}) == {"mileage": 10}

    def test_rejects_non_writable_field(self):
        with pytest.raises(ValidationError) as exc:
            _validate({"status": "SOLD"})
        assert exc.value.field == "status"

    def test_rejects_null_for_non_nullable(self):
        with pytest.raises(ValidationError):
            _validate({"title": None})

    def test_rejects_blank_required_string(self):
        with pytest.raises(ValidationError):
            _validate({"title": "   "})

    def test_rejects_overlong_string(self):
        with pytest.raises(ValidationError) as exc:
            _validate({"vin": "X" * 33})
        assert "max length" in str(exc.value)

    def test_list_fields_must_be_strings(self):
        assert _validate({"images": [" a.jpg ", "b.jpg"]}) == {"images": ["a.jpg", "b.jpg"]}
        with pytest.raises(ValidationError):
            _validate({"images": "a.jpg"})
        with pytest.raises(ValidationError):
            _validate({"images": ["a.jpg", ""]})

    def test_list_items_respect_item_length(self):
        policy = ModelValidationPolicy(
            writable_fields={"images"},
            list_fields={"images"},
            list_item_lengths={"images": 10},
        )
        patch = validate_payload(model=Truck, payload={"images": ["0123456789"]}, policy=policy, partial=True)
        assert patch == {"images": ["0123456789"]}

        with pytest.raises(ValidationError) as exc:
            validate_payload(model=Truck, payload={"images": ["01234567890"]}, policy=policy, partial=True)
        assert exc.value.field == "images"
        assert "item exceeds max length 10" in str(exc.value)

    def test_rejects_non_object_payload(self):
        with pytest.raises(ValidationError):
            _validate(["title"])

    def test_error_shape(self):
        err = ValidationError("year must be an integer", "year")
        assert err.to_dict() == {
            "error": "Invalid data",
            "details": [{"field": "year", "message": "year must be an integer"}],
        }


class TestTruckRules:

    def test_valid_sale(self):
        enforce_rules_truck(truck_payload())

    @pytest.mark.parametrize("year", [1899, 2100])
    def test_year_range(self, year):
        with pytest.raises(ValidationError) as exc:
            enforce_rules_truck(truck_payload(year=year))
        assert exc.value.field == "year"

    def test_negative_mileage(self):
        with pytest.raises(ValidationError):
            enforce_rules_truck(truck_payload(mileage=-1))

    def test_price_ceiling(self):
        with pytest.raises(ValidationError):
            enforce_rules_truck(truck_payload(price_cents=1_000_000_000))

    def test_merged_listing_rule_uses_current_values(self):
        current = {"listing_type": "LEASE", "price_cents": 0, "monthly_price_cents": 59_900}
        enforce_rules_truck({"mileage": 100}, current)

        with pytest.raises(ValidationError) as exc:
            enforce_rules_truck({"listing_type": "SALE"}, current)
        assert exc.value.field == "price_cents"

    def test_sale_clears_lease_fields_in_patch(self):
        patch = {"listing_type": "SALE", "price_cents": 100}
        current = {"listing_type": "LEASE", "monthly_price_cents": 59_900, "lease_term_months": 36}

        enforce_rules_truck(patch, current)

        assert patch["monthly_price_cents"] is None
        assert patch["lease_term_months"] is None

    def test_lease_term_must_be_positive(self):
        with pytest.raises(ValidationError):
            enforce_rules_truck(
                truck_payload(listing_type="LEASE", monthly_price_cents=100, lease_term_months=0)
            )


class TestInquiryRules:

    def test_email_format(self):
        enforce_rules_inquiry({"email": "a@b.co"})
        with pytest.raises(ValidationError):
            enforce_rules_inquiry({"email": "a@b"})

    def test_validates_against_inquiry_columns(self):
        policy = ModelValidationPolicy(writable_fields={"name"}, required_on_create={"name"})
        with pytest.raises(ValidationError):
            validate_payload(model=Inquiry, payload={"name": "x" * 121}, policy=policy, partial=False)
