"""Tests for the declarative rule executor and the resource rule sets."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from shopcart.core.errors import ConflictError, InvalidReferenceError, ValidationFailure
from shopcart.services.category_service import CategoryService
from shopcart.validation.admin import admin_rules
from shopcart.validation.category import category_rules
from shopcart.validation.checks import IsBool, IsDecimal, IsInt, Length, NotEmpty, RuleViolation
from shopcart.validation.product import product_rules
from shopcart.validation.rules import FieldRule, RuleSet, ValidationContext, run_rules, to_snake, validate


def _messages(exc_info):
    return [message for _, message in exc_info.value.errors]


class TestExecutor:
    rules = (
        FieldRule("name", (NotEmpty("Name is required"), Length("Name too long", max=5)), required=True,
                  required_message="Name is required"),
        FieldRule("count", (IsInt("Count must be an integer", min=0),)),
    )

    def _ctx(self, db_session, payload):
        return ValidationContext(db=db_session, payload=payload)

    def test_cleaned_values_keyed_by_attribute(self, db_session):
        payload = {"name": "  abc ", "count": "4", "unknown": "dropped"}
        cleaned = run_rules(self.rules, payload, self._ctx(db_session, payload))
        assert cleaned == {"name": "abc", "count": 4}

    def test_absent_optional_field_passes(self, db_session):
        payload = {"name": "abc"}
        assert run_rules(self.rules, payload, self._ctx(db_session, payload)) == {"name": "abc"}

    def test_first_failure_per_field_stops_chain(self, db_session):
        payload = {"name": ""}
        with pytest.raises(ValidationFailure) as exc_info:
            run_rules(self.rules, payload, self._ctx(db_session, payload))
        assert _messages(exc_info) == ["Name is required"]

    def test_failures_accumulate_across_fields(self, db_session):
        payload = {"name": "too long", "count": "-1"}
        with pytest.raises(ValidationFailure) as exc_info:
            run_rules(self.rules, payload, self._ctx(db_session, payload))
        assert exc_info.value.errors == [
            ("name", "Name too long"),
            ("count", "Count must be an integer"),
        ]
        assert exc_info.value.message == ["Name too long", "Count must be an integer"]

    def test_missing_required_field(self, db_session):
        with pytest.raises(ValidationFailure) as exc_info:
            run_rules(self.rules, {}, self._ctx(db_session, {}))
        assert _messages(exc_info) == ["Name is required"]

    def test_null_rejected_unless_nullable(self, db_session):
        rules = (
            FieldRule("a", (IsInt("a must be an integer"),)),
            FieldRule("b", (IsInt("b must be an integer"),), nullable=True),
        )
        payload = {"a": None, "b": None}
        with pytest.raises(ValidationFailure) as exc_info:
            run_rules(rules, payload, self._ctx(db_session, payload))
        assert [field for field, _ in exc_info.value.errors] == ["a"]

    def test_non_object_payload(self, db_session):
        with pytest.raises(ValidationFailure):
            validate(category_rules, "create", ["not", "an", "object"], db_session)


class TestOptionalOnUpdate:
    def test_update_rules_are_create_rules_made_optional(self):
        for ruleset in (admin_rules, category_rules, product_rules):
            create_fields = [rule.field for rule in ruleset.create]
            update = ruleset.update
            assert [rule.field for rule in update[: len(create_fields)]] == create_fields
            assert not any(rule.required for rule in update)
            for created, updated in zip(ruleset.create, update):
                assert created.checks == updated.checks

    def test_empty_update_is_valid(self, db_session):
        assert validate(product_rules, "update", {}, db_session, target_id=1) == {}

    def test_present_field_still_fully_checked(self, db_session):
        with pytest.raises(ValidationFailure) as exc_info:
            validate(product_rules, "update", {"price": "-3"}, db_session, target_id=1)
        assert _messages(exc_info) == ["Price cannot be negative"]

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            RuleSet(resource="x", create=()).rules_for("archive")


class TestChecks:
    def test_is_int_rejects_values_beyond_integer_range(self):
        with pytest.raises(RuleViolation):
            IsInt("bad")(str(2**63), None)
        assert IsInt("bad")(str(2**63 - 1), None) == 2**63 - 1

    def test_is_decimal_digits(self):
        check = IsDecimal("bad", places=2, digits=10)
        assert check("99999999.99", None) == Decimal("99999999.99")
        with pytest.raises(RuleViolation):
            check("100000000", None)
        with pytest.raises(RuleViolation):
            check("-100000000.00", None)

    @pytest.mark.parametrize("value,expected", [("true", True), ("0", False), (True, True), ("FALSE", False)])
    def test_is_bool(self, value, expected):
        assert IsBool("bad")(value, None) is expected

    def test_is_bool_rejects_other_strings(self):
        with pytest.raises(RuleViolation):
            IsBool("bad")("yes", None)

    def test_is_decimal_places(self):
        assert IsDecimal("bad", places=2)("9.99", None) == Decimal("9.99")
        with pytest.raises(RuleViolation):
            IsDecimal("bad", places=2)("9.999", None)

    def test_to_snake(self):
        assert to_snake("categoryId") == "category_id"
        assert to_snake("lowStockThreshold") == "low_stock_threshold"
        assert to_snake("name") == "name"


class TestCategoryRules:
    def test_duplicate_name_is_conflict(self, db_session, category):
        with pytest.raises(ConflictError) as exc_info:
            validate(category_rules, "create", {"name": category.name}, db_session)
        assert _messages(exc_info) == ["Category name already exists"]

    def test_self_excluded_on_update(self, db_session, category):
        cleaned = validate(category_rules, "update", {"name": category.name}, db_session, target_id=category.id)
        assert cleaned == {"name": category.name}

    def test_slug_pattern(self, db_session):
        with pytest.raises(ValidationFailure) as exc_info:
            validate(category_rules, "create", {"name": "Veg", "slug": "Not Valid"}, db_session)
        assert _messages(exc_info) == ["Slug can only contain lowercase letters, numbers and hyphens"]

    def test_deleted_rows_still_hold_unique_names(self, db_session, category):
        CategoryService(db_session).delete(category.id)
        with pytest.raises(ConflictError):
            validate(category_rules, "create", {"name": category.name}, db_session)

    def test_list_rules(self, db_session):
        cleaned = validate(category_rules, "list", {"page": "2", "limit": "5", "sortOrder": "desc"}, db_session)
        assert cleaned == {"page": 2, "limit": 5, "sort_order": "DESC"}

    @pytest.mark.parametrize("query,message", [
        ({"page": "0"}, "Page must be a positive integer"),
        ({"limit": "101"}, "Limit must be between 1 and 100"),
        ({"sortBy": "password"}, "Invalid sort field"),
        ({"sortOrder": "sideways"}, "Sort order must be ASC or DESC"),
        ({"includeDeleted": "maybe"}, "includeDeleted must be a boolean"),
    ])
    def test_invalid_list_query(self, db_session, query, message):
        with pytest.raises(ValidationFailure) as exc_info:
            validate(category_rules, "list", query, db_session)
        assert _messages(exc_info) == [message]


class TestProductRules:
    def test_inactive_category_is_reference_error(self, db_session, make_category):
        inactive = make_category("Archived", isActive=False)
        payload = {
            "categoryId": inactive.id,
            "name": "Old Stock",
            "description": "Leftovers from last season",
            "price": "1.00",
        }
        with pytest.raises(InvalidReferenceError) as exc_info:
            validate(product_rules, "create", payload, db_session)
        assert _messages(exc_info) == ["Category not found or inactive"]

    def test_cross_field_checks_use_submitted_siblings(self, db_session, category):
        payload = {
            "categoryId": category.id,
            "name": "Milk",
            "description": "Whole milk, one liter",
            "price": "1.20",
            "minQuantity": "10",
            "maxQuantity": "5",
        }
        with pytest.raises(ValidationFailure) as exc_info:
            validate(product_rules, "create", payload, db_session)
        assert _messages(exc_info) == [
            "Minimum quantity cannot be greater than maximum quantity",
            "Maximum quantity cannot be less than minimum quantity",
        ]

    def test_expiry_in_past(self, db_session, category):
        yesterday = (date.today() - timedelta(days=1)).isoformat()
        with pytest.raises(ValidationFailure) as exc_info:
            validate(product_rules, "update", {"expiryDate": yesterday}, db_session, target_id=1)
        assert _messages(exc_info) == ["Expiry date cannot be in the past"]

    def test_values_converted(self, db_session, category):
        cleaned = validate(
            product_rules,
            "update",
            {"price": "4.25", "expiryDate": "2999-01-31", "isActive": "false", "categoryId": str(category.id)},
            db_session,
            target_id=1,
        )
        assert cleaned == {
            "price": Decimal("4.25"),
            "expiry_date": date(2999, 1, 31),
            "is_active": False,
            "category_id": category.id,
        }

    @pytest.mark.parametrize("field,value,message", [
        ("price", "1.234", "Price must be a valid decimal number"),
        ("quantity", "1.2345", "Quantity must be a valid decimal number"),
        ("unitType", "crate", "Invalid unit type"),
        ("dimensions", "10 by 5", "Dimensions must be in format like '10x5x3' or '10x5'"),
        ("description", "short", "Description must be between 10 and 2000 characters"),
    ])
    def test_field_rules(self, db_session, field, value, message):
        with pytest.raises(ValidationFailure) as exc_info:
            validate(product_rules, "update", {field: value}, db_session, target_id=1)
        assert _messages(exc_info) == [message]


class TestAdminRules:
    def test_email_normalised(self, db_session):
        cleaned = validate(admin_rules, "update", {"email": "  Jane.Doe@Example.COM "}, db_session, target_id=1)
        assert cleaned == {"email": "jane.doe@example.com"}

    def test_email_unique_case_insensitive(self, db_session, admin):
        with pytest.raises(ConflictError) as exc_info:
            validate(admin_rules, "update", {"email": "JANE@example.com"}, db_session, target_id=admin.id + 1)
        assert _messages(exc_info) == ["Email already exists for an admin"]

    @pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "NoDigits!!", "NoSpecial123"])
    def test_weak_passwords(self, db_session, password):
        with pytest.raises(ValidationFailure):
            validate(admin_rules, "update", {"password": password}, db_session, target_id=1)

    def test_password_confirmation(self, db_session):
        payload = {"currentPassword": "Secret@123", "newPassword": "Better@456", "confirmPassword": "Better@457"}
        with pytest.raises(ValidationFailure) as exc_info:
            validate(admin_rules, "password", payload, db_session)
        assert _messages(exc_info) == ["Passwords do not match"]

    def test_profile_picture_must_be_url(self, db_session):
        with pytest.raises(ValidationFailure) as exc_info:
            validate(admin_rules, "update", {"profilePicture": "not a url"}, db_session, target_id=1)
        assert _messages(exc_info) == ["Profile picture must be a valid URL"]
