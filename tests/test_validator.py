"""Tests for the Validator descriptor and the base validators."""

from datetime import date as Date
from datetime import datetime
from decimal import Decimal

import pytest

from dataknobs_refine import (
    CheckContext,
    RefinementError,
    TypeFailure,
    ValidationResult,
    Validator,
    array,
    date,
    define,
    integer,
    mapping,
    number,
    set_,
    size,
    string,
)
from dataknobs_common.exceptions import ValidationError


class TestBaseValidators:
    """Test the primitive type checks."""

    @pytest.mark.parametrize(
        "validator,accepted,rejected",
        [
            (string(), ["", "abc"], [None, 1, b"abc"]),
            (number(), [0, 1.5, Decimal("2.5"), -3], [True, "1", float("nan"), Decimal("NaN"), None]),
            (integer(), [0, -7, 10**20], [1.0, False, "1"]),
            (date(), [Date(2024, 1, 1), datetime(2024, 1, 1, 12)], ["2024-01-01", 0]),
            (array(), [[], (1, 2)], ["ab", {1}, {}]),
            (mapping(), [{}, {"a": 1}], [[], set()]),
            (set_(), [set(), frozenset({1})], [[], {}]),
        ],
    )
    def test_accepts_and_rejects(self, validator, accepted, rejected):
        """Test each base validator against matching and mismatching values."""
        for value in accepted:
            assert validator.is_valid(value), value
        for value in rejected:
            assert not validator.is_valid(value), value

    def test_type_failure_fields(self, context):
        """Test the contents of a type failure."""
        failures = list(string().failures(5, context))

        assert len(failures) == 1
        failure = failures[0]
        assert isinstance(failure, TypeFailure)
        assert failure.failure_class == "type"
        assert failure.expected == "string"
        assert failure.actually == 5
        assert failure.value == 5
        assert failure.type == "string"
        assert failure.path == ("user", "name")
        assert failure.key == "name"
        assert failure.refinement is None
        assert failure.message == "Expected a value of type `string`, but received: `5`"

    def test_define_custom_type(self):
        """Test a validator defined from a predicate."""
        email = define("email", lambda value: isinstance(value, str) and "@" in value)

        assert email.type == "email"
        assert email.is_valid("a@b.c")
        assert email.validate("abc").first.expected == "email"

    def test_define_requires_name(self):
        """Test that a type name is required."""
        with pytest.raises(ValueError):
            define("", lambda value: True)


class TestValidator:
    """Test Validator operations."""

    def test_validate_success(self):
        """Test a successful validation result."""
        result = string().validate("abc")

        assert isinstance(result, ValidationResult)
        assert result.valid is True
        assert bool(result) is True
        assert result.value == "abc"
        assert result.failures == []
        assert result.first is None

    def test_validate_failure(self):
        """Test a failed validation result."""
        result = size(string(), 3).validate("ab")

        assert result.valid is False
        assert len(result.failures) == 1
        assert result.errors == [result.failures[0].message]

    def test_derive_copies_and_overrides(self):
        """Test that derive leaves the original untouched."""
        base = string()

        def reject_all(value, context):
            yield TypeFailure(message="never")

        derived = base.derive(check=reject_all)

        assert derived.type == "string"
        assert base.is_valid("x")
        assert not derived.is_valid("x")

    def test_validator_is_immutable(self):
        """Test that fields cannot be reassigned."""
        validator = string()

        with pytest.raises(AttributeError):
            validator.type = "other"

    def test_failures_creates_context(self):
        """Test that a fresh context is used when none is given."""
        seen = []

        def check(value, context):
            seen.append(context)
            return []

        validator = Validator(type="any", check=check)
        validator.validate(1)
        validator.validate(2)

        assert all(isinstance(c, CheckContext) for c in seen)
        assert seen[0] is not seen[1]

    def test_assert_valid_returns_value(self):
        """Test that accepted values are returned."""
        assert integer().assert_valid(3) == 3

    def test_assert_valid_raises(self):
        """Test the exception for a rejected value."""
        validator = size(string(), 3)

        with pytest.raises(RefinementError) as exc_info:
            validator.assert_valid("ab")

        error = exc_info.value
        assert isinstance(error, ValidationError)
        assert error.failure.refinement == "size"
        assert error.failures == [error.failure]
        assert error.context["class"] == "size"
        assert error.context["refinement"] == "size"
        assert error.context["type"] == "string"
        assert str(error) == error.failure.message
