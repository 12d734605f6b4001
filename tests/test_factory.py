"""Tests for building validators from configuration."""

import logging
from datetime import date as Date
from datetime import datetime

import pytest

from dataknobs_common.exceptions import ConfigurationError, NotFoundError, OperationError
from dataknobs_config import FactoryBase

from dataknobs_refine import (
    RefinementRegistry,
    Validator,
    ValidatorFactory,
    integer,
    refine,
    refinement_registry,
    register_refinement,
    validator_factory,
)


class TestValidatorFactory:
    """Test ValidatorFactory."""

    def test_factory_is_config_factory(self):
        """Test that the factory plugs into the config system."""
        assert isinstance(validator_factory, FactoryBase)

    def test_string_with_refinements(self):
        """Test a string validator with size and pattern refinements."""
        config = {
            "name": "username",
            "type": "string",
            "refinements": [
                {"type": "size", "min": 3, "max": 20},
                {"type": "pattern", "pattern": "^[a-z0-9_]+$"},
            ],
        }

        validator = ValidatorFactory().create(**config)

        assert isinstance(validator, Validator)
        assert validator.type == "string"
        assert validator.refinements == ("size", "pattern")
        assert validator.is_valid("john_doe")
        assert [f.refinement for f in validator.failures("ab")] == ["size"]
        assert [f.refinement for f in validator.failures("John Doe")] == ["pattern"]

    def test_number_with_thresholds(self):
        """Test min and max thresholds with exclusivity."""
        validator = validator_factory.create(
            type="number",
            refinements=[
                {"type": "min", "threshold": 0, "exclusive": True},
                {"type": "max", "threshold": 100},
            ],
        )

        assert validator.is_valid(100)
        failure = validator.validate(0).first
        assert failure.refinement == "min"
        assert failure.min_exclusive is True

    def test_date_bounds_are_parsed(self):
        """Test that ISO strings become dates for date validators."""
        validator = validator_factory.create(
            type="date",
            refinements=[{"type": "min", "threshold": "2024-01-01"}],
        )

        assert validator.is_valid(Date(2024, 3, 1))
        failure = validator.validate(Date(2023, 3, 1)).first
        assert failure.min == Date(2024, 1, 1)

    def test_date_bound_with_datetime_values(self):
        """Test that datetime values are checked against a parsed date bound."""
        validator = validator_factory.create(
            type="date",
            refinements=[{"type": "min", "threshold": "2024-01-01"}],
        )

        assert not validator.is_valid(datetime(2023, 6, 1, 12))
        assert validator.is_valid(datetime(2024, 6, 1, 12))
        assert validator.validate(datetime(2023, 6, 1, 12)).first.refinement == "min"

    def test_invalid_date_bound(self):
        """Test that an unparseable date bound is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid date bound"):
            validator_factory.create(
                type="date", refinements=[{"type": "max", "threshold": "someday"}]
            )

    def test_empty_on_collections(self):
        """Test the empty refinement on map and set validators."""
        empty_map = validator_factory.create(type="map", refinements=[{"type": "empty"}])
        empty_set = validator_factory.create(type="SET", refinements=[{"type": "EMPTY"}])

        assert empty_map.is_valid({})
        assert not empty_map.is_valid({"a": 1})
        assert empty_set.is_valid(set())

    def test_pattern_flags(self):
        """Test regex flags in a pattern refinement."""
        validator = validator_factory.create(
            type="string",
            refinements=[{"type": "pattern", "pattern": "^[a-z]+$", "flags": ["ignorecase"]}],
        )

        assert validator.is_valid("ABC")

    def test_unknown_flag(self):
        """Test that an unknown regex flag is rejected."""
        with pytest.raises(ConfigurationError, match="Unknown regex flag"):
            validator_factory.create(
                type="string",
                refinements=[{"type": "pattern", "pattern": "a", "flags": ["sideways"]}],
            )

    def test_invalid_pattern(self):
        """Test that an invalid regex is a configuration error."""
        with pytest.raises(ConfigurationError, match="Invalid pattern"):
            validator_factory.create(
                type="string", refinements=[{"type": "pattern", "pattern": "("}]
            )

    def test_unknown_base_type(self):
        """Test that an unknown base type raises."""
        with pytest.raises(ConfigurationError) as exc_info:
            validator_factory.create(name="bad", type="tensor")

        assert "string" in exc_info.value.context["available_types"]

    def test_missing_base_type(self):
        """Test that the base type is required."""
        with pytest.raises(ConfigurationError, match="<missing>"):
            validator_factory.create(refinements=[])

    def test_unknown_refinement_is_skipped(self, caplog):
        """Test that an unknown refinement type is logged and skipped."""
        with caplog.at_level(logging.WARNING, logger="dataknobs_refine.factory"):
            validator = validator_factory.create(
                type="integer", refinements=[{"type": "prime"}, {"type": "min", "threshold": 1}]
            )

        assert validator.refinements == ("min",)
        assert "Unknown refinement type: prime" in caplog.text

    def test_refinement_without_type(self):
        """Test that a refinement entry must name its type."""
        with pytest.raises(ConfigurationError, match="missing 'type'"):
            validator_factory.create(type="integer", refinements=[{"threshold": 1}])

    def test_missing_refinement_parameter(self):
        """Test that required refinement parameters are enforced."""
        with pytest.raises(ConfigurationError, match="requires 'threshold'"):
            validator_factory.create(type="integer", refinements=[{"type": "max"}])

    def test_inverted_size_bounds(self):
        """Test that min greater than max is a configuration error."""
        with pytest.raises(ConfigurationError, match="cannot be greater than"):
            validator_factory.create(
                type="string", refinements=[{"type": "size", "min": 4, "max": 2}]
            )

    def test_builder_errors_are_not_treated_as_unknown(self):
        """Test that a NotFoundError raised by a builder propagates."""
        registry = RefinementRegistry()

        def lookup_builder(validator, config):
            raise NotFoundError("Lookup table not found", context={"table": config["table"]})

        registry.register("lookup", lookup_builder)
        factory = ValidatorFactory(registry=registry)

        with pytest.raises(NotFoundError, match="Lookup table not found"):
            factory.create(type="string", refinements=[{"type": "lookup", "table": "codes"}])

    def test_custom_registry(self):
        """Test a factory using its own registry with a custom refinement."""
        registry = RefinementRegistry()
        registry.register(
            "even",
            lambda validator, config: refine(
                validator, "even", lambda value, ctx: value % 2 == 0 or "Expected an even integer"
            ),
        )
        factory = ValidatorFactory(registry=registry)

        validator = factory.create(type="integer", refinements=[{"type": "even"}])

        assert validator.is_valid(4)
        assert validator.validate(3).errors == ["Expected an even integer"]
        assert not refinement_registry.has("even")


class TestRefinementRegistry:
    """Test RefinementRegistry."""

    def test_builtins_registered(self):
        """Test that the built-in refinements are available."""
        registry = RefinementRegistry()

        assert sorted(registry.list_keys()) == ["empty", "max", "min", "pattern", "size"]

    def test_names_are_case_insensitive(self):
        """Test that mixed-case registrations are found from config."""
        registry = RefinementRegistry()
        registry.register(
            "Even",
            lambda validator, config: refine(validator, "even", lambda value, ctx: value % 2 == 0),
        )

        assert registry.has("even")
        assert "EVEN" in registry
        assert registry.get_optional("Even") is not None
        validator = ValidatorFactory(registry=registry).create(
            type="integer", refinements=[{"type": "even"}]
        )
        assert validator.refinements == ("even",)
        assert not validator.is_valid(3)
        assert registry.apply(integer(), {"type": "EVEN"}).is_valid(2)

        registry.unregister("EVEN")
        assert not registry.has("even")

    def test_duplicate_registration_raises(self):
        """Test that names cannot be registered twice by default."""
        registry = RefinementRegistry()

        with pytest.raises(OperationError):
            registry.register("size", lambda validator, config: validator)

    def test_apply_unknown_raises(self):
        """Test that applying an unknown refinement raises NotFoundError."""
        with pytest.raises(NotFoundError):
            RefinementRegistry().apply(integer(), {"type": "prime"})

    def test_register_refinement_on_shared_registry(self):
        """Test registering with the shared registry used by the default factory."""
        register_refinement(
            "positive",
            lambda validator, config: refine(validator, "positive", lambda value, ctx: value > 0),
        )
        try:
            validator = validator_factory.create(
                type="number", refinements=[{"type": "positive"}]
            )
            assert validator.is_valid(1)
            assert not validator.is_valid(-1)
        finally:
            refinement_registry.unregister("positive")
