"""Factory for building refined validators from configuration."""

import logging
from typing import Any

from dataknobs_common.exceptions import ConfigurationError
from dataknobs_config import FactoryBase

from .primitives import BASE_VALIDATORS
from .registry import RefinementRegistry, normalize_name, refinement_registry
from .validator import Validator

logger = logging.getLogger(__name__)


class ValidatorFactory(FactoryBase):
    """Factory for creating refined validators from configuration.

    Configuration Options:
        name (str): Validator name, used for logging only
        type (str): Base type (string, number, integer, date, array, map, set)
        refinements (list): Refinement definitions, applied in order

    Refinement Definition Options:
        type (str): Registered refinement name (empty, min, max, pattern, size)
        threshold: Bound for min/max (ISO-8601 string for date validators)
        exclusive (bool): Whether the min/max threshold is excluded
        pattern (str): Regular expression for pattern
        flags (list): Regex flag names for pattern (e.g. IGNORECASE)
        min, max: Bounds for size (max defaults to min)

    Example Configuration:
        validators:
          - name: username
            factory: validator
            type: string
            refinements:
              - type: size
                min: 3
                max: 20
              - type: pattern
                pattern: "^[a-z0-9_]+$"
          - name: age
            factory: validator
            type: integer
            refinements:
              - type: min
                threshold: 13
              - type: max
                threshold: 120
    """

    def __init__(self, registry: RefinementRegistry | None = None):
        self.registry = registry or refinement_registry

    def create(self, **config) -> Validator[Any, Any]:
        """Create a Validator from configuration.

        Args:
            **config: Validator configuration

        Returns:
            Validator with all configured refinements applied

        Raises:
            ConfigurationError: If the base type is unknown or a refinement
                is misconfigured
        """
        name = config.get("name", "unnamed_validator")
        type_name = str(config.get("type", "")).lower()

        if type_name not in BASE_VALIDATORS:
            raise ConfigurationError(
                f"Unknown validator type: {type_name or '<missing>'}",
                context={"name": name, "available_types": sorted(BASE_VALIDATORS)},
            )

        logger.info(f"Creating validator: {name} ({type_name})")

        validator = BASE_VALIDATORS[type_name]()
        for refinement_config in config.get("refinements", []):
            validator = self._apply_refinement(validator, refinement_config)

        return validator

    def _apply_refinement(
        self, validator: Validator[Any, Any], refinement_config: dict[str, Any]
    ) -> Validator[Any, Any]:
        """Apply one refinement definition, skipping unknown refinement types.

        Args:
            validator: Validator built so far
            refinement_config: Refinement configuration

        Returns:
            Refined validator, or the given validator if the type is unknown
        """
        refinement_type = normalize_name(refinement_config.get("type"))
        if not refinement_type:
            raise ConfigurationError(
                "Refinement configuration missing 'type'",
                context={"config": refinement_config},
            )

        if refinement_type not in self.registry:
            logger.warning(f"Unknown refinement type: {refinement_type}")
            return validator

        return self.registry.apply(validator, refinement_config)


# Create singleton instance for registration
validator_factory = ValidatorFactory()
