"""Registry of named refinements that can be applied from configuration."""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Callable
from typing import Any

from dataknobs_common.exceptions import ConfigurationError
from dataknobs_common.registry import Registry

from .refinements import empty, maximum, minimum, pattern, size
from .validator import Validator

logger = logging.getLogger(__name__)

RefinementBuilder = Callable[[Validator[Any, Any], dict[str, Any]], Validator[Any, Any]]


def normalize_name(name: Any) -> str:
    """Refinement names are matched case-insensitively."""
    return str(name or "").strip().lower()


def _require(config: dict[str, Any], key: str) -> Any:
    if key not in config:
        raise ConfigurationError(
            f"Refinement '{config.get('type')}' requires '{key}'",
            context={"refinement": config.get("type"), "config": config},
        )
    return config[key]


def parse_bound(validator: Validator[Any, Any], bound: Any) -> Any:
    """Convert a configured bound to the validator's value type.

    ISO-8601 strings are parsed for ``date`` validators; everything else is
    returned unchanged.
    """
    if validator.type != "date" or not isinstance(bound, str):
        return bound
    try:
        if len(bound) > 10:
            return datetime.datetime.fromisoformat(bound)
        return datetime.date.fromisoformat(bound)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid date bound: {bound}", context={"bound": bound}
        ) from e


def _build_empty(validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
    return empty(validator)


def _build_min(validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
    threshold = parse_bound(validator, _require(config, "threshold"))
    return minimum(validator, threshold, exclusive=config.get("exclusive", False))


def _build_max(validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
    threshold = parse_bound(validator, _require(config, "threshold"))
    return maximum(validator, threshold, exclusive=config.get("exclusive", False))


def _build_pattern(validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
    source = _require(config, "pattern")
    flags = 0
    for flag_name in config.get("flags", []):
        flag = getattr(re, str(flag_name).upper(), None)
        if not isinstance(flag, re.RegexFlag):
            raise ConfigurationError(
                f"Unknown regex flag: {flag_name}", context={"flag": flag_name}
            )
        flags |= flag
    try:
        regex = re.compile(source, flags)
    except re.error as e:
        raise ConfigurationError(
            f"Invalid pattern: {source}", context={"pattern": source, "error": str(e)}
        ) from e
    return pattern(validator, regex)


def _build_size(validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
    low = parse_bound(validator, _require(config, "min"))
    high = parse_bound(validator, config.get("max"))
    try:
        return size(validator, low, high)
    except ValueError as e:
        raise ConfigurationError(str(e), context={"min": low, "max": high}) from e


class RefinementRegistry(Registry[RefinementBuilder]):
    """Maps refinement names to builders that apply them to a validator.

    The built-in refinements (``empty``, ``min``, ``max``, ``pattern`` and
    ``size``) are registered on creation.

    Example:
        ```python
        registry = RefinementRegistry()
        registry.register(
            "even",
            lambda v, cfg: refine(v, "even", lambda value, ctx: value % 2 == 0),
        )
        validator = registry.apply(integer(), {"type": "even"})
        ```
    """

    def __init__(self) -> None:
        super().__init__("refinements")
        self.register("empty", _build_empty)
        self.register("min", _build_min)
        self.register("max", _build_max)
        self.register("pattern", _build_pattern)
        self.register("size", _build_size)

    def register(
        self,
        key: str,
        item: RefinementBuilder,
        metadata: dict[str, Any] | None = None,
        allow_overwrite: bool = False,
    ) -> None:
        """Register a builder under a case-insensitive refinement name."""
        super().register(
            normalize_name(key), item, metadata=metadata, allow_overwrite=allow_overwrite
        )

    def has(self, key: str) -> bool:
        return super().has(normalize_name(key))

    def get(self, key: str) -> RefinementBuilder:
        return super().get(normalize_name(key))

    def get_optional(self, key: str) -> RefinementBuilder | None:
        return super().get_optional(normalize_name(key))

    def unregister(self, key: str) -> RefinementBuilder:
        return super().unregister(normalize_name(key))

    def apply(self, validator: Validator[Any, Any], config: dict[str, Any]) -> Validator[Any, Any]:
        """Apply the refinement described by a config entry.

        Args:
            validator: Validator to refine
            config: Entry with a ``type`` naming the refinement plus its
                parameters

        Returns:
            Refined validator

        Raises:
            NotFoundError: If no refinement is registered under ``type``
            ConfigurationError: If required parameters are missing or invalid
        """
        builder = self.get(config.get("type", ""))
        return builder(validator, config)


refinement_registry = RefinementRegistry()


def register_refinement(
    name: str, builder: RefinementBuilder, allow_overwrite: bool = False
) -> None:
    """Register a refinement builder with the shared registry.

    Args:
        name: Name used as ``type`` in refinement configs
        builder: Function of ``(validator, config)`` returning a validator
        allow_overwrite: Whether to replace an existing registration
    """
    logger.debug(f"Registering refinement: {name}")
    refinement_registry.register(name, builder, allow_overwrite=allow_overwrite)
