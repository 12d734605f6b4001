"""Context passed through every check of a validation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CheckContext:
    """Location and caller metadata for one validation pass.

    Refiners receive the context but must not modify it. A new context is
    created for each pass unless the caller supplies one.

    Attributes:
        path: Keys leading from the root input to the checked value
        branch: Values visited along ``path``, root first
        metadata: Free-form data supplied by the caller
    """

    path: tuple[Any, ...] = ()
    branch: tuple[Any, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> Any:
        """Last element of ``path``, or None at the root."""
        return self.path[-1] if self.path else None

    def set_metadata(self, key: str, value: Any) -> None:
        """Store metadata in the context.

        Args:
            key: Metadata key
            value: Metadata value
        """
        self.metadata[key] = value

    def get_metadata(self, key: str, default: Any = None) -> Any:
        """Retrieve metadata from the context.

        Args:
            key: Metadata key
            default: Default value if key not found

        Returns:
            Metadata value or default
        """
        return self.metadata.get(key, default)
