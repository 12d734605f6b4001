"""Exceptions raised by dataknobs_refine.

Rejected values are reported as failure records, not exceptions. The classes
here cover the cases where a caller explicitly asks for an exception
(``Validator.assert_valid``) and re-export the common errors raised while
building validators from configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dataknobs_common.exceptions import (
    ConfigurationError,
    DataknobsError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from .failures import Failure


class RefinementError(ValidationError):
    """Raised when a value is asserted valid but a check rejects it.

    Attributes:
        failure: The first failure produced for the value
        failures: Every failure collected before raising (may be just one)

    Example:
        ```python
        try:
            size(string(), 3).assert_valid("ab")
        except RefinementError as e:
            e.failure.refinement
            # 'size'
            e.context["class"]
            # 'size'
        ```
    """

    def __init__(self, failure: Failure, failures: list[Failure] | None = None):
        super().__init__(
            failure.message,
            context={
                "class": failure.failure_class,
                "type": failure.type,
                "refinement": failure.refinement,
                "path": list(failure.path),
            },
        )
        self.failure = failure
        self.failures = failures or [failure]


__all__ = [
    "ConfigurationError",
    "DataknobsError",
    "NotFoundError",
    "RefinementError",
    "ValidationError",
]
