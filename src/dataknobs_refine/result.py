"""Validation result type collecting the failures of one pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .failures import Failure, FailureSummary


@dataclass
class ValidationResult:
    """Outcome of fully enumerating a validator's failures for a value.

    ``Validator.validate`` returns this object. Use ``Validator.failures``
    instead when only part of the failure stream is needed.
    """

    valid: bool
    value: Any
    failures: list[Failure] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @property
    def errors(self) -> list[str]:
        """Messages of all failures, in the order they were produced."""
        return [failure.message for failure in self.failures]

    @property
    def first(self) -> Failure | None:
        return self.failures[0] if self.failures else None

    def merge(self, other: ValidationResult) -> ValidationResult:
        """Combine results for composite validation.

        Args:
            other: Another ValidationResult to merge with this one

        Returns:
            New ValidationResult with combined state
        """
        return ValidationResult(
            valid=self.valid and other.valid,
            value=other.value if other.valid else self.value,
            failures=self.failures + other.failures,
        )

    def summary(self) -> FailureSummary:
        return FailureSummary.from_failures(self.failures)

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a dictionary of plain values."""
        return {
            "valid": self.valid,
            "value": self.value,
            "failures": [failure.to_dict() for failure in self.failures],
        }

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        """Create a successful validation result.

        Args:
            value: The validated value

        Returns:
            Successful ValidationResult
        """
        return cls(valid=True, value=value, failures=[])

    @classmethod
    def failure(cls, value: Any, failures: list[Failure]) -> ValidationResult:
        """Create a failed validation result.

        Args:
            value: The value that failed validation
            failures: Failures produced for the value

        Returns:
            Failed ValidationResult
        """
        return cls(valid=False, value=value, failures=list(failures))
