"""Immutable validator descriptor.

A ``Validator`` pairs a human-readable type name with a ``check`` procedure
that lazily yields failures for a value. Refinements never modify a
validator: they ``derive`` a new one whose check wraps the old check.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from .context import CheckContext
from .exceptions import RefinementError
from .failures import Failure
from .result import ValidationResult

T = TypeVar("T")
F = TypeVar("F", bound=Failure, covariant=True)

CheckFn = Callable[[Any, CheckContext], Iterable[Failure]]


@dataclass(frozen=True)
class Validator(Generic[T, F]):
    """Descriptor for "is this value acceptable".

    ``T`` is the type of value the validator accepts and ``F`` the union of
    failure classes it can produce. Each applied refinement widens ``F``.

    Attributes:
        type: Type name used in failure messages (e.g. "string")
        check: Procedure yielding zero or more failures for a value; an
            empty sequence means the value is accepted
        refinements: Names of the refinements layered onto the base check,
            innermost first

    Example:
        ```python
        username = pattern(size(string(), 3, 20), r"^[a-z_]+$")
        username.is_valid("dk_user")
        # True
        [f.refinement for f in username.failures("Hi")]
        # ['size']
        ```
    """

    type: str
    check: CheckFn
    refinements: tuple[str, ...] = ()

    def derive(self, **changes: Any) -> Validator[Any, Any]:
        """Copy this validator, replacing the given fields.

        Args:
            **changes: Field values to override (usually ``check``)

        Returns:
            New Validator; this one is left unchanged
        """
        return replace(self, **changes)

    def failures(self, value: Any, context: CheckContext | None = None) -> Iterator[F]:
        """Lazily enumerate the failures for a value.

        Stop consuming the iterator to stop checking.

        Args:
            value: Value to check
            context: Optional context; a fresh one is created if omitted

        Returns:
            Iterator over failures, upstream checks first
        """
        if context is None:
            context = CheckContext()
        return iter(self.check(value, context))  # type: ignore[arg-type]

    def validate(self, value: Any, context: CheckContext | None = None) -> ValidationResult:
        """Check a value and collect every failure.

        Args:
            value: Value to check
            context: Optional validation context

        Returns:
            ValidationResult with all failures in production order
        """
        failures = list(self.failures(value, context))
        if failures:
            return ValidationResult.failure(value, failures)
        return ValidationResult.success(value)

    def is_valid(self, value: Any, context: CheckContext | None = None) -> bool:
        """Check a value, stopping at the first failure."""
        return next(self.failures(value, context), None) is None

    def assert_valid(self, value: T, context: CheckContext | None = None) -> T:
        """Return the value if it is accepted, otherwise raise.

        Raises:
            RefinementError: With the first failure for the value
        """
        failure = next(self.failures(value, context), None)
        if failure is not None:
            raise RefinementError(failure)
        return value
