"""Failure records produced by validators and refinements.

A failure describes one way a value violated a check. Each failure class
carries a ``failure_class`` tag so callers can branch on the kind of
violation (for example, render the violated bound of a ``size`` failure)
while ``message`` always gives a standalone description.

Every failure also carries context fields (``value``, ``type``, ``path``,
``refinement``, ...). Leaf refiners leave them unset; they are filled in by
``dataknobs_refine.normalize.to_failures`` and the ``refine`` combinator.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar

from dataknobs_common.exceptions import SerializationError


@dataclass(frozen=True, kw_only=True)
class Failure:
    """Base failure record.

    Attributes:
        message: Human-readable description of the violation
        value: The value that was checked
        type: Type name of the validator that checked the value
        key: Last element of ``path`` (None at the root)
        path: Location of the value inside the checked input
        branch: Values visited along ``path``
        refinement: Name of the refinement that produced the failure, or
            None when the failure came from a base type check
    """

    failure_class: ClassVar[str] = "generic"

    message: str = ""
    value: Any = None
    type: str | None = None
    key: Any = None
    path: tuple[Any, ...] = ()
    branch: tuple[Any, ...] = ()
    refinement: str | None = None

    def with_context(self, **changes: Any) -> Failure:
        """Return a copy of this failure with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Convert the failure to a plain dictionary.

        The class tag is emitted under ``"class"``; fields whose Python name
        carries a trailing underscore are emitted without it.

        Returns:
            Dictionary representation of the failure
        """
        data: dict[str, Any] = {"class": self.failure_class}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, tuple):
                value = list(value)
            data[f.name.rstrip("_")] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Failure:
        """Create a failure from its dictionary representation.

        When called on ``Failure`` itself the concrete subclass is chosen
        from the ``"class"`` entry.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            Failure instance

        Raises:
            SerializationError: If the class tag is unknown
        """
        target: type[Failure] = cls
        if cls is Failure:
            tag = data.get("class", "generic")
            if tag not in FAILURE_CLASSES:
                raise SerializationError(
                    f"Unknown failure class: {tag}",
                    context={"class": tag, "known": sorted(FAILURE_CLASSES)},
                )
            target = FAILURE_CLASSES[tag]

        names = {f.name for f in fields(target)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = key if key in names else f"{key}_"
            if name not in names:
                continue
            if name in ("path", "branch") and value is not None:
                value = tuple(value)
            kwargs[name] = value
        return target(**kwargs)


@dataclass(frozen=True, kw_only=True)
class GenericFailure(Failure):
    """Failure from a refiner that only reports pass/fail or a message."""

    failure_class: ClassVar[str] = "generic"


@dataclass(frozen=True, kw_only=True)
class SizeFailure(Failure):
    """A quantitative bound was violated.

    Attributes:
        actually: The measured value (a number or date, or the size/length
            of a collection)
        min: Lower bound, None when unbounded
        max: Upper bound, None when unbounded
        min_exclusive: Whether ``min`` itself is excluded
        max_exclusive: Whether ``max`` itself is excluded
    """

    failure_class: ClassVar[str] = "size"

    actually: Any = None
    min: Any = None
    max: Any = None
    min_exclusive: bool = False
    max_exclusive: bool = False


@dataclass(frozen=True, kw_only=True)
class ValueFailure(Failure):
    """The content of a value did not satisfy a qualitative constraint.

    Attributes:
        except_: Description of the constraint, e.g. a pattern's source
        actually: The rejected value
    """

    failure_class: ClassVar[str] = "value"

    except_: Any = None
    actually: Any = None


@dataclass(frozen=True, kw_only=True)
class TypeFailure(Failure):
    """A value was not of the validator's primitive type."""

    failure_class: ClassVar[str] = "type"

    expected: str | None = None
    actually: Any = None


FAILURE_CLASSES: dict[str, type[Failure]] = {
    cls.failure_class: cls
    for cls in (GenericFailure, SizeFailure, ValueFailure, TypeFailure)
}


@dataclass
class FailureSummary:
    """Counts of failures by class and by refinement."""

    total: int = 0
    by_class: dict[str, int] = field(default_factory=dict)
    by_refinement: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_failures(cls, failures: list[Failure]) -> FailureSummary:
        summary = cls()
        for failure in failures:
            summary.total += 1
            summary.by_class[failure.failure_class] = (
                summary.by_class.get(failure.failure_class, 0) + 1
            )
            if failure.refinement:
                summary.by_refinement[failure.refinement] = (
                    summary.by_refinement.get(failure.refinement, 0) + 1
                )
        return summary
