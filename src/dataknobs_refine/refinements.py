"""Built-in refinements for numbers, dates, strings and collections.

Each function wraps a validator with ``refine`` and returns a new validator.
Refinements compose by nesting::

    score = size(minimum(number(), 0), 0, 100)
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping, Sized
from collections.abc import Set as AbstractSet
from decimal import Decimal
from re import Pattern as RegexPattern
from typing import Any, TypeVar

from .context import CheckContext
from .failures import Failure, SizeFailure, ValueFailure
from .refine import refine
from .validator import Validator

T = TypeVar("T")
F = TypeVar("F", bound=Failure)

Threshold = int | float | Decimal | datetime.date


def _comparable(value: Any, bound: Any) -> tuple[Any, Any]:
    """Align a date or datetime value with a bound so the two can be ordered.

    A plain date is read as midnight when the other side is a datetime, and a
    naive datetime is read in the timezone of an aware one. Other values are
    returned unchanged.
    """
    if not isinstance(value, datetime.date) or not isinstance(bound, datetime.date):
        return value, bound
    value_has_time = isinstance(value, datetime.datetime)
    bound_has_time = isinstance(bound, datetime.datetime)
    if value_has_time and not bound_has_time:
        bound = datetime.datetime.combine(bound, datetime.time.min, tzinfo=value.tzinfo)
    elif bound_has_time and not value_has_time:
        value = datetime.datetime.combine(value, datetime.time.min, tzinfo=bound.tzinfo)
    elif value_has_time and bound_has_time:
        if value.tzinfo is None and bound.tzinfo is not None:
            value = value.replace(tzinfo=bound.tzinfo)
        elif bound.tzinfo is None and value.tzinfo is not None:
            bound = bound.replace(tzinfo=value.tzinfo)
    return value, bound


def _length_or_size(value: Sized) -> tuple[int, str]:
    """Measure a collection, naming the measure used in messages."""
    if isinstance(value, (Mapping, AbstractSet)):
        return len(value), "size"
    return len(value), "length"


def empty(validator: Validator[T, F]) -> Validator[T, F | SizeFailure]:
    """Ensure that a string, sequence, mapping or set is empty.

    Args:
        validator: Validator for a sized type

    Returns:
        Validator rejecting non-empty values with a ``size`` failure
    """
    expected = f"Expected an empty {validator.type}"

    def refiner(value: Any, context: CheckContext) -> bool | list[SizeFailure]:
        measured, unit = _length_or_size(value)
        return measured == 0 or [
            SizeFailure(
                actually=measured,
                min=0,
                max=0,
                min_exclusive=False,
                max_exclusive=False,
                message=f"{expected} but received one with a {unit} of `{measured}`",
            )
        ]

    return refine(validator, "empty", refiner)


def _threshold_message(validator: Validator[Any, Any], threshold: Any, exclusive: bool, value: Any) -> str:
    # Both minimum and maximum describe the bound as "greater than"
    or_equal = "" if exclusive else "or equal to "
    return f"Expected a {validator.type} greater than {or_equal}{threshold} but received `{value}`"


def maximum(
    validator: Validator[T, F], threshold: Threshold, exclusive: bool = False
) -> Validator[T, F | SizeFailure]:
    """Ensure that a number or date is below a threshold.

    Args:
        validator: Validator for a number or date type
        threshold: Largest accepted value
        exclusive: If True the threshold itself is rejected

    Returns:
        Validator tagging its failures with refinement ``"max"``
    """

    def refiner(value: Any, context: CheckContext) -> bool | list[SizeFailure]:
        measured, bound = _comparable(value, threshold)
        passed = measured < bound if exclusive else measured <= bound
        return passed or [
            SizeFailure(
                actually=value,
                min=None,
                max=threshold,
                min_exclusive=False,
                max_exclusive=exclusive,
                message=_threshold_message(validator, threshold, exclusive, value),
            )
        ]

    return refine(validator, "max", refiner)


def minimum(
    validator: Validator[T, F], threshold: Threshold, exclusive: bool = False
) -> Validator[T, F | SizeFailure]:
    """Ensure that a number or date is above a threshold.

    Args:
        validator: Validator for a number or date type
        threshold: Smallest accepted value
        exclusive: If True the threshold itself is rejected

    Returns:
        Validator tagging its failures with refinement ``"min"``
    """

    def refiner(value: Any, context: CheckContext) -> bool | list[SizeFailure]:
        measured, bound = _comparable(value, threshold)
        passed = measured > bound if exclusive else measured >= bound
        return passed or [
            SizeFailure(
                actually=value,
                min=threshold,
                max=None,
                min_exclusive=exclusive,
                max_exclusive=False,
                message=_threshold_message(validator, threshold, exclusive, value),
            )
        ]

    return refine(validator, "min", refiner)


def pattern(validator: Validator[T, F], regexp: str | RegexPattern[str]) -> Validator[T, F | ValueFailure]:
    """Ensure that a string matches a regular expression.

    The expression may match anywhere in the string; anchor it with ``^``
    and ``$`` to require a full match.

    Args:
        validator: Validator for a string type
        regexp: Pattern source or compiled pattern

    Returns:
        Validator rejecting non-matching strings with a ``value`` failure
    """
    regex = re.compile(regexp) if isinstance(regexp, str) else regexp

    def refiner(value: Any, context: CheckContext) -> bool | list[ValueFailure]:
        return regex.search(value) is not None or [
            ValueFailure(
                except_=regex.pattern,
                actually=value,
                message=(
                    f"Expected a {validator.type} matching `/{regex.pattern}/` "
                    f'but received "{value}"'
                ),
            )
        ]

    return refine(validator, "pattern", refiner)


def size(
    validator: Validator[T, F], min: Any, max: Any = None
) -> Validator[T, F | SizeFailure]:
    """Ensure that a value's size, length or magnitude lies between bounds.

    Numbers and dates are compared directly, mappings and sets by their
    size, strings and sequences by their length. Both bounds are inclusive.

    Args:
        validator: Validator for a string, number, date, sequence, mapping
            or set type
        min: Smallest accepted measure
        max: Largest accepted measure (defaults to ``min``, i.e. an exact size)

    Returns:
        Validator rejecting out-of-range values with a ``size`` failure

    Raises:
        ValueError: If min is greater than max
    """
    if max is None:
        max = min
    low, high = _comparable(min, max)
    if low > high:
        raise ValueError(f"min ({min}) cannot be greater than max ({max})")

    expected = f"Expected a {validator.type}"
    of = f"of `{min}`" if min == max else f"between `{min}` and `{max}`"

    def refiner(value: Any, context: CheckContext) -> bool | list[SizeFailure]:
        if isinstance(value, (int, float, Decimal, datetime.date)):
            measured = value
            message = f"{expected} {of} but received `{value}`"
        else:
            measured, unit = _length_or_size(value)
            message = f"{expected} with a {unit} {of} but received one with a {unit} of `{measured}`"

        below, lower = _comparable(measured, min)
        above, upper = _comparable(measured, max)
        return (lower <= below and above <= upper) or [
            SizeFailure(
                actually=measured,
                min=min,
                max=max,
                min_exclusive=False,
                max_exclusive=False,
                message=message,
            )
        ]

    return refine(validator, "size", refiner)
