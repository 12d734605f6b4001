"""Base validators performing a single primitive type check.

These are the validators refinements are layered onto. Each one yields at
most one ``TypeFailure`` and nothing else; bounds, sizes and patterns are
added with the functions in ``dataknobs_refine.refinements``.
"""

from __future__ import annotations

import datetime
import math
from collections.abc import Callable, Iterator, Mapping
from collections.abc import Set as AbstractSet
from decimal import Decimal
from typing import Any

from .context import CheckContext
from .failures import TypeFailure
from .validator import Validator


def _type_check(
    type_name: str, predicate: Callable[[Any], bool]
) -> Callable[[Any, CheckContext], Iterator[TypeFailure]]:
    def check(value: Any, context: CheckContext) -> Iterator[TypeFailure]:
        if not predicate(value):
            yield TypeFailure(
                message=f"Expected a value of type `{type_name}`, but received: `{value!r}`",
                value=value,
                type=type_name,
                key=context.key,
                path=context.path,
                branch=context.branch,
                expected=type_name,
                actually=value,
            )

    return check


def define(type_name: str, predicate: Callable[[Any], bool]) -> Validator[Any, TypeFailure]:
    """Create a validator from a type name and a predicate.

    Args:
        type_name: Name used in failure messages
        predicate: Returns True for acceptable values

    Returns:
        Validator accepting values for which ``predicate`` is true
    """
    if not type_name:
        raise ValueError("Validator type name must be a non-empty string")
    return Validator(type=type_name, check=_type_check(type_name, predicate))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float):
        return not math.isnan(value)
    if isinstance(value, Decimal):
        return not value.is_nan()
    return True


def string() -> Validator[str, TypeFailure]:
    """Accept ``str`` values."""
    return define("string", lambda value: isinstance(value, str))


def number() -> Validator[int | float | Decimal, TypeFailure]:
    """Accept ints, floats and Decimals, excluding bools and NaN."""
    return define("number", _is_number)


def integer() -> Validator[int, TypeFailure]:
    return define(
        "integer", lambda value: isinstance(value, int) and not isinstance(value, bool)
    )


def date() -> Validator[datetime.date, TypeFailure]:
    """Accept ``datetime.date`` and ``datetime.datetime`` values."""
    return define("date", lambda value: isinstance(value, datetime.date))


def array() -> Validator[list[Any] | tuple[Any, ...], TypeFailure]:
    return define("array", lambda value: isinstance(value, (list, tuple)))


def mapping() -> Validator[Mapping[Any, Any], TypeFailure]:
    """Accept any keyed collection (``collections.abc.Mapping``)."""
    return define("map", lambda value: isinstance(value, Mapping))


def set_() -> Validator[AbstractSet[Any], TypeFailure]:
    """Accept any unkeyed collection (``collections.abc.Set``)."""
    return define("set", lambda value: isinstance(value, AbstractSet))


BASE_VALIDATORS: dict[str, Callable[[], Validator[Any, TypeFailure]]] = {
    "string": string,
    "number": number,
    "integer": integer,
    "date": date,
    "array": array,
    "map": mapping,
    "set": set_,
}
