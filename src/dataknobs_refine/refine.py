"""The refinement combinator.

``refine`` layers an additional check on top of an existing validator. The
refiner function is only ever called with a value that every upstream check
has already accepted, so it can rely on the validator's type: a pattern
refiner never sees a non-string, a size refiner never sees ``None``.

Refiner functions may return:

- ``True`` or ``None``: the value passes
- ``False``: one generic failure with a placeholder message
- a string: one generic failure using the string as its message
- a failure, or an iterable of failures: each one is normalized

Every failure produced by the refiner is tagged with the refinement name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, Callable, Optional, TypeVar, Union, overload

from .context import CheckContext
from .failures import Failure, GenericFailure
from .normalize import to_failures
from .validator import Validator

logger = logging.getLogger(__name__)

T = TypeVar("T")
F1 = TypeVar("F1", bound=Failure)
F2 = TypeVar("F2", bound=Failure)

GENERIC_FAILURE_MESSAGE = "error"

Refiner = Callable[[T, CheckContext], Optional[Union[bool, Failure, Iterable[Failure]]]]
SimpleRefiner = Callable[[T, CheckContext], Optional[Union[bool, str]]]


@overload
def refine(
    validator: Validator[T, F1],
    name: str,
    refiner: Callable[[T, CheckContext], bool | F2 | Iterable[F2] | None],
) -> Validator[T, F1 | F2]: ...


@overload
def refine(
    validator: Validator[T, F1],
    name: str,
    refiner: Callable[[T, CheckContext], bool | str | None],
) -> Validator[T, F1 | GenericFailure]: ...


def refine(
    validator: Validator[Any, Any],
    name: str,
    refiner: Refiner[Any] | SimpleRefiner[Any],
) -> Validator[Any, Any]:
    """Augment a validator with an additional refinement.

    The returned validator first yields every failure of ``validator``
    unchanged. Only when there were none does it call ``refiner`` and yield
    the refiner's failures, each tagged with ``refinement=name``.

    Args:
        validator: Validator to wrap; it is not modified
        name: Refinement name used to tag failures
        refiner: Function of ``(value, context)``

    Returns:
        New validator with the same type name

    Raises:
        ValueError: If name is empty
        TypeError: If refiner is not callable

    Example:
        ```python
        even = refine(integer(), "even", lambda v, ctx: v % 2 == 0 or "Expected an even integer")
        [f.message for f in even.failures(3)]
        # ['Expected an even integer']
        ```
    """
    if not name or not isinstance(name, str):
        raise ValueError("Refinement name must be a non-empty string")
    if not callable(refiner):
        raise TypeError(f"Refiner for '{name}' must be callable, got {type(refiner).__name__}")

    upstream = validator.check

    def check(value: Any, context: CheckContext) -> Iterator[Failure]:
        rejected = False
        for failure in upstream(value, context):
            rejected = True
            yield failure

        if rejected:
            logger.debug(f"Skipping refinement '{name}': {validator.type} value already rejected")
            return

        result = refiner(value, context)
        if result is True or result is None:
            return
        if result is False or isinstance(result, str):
            result = GenericFailure(message=result or GENERIC_FAILURE_MESSAGE)

        for failure in to_failures(result, context, validator, value, refinement=name):
            yield failure.with_context(refinement=name)

    return validator.derive(check=check, refinements=(*validator.refinements, name))
