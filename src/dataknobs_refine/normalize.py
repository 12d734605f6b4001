"""Turn raw refiner results into canonical failure records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from .context import CheckContext
from .failures import Failure, GenericFailure
from .validator import Validator

logger = logging.getLogger(__name__)


def default_message(type_name: str | None, refinement: str | None, value: Any) -> str:
    """Message used for a failure that does not carry its own."""
    with_refinement = f" with refinement `{refinement}`" if refinement else ""
    return f"Expected a value of type `{type_name}`{with_refinement}, but received: `{value!r}`"


def to_failure(
    result: Failure | Mapping[str, Any] | bool | str,
    context: CheckContext,
    validator: Validator[Any, Any],
    value: Any,
    refinement: str | None = None,
) -> Failure | None:
    """Normalize a single raw result into a failure, or None for success.

    Context fields the failure leaves unset (``value``, ``type``, ``path``,
    ``branch``, ``key``, ``refinement``) are filled from the arguments. Fields it already
    carries are kept.

    Args:
        result: True, False, a message string, a failure record, or a
            dictionary in the form produced by ``Failure.to_dict``
        context: Context of the current check
        validator: Validator that performed the check
        value: The checked value
        refinement: Name of the refinement that produced the result, used
            when the failure does not name one

    Returns:
        Normalized failure, or None if ``result`` is True
    """
    if result is True:
        return None
    if result is False:
        failure: Failure = GenericFailure()
    elif isinstance(result, str):
        failure = GenericFailure(message=result)
    elif isinstance(result, Failure):
        failure = result
    elif isinstance(result, Mapping):
        failure = Failure.from_dict(dict(result))
    else:
        logger.warning(
            f"Unexpected refiner result of type {type(result).__name__} for {validator.type}"
        )
        failure = GenericFailure(
            message=f"Refiner returned unexpected result type: {type(result).__name__}"
        )

    defaults = {
        "value": value,
        "type": validator.type,
        "key": context.key,
        "path": context.path,
        "branch": context.branch,
        "refinement": refinement,
    }
    changes = {
        name: default
        for name, default in defaults.items()
        if getattr(failure, name) in (None, ())
    }
    if not failure.message:
        changes["message"] = default_message(
            validator.type, failure.refinement or refinement, value
        )
    return failure.with_context(**changes) if changes else failure


def to_failures(
    results: Iterable[Failure] | Failure | bool | str | None,
    context: CheckContext,
    validator: Validator[Any, Any],
    value: Any,
    refinement: str | None = None,
) -> Iterator[Failure]:
    """Normalize a refiner result into a stream of failures.

    Args:
        results: True or None (no failures), False, a message string, a
            single failure, or an iterable of failures
        context: Context of the current check
        validator: Validator that performed the check
        value: The checked value
        refinement: Name of the refinement that produced the results

    Yields:
        Canonical failures in the order given
    """
    if results is None:
        return
    if isinstance(results, (bool, str, Failure, Mapping)) or not isinstance(results, Iterable):
        results = [results]  # type: ignore[list-item]
    for result in results:
        failure = to_failure(result, context, validator, value, refinement)
        if failure is not None:
            yield failure
