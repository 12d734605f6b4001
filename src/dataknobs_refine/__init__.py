"""Composable refinements for dataknobs validators.

Refinements layer semantic checks (bounds, size, pattern, emptiness) onto a
validator for a known type and report violations as typed failure records:

- **Validators**: immutable descriptors with a lazy ``check`` procedure
- **Refinements**: ``refine`` plus the built-ins ``empty``, ``minimum``,
  ``maximum``, ``pattern`` and ``size``
- **Failures**: ``generic``, ``size``, ``value`` and ``type`` records tagged
  with the refinement that produced them
- **Configuration**: ``ValidatorFactory`` builds validators from config dicts

Example:
    ```python
    from dataknobs_refine import integer, minimum, maximum

    age = maximum(minimum(integer(), 0), 150)
    age.is_valid(42)
    # True
    failure = age.validate(-1).first
    failure.refinement, failure.min
    # ('min', 0)
    ```
"""

from .context import CheckContext
from .exceptions import RefinementError
from .factory import ValidatorFactory, validator_factory
from .failures import (
    Failure,
    FailureSummary,
    GenericFailure,
    SizeFailure,
    TypeFailure,
    ValueFailure,
)
from .normalize import to_failure, to_failures
from .primitives import array, date, define, integer, mapping, number, set_, string
from .refine import GENERIC_FAILURE_MESSAGE, Refiner, SimpleRefiner, refine
from .refinements import empty, maximum, minimum, pattern, size
from .registry import RefinementRegistry, refinement_registry, register_refinement
from .result import ValidationResult
from .validator import Validator

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Validators
    "Validator",
    "CheckContext",
    "ValidationResult",
    "array",
    "date",
    "define",
    "integer",
    "mapping",
    "number",
    "set_",
    "string",
    # Refinements
    "refine",
    "Refiner",
    "SimpleRefiner",
    "GENERIC_FAILURE_MESSAGE",
    "empty",
    "maximum",
    "minimum",
    "pattern",
    "size",
    # Failures
    "Failure",
    "FailureSummary",
    "GenericFailure",
    "SizeFailure",
    "TypeFailure",
    "ValueFailure",
    "to_failure",
    "to_failures",
    "RefinementError",
    # Configuration
    "RefinementRegistry",
    "ValidatorFactory",
    "refinement_registry",
    "register_refinement",
    "validator_factory",
]
