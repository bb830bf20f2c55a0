"""Validation and canonization of dynamically typed field values.

Run named validators over scalars, sequences and mappings, turn raw input
into canonical values, and collect the accepted and rejected fields of a
record in one place.

Example:
    ```python
    from dataknobs_canon import Validator

    Validator.register_alias("shortStr", "str", {"max_length": 15})

    v = Validator({"stop_after_first_error": True})
    v.positiveInt("id", "17").shortStr("name", "Ada Lovelace")
    v.valid()
    # {'id': 17, 'name': 'Ada Lovelace'}
    ```
"""

from dataknobs_canon.exceptions import (
    CanonError,
    CollisionError,
    ConfigurationError,
    InvalidDefinitionError,
    InvalidNameError,
    InvalidRecordError,
    NotRegisteredError,
    TransformError,
)
from dataknobs_canon.factory import ValidatorFactory, validator_factory
from dataknobs_canon.outcome import ValidationOutcome
from dataknobs_canon.registry import (
    EntryPoint,
    FieldBinding,
    SchemaDefinition,
    ValidatorRegistry,
)
from dataknobs_canon.shapes import Shape
from dataknobs_canon.store import ResultStore
from dataknobs_canon.validator import SHARED_REGISTRY, Validator, create_shared_registry

__version__ = "0.1.0"

__all__ = [
    # Facade
    "Validator",
    "SHARED_REGISTRY",
    "create_shared_registry",
    "ValidatorFactory",
    "validator_factory",
    # Building blocks
    "ValidationOutcome",
    "ResultStore",
    "Shape",
    "ValidatorRegistry",
    "EntryPoint",
    "FieldBinding",
    "SchemaDefinition",
    # Exceptions
    "CanonError",
    "ConfigurationError",
    "InvalidNameError",
    "InvalidDefinitionError",
    "CollisionError",
    "NotRegisteredError",
    "InvalidRecordError",
    "TransformError",
]
