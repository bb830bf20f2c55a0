"""Custom exceptions for the canon package.

This module defines exception types for dataknobs_canon, built on the
common exception framework from dataknobs_common.

Two families of failures exist in the canonization engine:

- **Configuration errors** are programmer or integration mistakes (a bad
  validator name, a non-callable definition, a name collision, a lookup of
  something never registered, a record argument that is not a mapping).
  They are raised synchronously and never recovered by the library.
- **Transform errors** wrap exceptions raised by user-supplied transform
  functions. The shape adapters catch them at the stage boundary and record
  the field as rejected; they never reach the caller.

Data that simply fails a check is not an exception at all: it is recorded in
the rejected partition of the result store.

Example:
    ```python
    from dataknobs_canon.exceptions import CollisionError, ConfigurationError

    try:
        Validator.register_validator("num", my_definition)
    except CollisionError as e:
        logger.error(f"Error: {e}")
        logger.error(f"Context: {e.context}")

    # Every misuse of the registration API is a ConfigurationError
    try:
        validator.schema("unknown", {})
    except ConfigurationError:
        ...
    ```
"""

from typing import Any, Dict

from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
)


class CanonError(DataknobsError):
    """Base exception for all dataknobs_canon errors.

    Carries the ``context``/``details`` dictionary of DataknobsError.
    """

    pass


class ConfigurationError(CanonError, BaseConfigurationError):
    """Raised when the registration or configuration API is misused.

    Configuration errors are never converted into rejections: they always
    propagate to the caller.

    Example:
        ```python
        raise ConfigurationError(
            "options.enumerated is not a mapping",
            context={"validator": "enumerated"}
        )
        ```
    """

    pass


class InvalidNameError(ConfigurationError, ValueError):
    """Raised when a validator, alias or schema name is not acceptable.

    A name must be a non-empty identifier, must not start with an underscore,
    must not be a Python keyword and must not shadow a public attribute of
    the validator facade.
    """

    pass


class InvalidDefinitionError(ConfigurationError, TypeError):
    """Raised when a definition, transform or outcome has the wrong type.

    Example:
        ```python
        raise InvalidDefinitionError(
            "Validator definition for 'id' needs to be callable",
            context={"name": "id", "type": "int"}
        )
        ```
    """

    pass


class CollisionError(ConfigurationError, OperationError):
    """Raised when registering a name that already exists.

    Only raised when the target scope does not allow overwriting validators.
    """

    pass


class NotRegisteredError(ConfigurationError, NotFoundError, LookupError):
    """Raised when a validator, alias target or schema cannot be found."""

    pass


class InvalidRecordError(ConfigurationError, TypeError):
    """Raised when a keyed record argument is not a mapping.

    Used by ``Validator.valid(base)`` and ``Validator.schema(name, data)``.
    """

    pass


class TransformError(CanonError):
    """Raised when a user-supplied transform function fails.

    The original exception is chained as ``__cause__``. Shape adapters catch
    this error and record the field as rejected.

    Args:
        message: Error message
        stage: Name of the pipeline stage that failed
        context: Optional context dictionary
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        context: Dict[str, Any] | None = None,
    ):
        super().__init__(message, context={"stage": stage, **(context or {})})
        self.stage = stage


__all__ = [
    "CanonError",
    "ConfigurationError",
    "InvalidNameError",
    "InvalidDefinitionError",
    "CollisionError",
    "NotRegisteredError",
    "InvalidRecordError",
    "TransformError",
]
