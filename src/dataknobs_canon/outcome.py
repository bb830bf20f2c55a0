"""Outcome type returned by validator definitions and shape adapters.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidDefinitionError


@dataclass
class ValidationOutcome:
    """Result of running one validator definition over one value.

    ``value`` holds the canonized form of the input when ``ok`` is true.
    When ``ok`` is false the value is informational only: the result store
    always records the raw input of the call as the rejected value.
    """

    value: Any
    ok: bool

    def __bool__(self) -> bool:
        """Allow 'if outcome:' usage to check validity."""
        return self.ok

    @classmethod
    def success(cls, value: Any) -> ValidationOutcome:
        """Create an accepted outcome.

        Args:
            value: The canonized value

        Returns:
            Successful ValidationOutcome
        """
        return cls(value=value, ok=True)

    @classmethod
    def failure(cls, value: Any = None) -> ValidationOutcome:
        """Create a rejected outcome.

        Args:
            value: The value that failed validation

        Returns:
            Failed ValidationOutcome
        """
        return cls(value=value, ok=False)

    @classmethod
    def of(cls, result: Any) -> ValidationOutcome:
        """Normalize whatever a validator definition returned.

        Definitions may return a ValidationOutcome, a ``(value, ok)`` pair or
        a mapping with ``value`` and ``ok`` keys.

        Args:
            result: Return value of a validator definition

        Returns:
            ValidationOutcome

        Raises:
            InvalidDefinitionError: If the result has none of those shapes
        """
        if isinstance(result, ValidationOutcome):
            return result
        if isinstance(result, tuple) and len(result) == 2:
            return cls(value=result[0], ok=bool(result[1]))
        if isinstance(result, Mapping) and "ok" in result:
            return cls(value=result.get("value"), ok=bool(result["ok"]))
        raise InvalidDefinitionError(
            "Validator definitions must return a ValidationOutcome, "
            "a (value, ok) pair or a mapping with 'value' and 'ok'",
            context={"type": type(result).__name__},
        )
