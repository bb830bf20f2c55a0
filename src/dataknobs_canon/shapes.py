"""Shape adapters drive one validator definition across one shape of input.

Three shapes exist:

- ``Shape.SCALAR``: the value itself is validated once.
- ``Shape.SEQUENCE``: every element of a list/tuple is validated, in order.
- ``Shape.MAPPING``: every value of a mapping is validated, in insertion
  order; keys are kept as they are.

For sequences and mappings the first failing element rejects the whole
field. The rejected value is always the raw input of the call: partially
canonized copies never leak into the rejected partition, and the caller's
container is never mutated.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping, Sequence
from enum import Enum
from typing import Any

from .exceptions import ConfigurationError, TransformError
from .options import POST_TRANSFORM, POST_TRANSFORM_ITEM, PRE_TRANSFORM, PRE_TRANSFORM_ITEM
from .outcome import ValidationOutcome
from .store import ResultStore
from .transforms import run_stage

logger = logging.getLogger(__name__)

Definition = Callable[[Any, dict[str, Any]], Any]


class Shape(Enum):
    """Input shapes, valued by the suffix of their entry point names."""

    SCALAR = ""
    SEQUENCE = "Array"
    MAPPING = "Object"

    @property
    def suffix(self) -> str:
        return self.value

    def entry_name(self, base_name: str) -> str:
        """Name of the entry point for this shape, e.g. ``numArray``."""
        return f"{base_name}{self.value}"


def invoke_definition(
    definition: Definition,
    value: Any,
    options: dict[str, Any],
) -> ValidationOutcome:
    """Run a validator definition and normalize its result.

    Configuration errors raised by the definition propagate. Any other
    exception turns into a rejected outcome.
    """
    try:
        return ValidationOutcome.of(definition(value, options))
    except ConfigurationError:
        raise
    except Exception:
        logger.debug(
            f"Validator definition {getattr(definition, '__name__', definition)!r} "
            f"raised on {value!r}, treating as rejection",
            exc_info=True,
        )
        return ValidationOutcome.failure(value)


class ShapeAdapter(ABC):
    """Base class for the three shape adapters.

    ``run`` implements the parts shared by every shape: the whole-value
    pre-transform, the optional/default branch, the storage gate, the
    whole-value post-transform, and conversion of transform failures into
    rejections.
    """

    shape: Shape

    def run(
        self,
        store: ResultStore,
        definition: Definition,
        key: str,
        value: Any,
        options: dict[str, Any],
    ) -> None:
        """Validate ``value`` and record the outcome under ``key``.

        Args:
            store: Result store of the calling Validator
            definition: Validator definition to apply
            key: Field name
            value: Raw input
            options: Resolved options for this call
        """
        original = value
        try:
            value = run_stage(value, options, PRE_TRANSFORM)

            if value is None and options.get("optional"):
                result = options.get("default_value")
                ok, canonized = True, result
            else:
                ok, result, canonized = self.validate(definition, value, options)

            if ok and canonized is None and not options.get("return_none"):
                return

            if ok:
                result = self.post_process(result, options)
        except TransformError as e:
            logger.debug(f"Field '{key}' rejected, {e}")
            store.reject(key, original)
            return

        store.record(key, original, result, ok)

    @abstractmethod
    def validate(
        self,
        definition: Definition,
        value: Any,
        options: dict[str, Any],
    ) -> tuple[bool, Any, Any]:
        """Validate a pre-transformed value.

        Returns:
            ``(ok, value_to_store, canonized)``. ``canonized`` is what the
            definition produced, used by the ``return_none`` gate; both values
            are ignored when ``ok`` is false

        Raises:
            TransformError: If an item-level transform fails
        """
        pass

    def post_process(self, value: Any, options: dict[str, Any]) -> Any:
        """Apply the whole-value post-transform to an accepted value."""
        return run_stage(value, options, POST_TRANSFORM)


class ScalarAdapter(ShapeAdapter):
    """Validates a single value."""

    shape = Shape.SCALAR

    def validate(
        self,
        definition: Definition,
        value: Any,
        options: dict[str, Any],
    ) -> tuple[bool, Any, Any]:
        value = run_stage(value, options, PRE_TRANSFORM_ITEM)
        outcome = invoke_definition(definition, value, options)
        stored = outcome.value if options.get("canonize") else value
        return outcome.ok, stored, outcome.value

    def post_process(self, value: Any, options: dict[str, Any]) -> Any:
        value = run_stage(value, options, POST_TRANSFORM_ITEM)
        return super().post_process(value, options)


class _ContainerAdapter(ShapeAdapter):
    """Shared element loop of the sequence and mapping adapters."""

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        """Whether ``value`` has this adapter's shape."""
        pass

    @abstractmethod
    def copy(self, value: Any) -> Any:
        """Return a new container that can be modified slot by slot."""
        pass

    @abstractmethod
    def slots(self, container: Any) -> Iterator[tuple[Any, Any]]:
        """Iterate ``(slot, element)`` pairs in input order."""
        pass

    def validate(
        self,
        definition: Definition,
        value: Any,
        options: dict[str, Any],
    ) -> tuple[bool, Any, Any]:
        if not self.accepts(value):
            return False, None, None

        container = self.copy(value)
        for slot, item in self.slots(container):
            item = run_stage(item, options, PRE_TRANSFORM_ITEM)
            outcome = invoke_definition(definition, item, options)
            if not outcome.ok:
                return False, None, None

            container[slot] = outcome.value if options.get("canonize") else item
            container[slot] = run_stage(container[slot], options, POST_TRANSFORM_ITEM)

        return True, container, container


class SequenceAdapter(_ContainerAdapter):
    """Validates every element of a list or tuple; accepted values are lists."""

    shape = Shape.SEQUENCE

    def accepts(self, value: Any) -> bool:
        return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))

    def copy(self, value: Sequence[Any]) -> list[Any]:
        return list(value)

    def slots(self, container: list[Any]) -> Iterator[tuple[int, Any]]:
        return iter(list(enumerate(container)))


class MappingAdapter(_ContainerAdapter):
    """Validates every value of a mapping; accepted values are dicts."""

    shape = Shape.MAPPING

    def accepts(self, value: Any) -> bool:
        return isinstance(value, Mapping)

    def copy(self, value: Mapping[Any, Any]) -> dict[Any, Any]:
        return dict(value)

    def slots(self, container: dict[Any, Any]) -> Iterator[tuple[Any, Any]]:
        return iter(list(container.items()))


_ADAPTERS: dict[Shape, ShapeAdapter] = {
    Shape.SCALAR: ScalarAdapter(),
    Shape.SEQUENCE: SequenceAdapter(),
    Shape.MAPPING: MappingAdapter(),
}


def adapter_for(shape: Shape) -> ShapeAdapter:
    """Return the adapter instance for a shape."""
    return _ADAPTERS[shape]
