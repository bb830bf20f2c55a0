"""Validator facade, schema runner and shared registry bootstrap.

A ``Validator`` accumulates accepted and rejected field values across many
calls. Every entry point visible from its registry is exposed as a method:

```python
from dataknobs_canon import Validator

v = Validator()
v.num("age", "42").str("name", "  Ada ", pre_transform=str.strip)
v.numArray("scores", [1, "2", 3.5])
v.valid()
# {'age': 42, 'name': 'Ada', 'scores': [1, 2, 3.5]}

v.notEmptyStr("nickname", "")
v.valid()
# None
v.errors()
# {'nickname': ''}
```

Registrations made through the classmethods (``register_validator``,
``register_alias``, ``register_schema``) land in the shared registry and are
visible to every Validator. Registrations made through an instance
(``add_validator``, ``add_alias``, ``add_schema``) are visible to that
instance only and shadow shared names of the same name.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, List

from .aliases import BUILTIN_ALIASES
from .definitions import DEFINITIONS
from .exceptions import InvalidRecordError, NotRegisteredError
from .options import DEFAULT_OPTIONS, overlay, resolve_options
from .registry import ValidatorRegistry
from .shapes import Definition, Shape, adapter_for
from .store import ResultStore

if TYPE_CHECKING:
    from .registry import SchemaDefinition

logger = logging.getLogger(__name__)


class Validator:
    """Facade over the validation pipeline for one set of field results.

    Args:
        options: Instance default options, overriding the shared defaults.
            A ``validators`` entry (name -> definition) is registered as
            instance-local validators.
        registry: Root registry to use instead of ``Validator.shared_registry``

    Attributes:
        options: Copy of the instance options (without ``validators``)
    """

    shared_registry: ValidatorRegistry
    default_options: Dict[str, Any]

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        registry: ValidatorRegistry | None = None,
    ):
        options = dict(options or {})
        validators = options.pop("validators", None) or {}

        self.options: Dict[str, Any] = options
        self._store = ResultStore()
        self._local = ValidatorRegistry(
            f"{type(self).__name__}@{id(self):x}",
            parent=registry if registry is not None else type(self).shared_registry,
        )

        for name, definition in validators.items():
            self.add_validator(name, definition)

    # -- validation ---------------------------------------------------------

    def call(
        self,
        name: str,
        key: str,
        value: Any,
        options: Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Validator:
        """Validate ``value`` with the entry point ``name`` and record it under ``key``.

        Args:
            name: Entry point name, e.g. ``num``, ``strArray``, ``positiveIntObject``
            key: Field name in the result store
            value: Raw input
            options: Call-site options
            **overrides: More call-site options, winning over ``options``

        Returns:
            self, for chaining

        Raises:
            NotRegisteredError: If ``name`` is not visible from this instance
        """
        entry = self._local.lookup(name)
        if entry is None:
            raise NotRegisteredError(
                f"The validator '{name}' is undefined",
                context={"name": name, "available": self._local.validator_names()},
            )
        entry.invoke(self, key, value, overlay(options, overrides))
        return self

    def run_definition(
        self,
        shape: Shape,
        definition: Definition,
        key: str,
        value: Any,
        call_options: Mapping[str, Any] | None = None,
    ) -> None:
        """Resolve options for one call and drive the shape adapter."""
        options = resolve_options(self._local.default_options, self.options, call_options)

        if options.get("stop_after_first_error") and self._store.has_errors:
            logger.debug(f"Skipping field '{key}', a rejection is already recorded")
            return

        adapter_for(shape).run(self._store, definition, key, value, options)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        local = self.__dict__.get("_local")
        if local is None or not local.has(name):
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute or validator '{name}'"
            )

        def entry_point(key: str, value: Any, options: Mapping[str, Any] | None = None, **overrides: Any) -> Validator:
            return self.call(name, key, value, options, **overrides)

        entry_point.__name__ = name
        return entry_point

    def schema(self, name: str, data: Mapping[str, Any] | None) -> Validator:
        """Validate a record against a registered schema.

        The result store is reset first. Each schema field is validated in
        definition order with the value found under the same key in
        ``data`` (None when missing). Keys of ``data`` without a schema field
        are ignored.

        Raises:
            NotRegisteredError: If the schema is unknown
            InvalidRecordError: If ``data`` is not a mapping
        """
        definition = self._local.lookup_schema(name)
        if definition is None:
            raise NotRegisteredError(
                f"The schema '{name}' is undefined",
                context={"name": name, "available": self._local.schema_names()},
            )
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise InvalidRecordError(
                f"Schema '{name}' expects a mapping",
                context={"schema": name, "type": type(data).__name__},
            )

        self.reset()
        self._run_schema(definition, data)
        return self

    def _run_schema(self, definition: SchemaDefinition, data: Mapping[str, Any]) -> None:
        for field_name, binding in definition.fields.items():
            self.call(binding.validator, field_name, data.get(field_name), binding.options)

    # -- results ------------------------------------------------------------

    def valid(self, base: Mapping[str, Any] | None = None) -> Dict[str, Any] | None:
        """Get the accepted values.

        Args:
            base: Record the accepted values are overlaid onto (copied)

        Returns:
            Copy of the accepted values, or None while a rejection exists and
            ``return_null_on_errors`` is set

        Raises:
            InvalidRecordError: If ``base`` is not a mapping
        """
        if base is not None and not isinstance(base, Mapping):
            raise InvalidRecordError(
                "valid() expects a mapping as base",
                context={"type": type(base).__name__},
            )

        options = resolve_options(self._local.default_options, self.options)
        if self._store.has_errors and options.get("return_null_on_errors"):
            return None

        if base is None:
            return dict(self._store.accepted)
        return {**base, **self._store.accepted}

    def errors(self) -> Dict[str, Any] | None:
        """Get the rejected values, or None if there are none."""
        if not self._store.has_errors:
            return None
        return dict(self._store.rejected)

    def reset(self) -> Validator:
        self._store.reset()
        return self

    def reset_valid(self) -> Validator:
        self._store.reset_accepted()
        return self

    def reset_errors(self) -> Validator:
        self._store.reset_rejected()
        return self

    # -- instance registrations -----------------------------------------------

    def add_validator(
        self,
        name: str,
        definition: Definition,
        allow_overwrite: bool | None = None,
    ) -> Validator:
        """Register a validator visible to this instance only."""
        self._local.add_validator(name, definition, self._allow_overwrite(allow_overwrite))
        return self

    def add_alias(
        self,
        alias: str,
        validator_name: str,
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> Validator:
        """Register an alias visible to this instance only."""
        self._local.add_alias(alias, validator_name, options, self._allow_overwrite(allow_overwrite))
        return self

    def add_schema(
        self,
        name: str,
        fields: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> Validator:
        """Register a schema visible to this instance only."""
        self._local.add_schema(name, fields, options, self._allow_overwrite(allow_overwrite))
        return self

    def _allow_overwrite(self, allow_overwrite: bool | None) -> bool:
        if allow_overwrite is not None:
            return allow_overwrite
        options = resolve_options(self._local.default_options, self.options)
        return bool(options.get("allow_overwrite_validator"))

    # -- shared registrations -------------------------------------------------

    @classmethod
    def register_validator(
        cls,
        name: str,
        definition: Definition,
        allow_overwrite: bool | None = None,
    ) -> type[Validator]:
        """Register a validator visible to every instance."""
        cls.shared_registry.add_validator(name, definition, allow_overwrite)
        return cls

    @classmethod
    def register_alias(
        cls,
        alias: str,
        validator_name: str,
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> type[Validator]:
        """Register an alias visible to every instance."""
        cls.shared_registry.add_alias(alias, validator_name, options, allow_overwrite)
        return cls

    @classmethod
    def register_schema(
        cls,
        name: str,
        fields: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> type[Validator]:
        """Register a schema visible to every instance."""
        cls.shared_registry.add_schema(name, fields, options, allow_overwrite)
        return cls

    # -- introspection --------------------------------------------------------

    def has_validator(self, name: str) -> bool:
        return self._local.has(name)

    def validator_names(self) -> List[str]:
        return self._local.validator_names()

    def schema_names(self) -> List[str]:
        return self._local.schema_names()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Validator:
        """Create a Validator from a configuration dictionary.

        See ``ValidatorFactory`` for the recognized keys.
        """
        from .factory import validator_factory

        return validator_factory.create(validator_class=cls, **config)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(options={self.options!r}, store={self._store!r})"


def _reserved_names() -> frozenset[str]:
    names = {name for name in dir(Validator) if not name.startswith("_")}
    return frozenset(names | {"options", "shared_registry", "default_options"})


def create_shared_registry(
    name: str = "shared",
    default_options: Mapping[str, Any] | None = None,
    include_builtins: bool = True,
) -> ValidatorRegistry:
    """Create a root registry.

    Args:
        name: Registry name
        default_options: Overrides of ``DEFAULT_OPTIONS`` for this registry
        include_builtins: Register the built-in validators and aliases

    Returns:
        New root ValidatorRegistry
    """
    registry = ValidatorRegistry(
        name,
        default_options={**DEFAULT_OPTIONS, **(default_options or {})},
        reserved_names=_reserved_names(),
    )
    if include_builtins:
        for validator_name, definition in DEFINITIONS.items():
            registry.add_validator(validator_name, definition, allow_overwrite=False)
        for alias in BUILTIN_ALIASES:
            registry.add_alias(alias["alias"], alias["validator"], alias["options"], allow_overwrite=False)
    return registry


#: Process-wide registry backing ``Validator`` registrations.
SHARED_REGISTRY = create_shared_registry()

Validator.shared_registry = SHARED_REGISTRY
Validator.default_options = SHARED_REGISTRY.default_options
