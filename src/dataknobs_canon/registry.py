"""Registries for validators, aliases and schemas.

A registration scope (``ValidatorRegistry``) is built on two
``dataknobs_common`` registries, one for entry points (validators and
aliases) and one for schemas. Scopes form a two-level tree: a shared (root)
scope, owning the process-wide default options, and instance-local scopes
whose parent is the shared one. Lookups consult the local scope first, then
the parent, so an instance-local registration shadows a shared one without
touching it.

Example:
    ```python
    from dataknobs_canon.registry import ValidatorRegistry

    shared = ValidatorRegistry("shared", default_options={"canonize": True})
    shared.add_validator("even", lambda value, options: (value, value % 2 == 0))

    local = ValidatorRegistry("local", parent=shared)
    local.add_alias("evenList", "even")
    local.lookup("evenArray").definition
    # <function <lambda> ...>
    ```
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List

from dataknobs_common.registry import Registry

from .exceptions import (
    CollisionError,
    InvalidDefinitionError,
    InvalidNameError,
    NotRegisteredError,
)
from .options import overlay
from .shapes import Definition, Shape

if TYPE_CHECKING:
    from .validator import Validator

logger = logging.getLogger(__name__)


@dataclass
class EntryPoint:
    """A callable validation entry point such as ``num`` or ``numArray``.

    Validator entry points carry a ``definition``. Alias entry points carry
    the base name of their ``target``, their default options and the
    ``scope`` the target is resolved in at call time.
    """

    name: str
    shape: Shape
    definition: Definition | None = None
    target: str | None = None
    defaults: Dict[str, Any] = field(default_factory=dict)
    scope: ValidatorRegistry | None = None

    @property
    def is_alias(self) -> bool:
        return self.target is not None

    def invoke(
        self,
        validator: Validator,
        key: str,
        value: Any,
        call_options: Mapping[str, Any] | None = None,
    ) -> None:
        """Validate ``value`` for ``key`` on behalf of ``validator``.

        Alias entry points merge their defaults under the call options (the
        call site wins) into a new dict on every call, then forward to the
        target entry point of the same shape.

        Raises:
            NotRegisteredError: If an alias target no longer resolves
        """
        if self.definition is not None:
            validator.run_definition(self.shape, self.definition, key, value, call_options)
            return

        target_name = self.shape.entry_name(self.target)
        target = self.scope.lookup(target_name) if self.scope is not None else None
        if target is None:
            raise NotRegisteredError(
                f"Alias '{self.name}' points to undefined validator '{target_name}'",
                context={"alias": self.name, "target": target_name},
            )
        target.invoke(validator, key, value, overlay(self.defaults, call_options))


@dataclass
class FieldBinding:
    """Validator name and options bound to one schema field."""

    validator: str
    options: Dict[str, Any] | None = None


@dataclass
class SchemaDefinition:
    """An ordered set of field bindings validated together as one record.

    ``options`` keeps the schema-level default options given at
    registration; the schema runner does not forward them to field calls.
    """

    name: str
    fields: Dict[str, FieldBinding]
    options: Dict[str, Any] | None = None

    def field_names(self) -> List[str]:
        return list(self.fields.keys())


class ValidatorRegistry:
    """One registration scope for validators, aliases and schemas.

    Args:
        name: Scope name, used in error context and logs
        parent: Parent scope consulted when a name is not found locally
        default_options: Process-wide default options of a root scope. Child
            scopes share their parent's dict.
        reserved_names: Names that can never be registered (attributes of
            the validator facade)
    """

    def __init__(
        self,
        name: str,
        parent: ValidatorRegistry | None = None,
        default_options: Dict[str, Any] | None = None,
        reserved_names: Iterable[str] = (),
    ):
        self._name = name
        self._parent = parent
        self._entries = Registry[EntryPoint](f"{name}.validators")
        self._schemas = Registry[SchemaDefinition](f"{name}.schemas")
        self._reserved = frozenset(reserved_names) | (parent._reserved if parent else frozenset())
        if parent is not None:
            self.default_options = parent.default_options
        else:
            self.default_options = default_options if default_options is not None else {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> ValidatorRegistry | None:
        return self._parent

    def lookup(self, name: str) -> EntryPoint | None:
        """Find an entry point by name, local scope first."""
        entry = self._entries.get_optional(name)
        if entry is None and self._parent is not None:
            return self._parent.lookup(name)
        return entry

    def lookup_schema(self, name: str) -> SchemaDefinition | None:
        """Find a schema by name, local scope first."""
        schema = self._schemas.get_optional(name)
        if schema is None and self._parent is not None:
            return self._parent.lookup_schema(name)
        return schema

    def has(self, name: str) -> bool:
        """Whether an entry point is visible from this scope."""
        return self.lookup(name) is not None

    def validator_names(self) -> List[str]:
        """All entry point names visible from this scope."""
        names = self._parent.validator_names() if self._parent is not None else []
        return names + [n for n in self._entries.list_keys() if n not in names]

    def schema_names(self) -> List[str]:
        """All schema names visible from this scope."""
        names = self._parent.schema_names() if self._parent is not None else []
        return names + [n for n in self._schemas.list_keys() if n not in names]

    def add_validator(
        self,
        name: str,
        definition: Definition,
        allow_overwrite: bool | None = None,
    ) -> None:
        """Register a validator definition under three entry points.

        ``name`` validates a single value, ``nameArray`` a sequence and
        ``nameObject`` the values of a mapping. The three share the same
        definition.

        Args:
            name: Base name of the validator
            definition: ``(value, options) -> outcome`` callable
            allow_overwrite: Replace existing names instead of raising. Uses
                this scope's ``allow_overwrite_validator`` default if None.

        Raises:
            InvalidNameError: If the name is not acceptable
            InvalidDefinitionError: If the definition is not callable
            CollisionError: If a derived name exists and overwriting is off
        """
        self._check_name(name, "validator")
        if not callable(definition):
            raise InvalidDefinitionError(
                f"Validator definition for '{name}' needs to be callable",
                context={"name": name, "type": type(definition).__name__},
            )
        names = self._check_collisions(name, allow_overwrite)

        for shape, entry_name in names.items():
            self._entries.register(
                entry_name,
                EntryPoint(name=entry_name, shape=shape, definition=definition),
                allow_overwrite=True,
            )
        logger.debug(f"Registered validator '{name}' in scope '{self._name}'")

    def add_alias(
        self,
        alias: str,
        validator_name: str,
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> None:
        """Register an alias: an existing validator with preset options.

        Args:
            alias: Base name of the alias
            validator_name: Base name of the validator (or alias) to call
            options: Default options, overridden by call-site options
            allow_overwrite: Replace existing names instead of raising

        Raises:
            InvalidNameError: If the alias name is not acceptable
            NotRegisteredError: If any entry point of ``validator_name`` is
                not visible from this scope
            CollisionError: If a derived alias name exists and overwriting
                is off
        """
        self._check_name(alias, "alias")
        for shape in Shape:
            target_name = shape.entry_name(validator_name)
            if not self.has(target_name):
                raise NotRegisteredError(
                    f"The validator '{target_name}' is undefined",
                    context={"alias": alias, "target": target_name, "scope": self._name},
                )
        names = self._check_collisions(alias, allow_overwrite)

        defaults = dict(options or {})
        for shape, entry_name in names.items():
            self._entries.register(
                entry_name,
                EntryPoint(
                    name=entry_name,
                    shape=shape,
                    target=validator_name,
                    defaults=defaults,
                    scope=self,
                ),
                allow_overwrite=True,
            )
        logger.debug(f"Registered alias '{alias}' -> '{validator_name}' in scope '{self._name}'")

    def add_schema(
        self,
        name: str,
        fields: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        allow_overwrite: bool | None = None,
    ) -> None:
        """Register a schema in this scope's schema namespace.

        Each field maps to a validator name, a FieldBinding, or a mapping
        with a ``validator`` key and optional ``options``.

        Args:
            name: Schema name
            fields: Ordered mapping of field name to binding
            options: Schema-level default options (kept, not forwarded)
            allow_overwrite: Replace an existing schema instead of raising

        Raises:
            InvalidNameError: If a field binding has no usable validator name
            InvalidDefinitionError: If ``fields`` is not a mapping
            CollisionError: If the schema exists here and overwriting is off
        """
        if not isinstance(name, str) or not name:
            raise InvalidNameError(
                "The specified schema name is not valid",
                context={"name": name, "scope": self._name},
            )
        if not isinstance(fields, Mapping):
            raise InvalidDefinitionError(
                f"Schema '{name}' fields need to be a mapping",
                context={"name": name, "type": type(fields).__name__},
            )
        if not self._allow_overwrite(allow_overwrite) and self._schemas.has(name):
            raise CollisionError(
                f"The schema '{name}' is already defined",
                context={"name": name, "scope": self._name},
            )

        definition = SchemaDefinition(
            name=name,
            fields={key: self._normalize_binding(name, key, binding) for key, binding in fields.items()},
            options=dict(options) if options else None,
        )
        self._schemas.register(name, definition, allow_overwrite=True)
        logger.debug(f"Registered schema '{name}' with {len(definition.fields)} fields in scope '{self._name}'")

    def _allow_overwrite(self, allow_overwrite: bool | None) -> bool:
        if allow_overwrite is None:
            return bool(self.default_options.get("allow_overwrite_validator"))
        return allow_overwrite

    def _check_name(self, name: Any, kind: str) -> None:
        if not name or not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise InvalidNameError(
                f"The specified {kind} name is not valid: {name!r}",
                context={"name": name, "kind": kind, "scope": self._name},
            )
        if name.startswith("_"):
            raise InvalidNameError(
                f"The {kind} name '{name}' cannot start with an underscore",
                context={"name": name, "kind": kind, "scope": self._name},
            )
        for shape in Shape:
            if shape.entry_name(name) in self._reserved:
                raise InvalidNameError(
                    f"The {kind} name '{name}' clashes with a Validator attribute",
                    context={"name": name, "kind": kind, "scope": self._name},
                )

    def _check_collisions(self, name: str, allow_overwrite: bool | None) -> Dict[Shape, str]:
        names = {shape: shape.entry_name(name) for shape in Shape}
        if self._allow_overwrite(allow_overwrite):
            for entry_name in names.values():
                if self.has(entry_name):
                    logger.debug(f"Overwriting '{entry_name}' in scope '{self._name}'")
            return names

        for entry_name in names.values():
            if self.has(entry_name):
                raise CollisionError(
                    f"The method '{entry_name}' is already defined",
                    context={"name": entry_name, "scope": self._name},
                )
        return names

    def _normalize_binding(self, schema: str, key: str, binding: Any) -> FieldBinding:
        if isinstance(binding, FieldBinding):
            validator, options = binding.validator, binding.options
        elif isinstance(binding, str):
            validator, options = binding, None
        elif isinstance(binding, Mapping):
            validator, options = binding.get("validator"), binding.get("options")
        else:
            validator, options = None, None

        if not isinstance(validator, str) or not validator:
            raise InvalidNameError(
                f"Field '{key}' of schema '{schema}' has no validator name",
                context={"schema": schema, "field": key},
            )
        return FieldBinding(validator=validator, options=dict(options) if options else None)

    def __repr__(self) -> str:
        parent = self._parent.name if self._parent is not None else None
        return f"ValidatorRegistry(name={self._name!r}, parent={parent!r}, entries={self._entries.count()})"
