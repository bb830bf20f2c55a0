"""Factory for creating validators from configuration."""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import Any

from dataknobs_config import FactoryBase

from .exceptions import ConfigurationError
from .validator import Validator

logger = logging.getLogger(__name__)


class ValidatorFactory(FactoryBase):
    """Factory for creating Validator instances from configuration.

    Configuration Options:
        options (dict): Instance default options
        validators (dict): Validator name -> definition (a callable or a
            dotted import path such as ``"myapp.checks.is_even"``)
        aliases (list): Alias definitions, each with ``alias``,
            ``validator`` and optional ``options``
        schemas (dict): Schema name -> ``{fields, options}``
        registry (ValidatorRegistry): Root registry to use instead of the
            shared one

    Validators, aliases and schemas are registered on the created instance
    only, in that order, so aliases may point at configured validators and
    schemas may bind either.

    Example Configuration:
        ```python
        {
            "options": {"stop_after_first_error": True},
            "validators": {"even": "myapp.checks.is_even"},
            "aliases": [
                {"alias": "shortStr", "validator": "str", "options": {"max_length": 15}},
            ],
            "schemas": {
                "user": {
                    "fields": {
                        "id": "positiveInt",
                        "name": {"validator": "shortStr", "options": {"truncate": True}},
                    },
                },
            },
        }
        ```
    """

    def create(self, **config: Any) -> Validator:
        """Create a Validator from configuration.

        Args:
            **config: Validator configuration
            validator_class: Validator subclass to instantiate (default Validator)

        Returns:
            Configured Validator

        Raises:
            ConfigurationError: If a dotted path cannot be imported or a
                registration is rejected
        """
        validator_class = config.get("validator_class") or Validator
        options = dict(config.get("options") or {})

        validator = validator_class(options=options, registry=config.get("registry"))

        validators = config.get("validators") or {}
        for name, definition in validators.items():
            if isinstance(definition, str):
                definition = self._load_callable(definition)
            validator.add_validator(name, definition)

        for alias_config in config.get("aliases") or []:
            alias = alias_config.get("alias")
            target = alias_config.get("validator")
            if not alias or not target:
                logger.warning(f"Alias configuration missing 'alias' or 'validator', skipping: {alias_config}")
                continue
            validator.add_alias(alias, target, alias_config.get("options"))

        schemas = config.get("schemas") or {}
        for name, schema_config in schemas.items():
            if not isinstance(schema_config, Mapping) or "fields" not in schema_config:
                logger.warning(f"Schema configuration '{name}' missing 'fields', skipping")
                continue
            validator.add_schema(name, schema_config["fields"], schema_config.get("options"))

        logger.info(
            f"Created {validator_class.__name__} with {len(validators)} validators, "
            f"{len(config.get('aliases') or [])} aliases and {len(schemas)} schemas"
        )
        return validator

    def _load_callable(self, path: str) -> Any:
        """Load a callable from a dotted module path.

        Args:
            path: Full path to the callable (e.g., "mymodule.is_even")

        Returns:
            The imported callable

        Raises:
            ConfigurationError: If the path cannot be imported or is not callable
        """
        try:
            module_path, attr_name = path.rsplit(".", 1)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid validator path: {path}",
                context={"path": path},
            ) from e

        try:
            module = importlib.import_module(module_path)
            loaded = getattr(module, attr_name)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                f"Failed to load validator {path}: {e}",
                context={"path": path},
            ) from e

        if not callable(loaded):
            raise ConfigurationError(
                f"Validator {path} is not callable",
                context={"path": path, "type": type(loaded).__name__},
            )
        return loaded


# Create singleton instance for registration
validator_factory = ValidatorFactory()
