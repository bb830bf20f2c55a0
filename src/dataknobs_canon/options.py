"""Option layering for validation calls.

Options reach a validator definition through four layers, later layers
winning key by key:

1. engine defaults (``DEFAULT_OPTIONS``, copied into every shared registry)
2. registry defaults (the live ``default_options`` dict of the shared scope)
3. instance defaults (the ``options`` a Validator was created with)
4. call-site overrides

Layers 1 and 2 are the same dict at call time: it is read on every call, so
changing it affects validators, aliases and schemas registered earlier.
That live dict is ``Validator.default_options``. ``DEFAULT_OPTIONS`` is only
the template a registry copies when it is created; changing it later has no
effect on existing registries.

``None`` means "absent" in every layer: a ``None`` value never overrides a
value from an earlier layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

#: Engine defaults for every recognized universal option. Template only:
#: change ``Validator.default_options`` to affect validation calls.
DEFAULT_OPTIONS: dict[str, Any] = {
    # stricter type acceptance in validator definitions
    "strict": False,
    # store the canonized value instead of the input
    "canonize": True,
    # valid() returns None while any rejection exists
    "return_null_on_errors": True,
    # once a rejection is stored, later calls are no-ops
    "stop_after_first_error": False,
    # a None input validates without calling the definition
    "optional": False,
    # value stored for an optional None input
    "default_value": None,
    # registering an existing name replaces it instead of raising
    "allow_overwrite_validator": False,
    # accepted values that resolve to None are still stored
    "return_none": True,
    "pre_transform": None,
    "pre_transform_item": None,
    "post_transform_item": None,
    "post_transform": None,
}

PRE_TRANSFORM = "pre_transform"
PRE_TRANSFORM_ITEM = "pre_transform_item"
POST_TRANSFORM_ITEM = "post_transform_item"
POST_TRANSFORM = "post_transform"

#: Transform stages in the order the pipeline applies them.
TRANSFORM_OPTIONS = (PRE_TRANSFORM, PRE_TRANSFORM_ITEM, POST_TRANSFORM_ITEM, POST_TRANSFORM)


def overlay(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Shallow-merge option layers from left to right into a new dict.

    Args:
        *layers: Option mappings, lowest precedence first. ``None`` layers
            are skipped.

    Returns:
        New dictionary; none of the layers is modified
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is not None:
                merged[key] = value
    return merged


def resolve_options(
    engine_defaults: Mapping[str, Any] | None,
    instance_defaults: Mapping[str, Any] | None = None,
    call_options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve the options for one validation call.

    Args:
        engine_defaults: Process-wide defaults, read at call time
        instance_defaults: Options of the calling Validator
        call_options: Call-site overrides

    Returns:
        Fresh resolved option dict
    """
    return overlay(engine_defaults, instance_defaults, call_options)
