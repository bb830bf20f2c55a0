"""Transform pipeline applied around validator definitions.

A transform is any ``value -> value`` callable. An option holding a
transform may also hold an ordered list of them, applied in sequence.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .exceptions import InvalidDefinitionError, TransformError

Transform = Callable[[Any], Any]


def apply_transform(
    value: Any,
    transform: Transform | list[Transform] | tuple[Transform, ...] | None,
    stage: str | None = None,
) -> Any:
    """Apply a transformation or a list of them to a value.

    Args:
        value: Value to transform
        transform: A callable, an ordered list/tuple of callables, or None
        stage: Name of the pipeline stage, for error reporting

    Returns:
        Transformed value (the value itself if ``transform`` is None)

    Raises:
        InvalidDefinitionError: If ``transform`` is neither callable nor a
            list of callables
        TransformError: If any transform raises
    """
    if transform is None:
        return value

    if isinstance(transform, (list, tuple)):
        transforms = transform
    elif callable(transform):
        transforms = (transform,)
    else:
        raise InvalidDefinitionError(
            f"Transform for stage '{stage}' must be callable or a list of callables",
            context={"stage": stage, "type": type(transform).__name__},
        )

    for fn in transforms:
        if not callable(fn):
            raise InvalidDefinitionError(
                f"Transform for stage '{stage}' contains a non-callable item",
                context={"stage": stage, "type": type(fn).__name__},
            )
        try:
            value = fn(value)
        except Exception as e:
            raise TransformError(
                f"Transform {getattr(fn, '__name__', fn)!r} failed in stage '{stage}': {e}",
                stage=stage,
            ) from e

    return value


def run_stage(value: Any, options: Mapping[str, Any], stage: str) -> Any:
    """Apply the transform configured in ``options`` for one stage."""
    return apply_transform(value, options.get(stage), stage)
