"""Aliases registered in the shared registry: validators with preset options."""

from __future__ import annotations

from typing import Any

BUILTIN_ALIASES: list[dict[str, Any]] = [
    # non-empty strings
    {
        "alias": "notEmptyStr",
        "validator": "str",
        "options": {"min_length": 1},
    },
    # integers > 0, e.g. ID fields
    {
        "alias": "positiveInt",
        "validator": "num",
        "options": {
            "integer": True,
            "range_min": 1,
            "min_eq": True,
        },
    },
]
