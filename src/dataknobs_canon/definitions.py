"""Built-in validator definitions.

Each definition is a plain ``(value, options) -> ValidationOutcome`` function
registered in the shared registry under its key in ``DEFINITIONS``. The
options a definition reads, on top of the universal ones, are listed in its
docstring.

Comparisons never rely on implicit coercion. Where a loose (non-strict) mode
exists, the coercion it applies is spelled out below.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from numbers import Number
from typing import Any

from .exceptions import ConfigurationError
from .outcome import ValidationOutcome


def validate_defined(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Check that the value exists, even if it is 0, "" or False."""
    return ValidationOutcome(value=value, ok=value is not None)


def validate_bool(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Generic boolean validator.

    With ``strict`` only ``True`` and ``False`` validate. Otherwise every
    value validates and is canonized as follows:

    ========================  ==========================
    input                     canonical value
    ========================  ==========================
    ``"false"``, ``"0"``      ``False``
    any other ``str``         ``bool(value)``
    NaN                       ``False``
    anything else             ``bool(value)``
    ========================  ==========================
    """
    if options.get("strict"):
        return ValidationOutcome(value=value, ok=isinstance(value, bool))

    if isinstance(value, str):
        return ValidationOutcome.success(False if value in ("false", "0") else bool(value))
    if isinstance(value, float) and math.isnan(value):
        return ValidationOutcome.success(False)
    return ValidationOutcome.success(bool(value))


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, Number)
        and not isinstance(value, bool)
        and not (isinstance(value, float) and math.isnan(value))
    )


def _parse_number(text: str) -> int | float | None:
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def validate_num(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Generic number validator.

    ``min``/``max`` clamp the value while ``range_min``/``range_max`` only
    validate it; clamping is applied first.

    With ``strict`` only ``int`` and ``float`` (not ``bool``, not NaN)
    validate. Otherwise numeric strings are accepted too: they are stripped
    and parsed as ``int``, then as a finite ``float``.

    Options:
        integer: truncate the value toward zero
        min: clamp values below this
        max: clamp values above this
        range_min: reject values below this (or equal, unless ``min_eq``)
        range_max: reject values above this (or equal, unless ``max_eq``)
        min_eq: make the ``range_min`` comparison inclusive
        max_eq: make the ``range_max`` comparison inclusive
        pattern: regular expression that must be found in ``str(value)``
    """
    if _is_number(value):
        number = value
    elif not options.get("strict") and isinstance(value, str):
        number = _parse_number(value)
        if number is None:
            return ValidationOutcome.failure(value)
    else:
        return ValidationOutcome.failure(value)

    if options.get("integer"):
        number = int(number)

    if options.get("min") is not None:
        number = max(options["min"], number)
    if options.get("max") is not None:
        number = min(number, options["max"])

    ok = True
    if options.get("range_min") is not None:
        ok = number >= options["range_min"] if options.get("min_eq") else number > options["range_min"]
    if ok and options.get("range_max") is not None:
        ok = number <= options["range_max"] if options.get("max_eq") else number < options["range_max"]

    if ok and options.get("pattern"):
        ok = re.search(options["pattern"], str(value)) is not None

    return ValidationOutcome(value=number, ok=ok)


def validate_str(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Generic string validator.

    With ``strict`` only ``str`` values validate; otherwise the value is
    converted with ``str()``.

    Options:
        min_length: reject strings shorter than this
        max_length: reject strings longer than this, unless ``truncate``
        truncate: cut strings longer than ``max_length`` instead of rejecting
        append: text appended to a truncated string
        pattern: regular expression that must be found in the string,
            checked after truncation and before case conversion
        lower_case: convert the string to lower case
        upper_case: convert the string to upper case
    """
    text = str(value)
    ok = not options.get("strict") or isinstance(value, str)

    min_length = options.get("min_length")
    if min_length and len(text) < min_length:
        ok = False

    max_length = options.get("max_length")
    if ok and max_length and len(text) > max_length:
        if options.get("truncate"):
            text = text[:max_length] + (options.get("append") or "")
        else:
            ok = False

    if ok and options.get("pattern"):
        ok = re.search(options["pattern"], text) is not None

    if options.get("lower_case"):
        text = text.lower()
    elif options.get("upper_case"):
        text = text.upper()

    return ValidationOutcome(value=text, ok=ok)


def validate_fn(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Check that the value is callable."""
    return ValidationOutcome(value=value, ok=callable(value))


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, Number):
        return "number"
    if isinstance(value, str):
        return "str"
    return type(value).__name__


def _matches(value: Any, candidate: Any, strict: bool) -> bool:
    """Compare an input against an enum key or value.

    Strict: equal and of the same kind (bool, number, str, other type).
    Loose: equal, or equal once both sides are converted with ``str()``.
    """
    if strict:
        return _kind(value) == _kind(candidate) and value == candidate
    return value == candidate or str(value) == str(candidate)


def _enumeration(options: dict[str, Any], name: str) -> Mapping[Any, Any]:
    enumerated = options.get("enumerated")
    if not isinstance(enumerated, Mapping):
        raise ConfigurationError(
            "options.enumerated is not a mapping",
            context={"validator": name, "type": type(enumerated).__name__},
        )
    return enumerated


def validate_enumerated(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Check that the value is one of the values of ``options["enumerated"]``.

    The canonical value is the matching enum value.
    """
    strict = bool(options.get("strict"))
    for candidate in _enumeration(options, "enumerated").values():
        if _matches(value, candidate, strict):
            return ValidationOutcome.success(candidate)
    return ValidationOutcome.failure(value)


def validate_enumerated_key(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Check that the value is one of the keys of ``options["enumerated"]``.

    The canonical value is the matching key.
    """
    strict = bool(options.get("strict"))
    for key in _enumeration(options, "enumeratedKey"):
        if _matches(value, key, strict):
            return ValidationOutcome.success(key)
    return ValidationOutcome.failure(value)


def validate_enumerated_key_value(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Check that the value is a key of ``options["enumerated"]``.

    The canonical value is the value associated with the matching key.
    """
    strict = bool(options.get("strict"))
    enumerated = _enumeration(options, "enumeratedKeyValue")
    for key, associated in enumerated.items():
        if _matches(value, key, strict):
            return ValidationOutcome.success(associated)
    return ValidationOutcome.failure(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def validate_json(value: Any, options: dict[str, Any]) -> ValidationOutcome:
    """Parse a JSON document and canonize it to the parsed data.

    ``NaN`` and ``Infinity`` literals are not valid JSON and are rejected.
    """
    if not isinstance(value, (str, bytes, bytearray)):
        return ValidationOutcome.failure(value)
    try:
        return ValidationOutcome.success(json.loads(value, parse_constant=_reject_constant))
    except ValueError:
        return ValidationOutcome.failure(value)


#: Validators registered in the shared registry at import time.
DEFINITIONS = {
    "defined": validate_defined,
    "bool": validate_bool,
    "num": validate_num,
    "str": validate_str,
    "fn": validate_fn,
    "enumerated": validate_enumerated,
    "enumeratedKey": validate_enumerated_key,
    "enumeratedKeyValue": validate_enumerated_key_value,
    "json": validate_json,
}
