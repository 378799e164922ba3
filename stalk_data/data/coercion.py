"""
Value coercion for untyped document fields.

Store documents were written by several providers over time, so numbers may
arrive as numbers or numeric strings and a single quantity may live under
different field names. These helpers turn such fields into finite floats and
reconcile field-name variants in a fixed priority order, so every consumer
gets identical fallback behavior.
"""

import math
from typing import Any, Mapping, Optional, Sequence

from ..errors import InvalidDataError


def to_finite_number(value: Any, label: Optional[str] = None) -> float:
    """
    Coerce a number or numeric string into a finite float.

    Args:
        value: Raw field value
        label: Field name used in the error message

    Returns:
        The value as a finite float (never clamped)

    Raises:
        InvalidDataError: if the value is missing, non-numeric, NaN or infinite
    """
    entity = label or "number"

    if isinstance(value, bool) or value is None:
        raise InvalidDataError(entity, f"expected a number, got {value!r}", raw_value=value)

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise InvalidDataError(entity, "not finite: integer exceeds float range", raw_value=value) from None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidDataError(entity, "empty string", raw_value=value)
        try:
            number = float(text)
        except ValueError:
            raise InvalidDataError(entity, f"not numeric: {value!r}", raw_value=value) from None
    else:
        raise InvalidDataError(entity, f"unsupported type {type(value).__name__}", raw_value=value)

    if not math.isfinite(number):
        raise InvalidDataError(entity, f"not finite: {value!r}", raw_value=value)

    return number


def optional_finite_number(value: Any) -> Optional[float]:
    """Like to_finite_number, but returns None instead of raising."""
    try:
        return to_finite_number(value)
    except InvalidDataError:
        return None


def first_present_numeric(record: Mapping[str, Any], keys: Sequence[str],
                          label: Optional[str] = None) -> float:
    """
    Return the first field, in priority order, that coerces to a finite number.

    Args:
        record: Raw document payload
        keys: Field name variants, highest priority first
        label: Entity name used in the error message

    Returns:
        The first finite value found

    Raises:
        InvalidDataError: if no key holds a finite number
    """
    for key in keys:
        number = optional_finite_number(record.get(key))
        if number is not None:
            return number

    raise InvalidDataError(
        label or "number",
        f"no finite value under any of {', '.join(keys)}",
        context={"keys_tried": list(keys)},
    )


def first_optional_numeric(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[float]:
    """Priority-ordered lookup that returns None when no key is usable."""
    for key in keys:
        number = optional_finite_number(record.get(key))
        if number is not None:
            return number
    return None
