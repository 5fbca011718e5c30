"""Field value coercion — cast loosely-typed values to declared Typesense field types.

Indexing pipelines hand over whatever the source produced: strings from
forms, single-item lists from multi-value fields, ``None`` for blanks.
Typesense rejects documents whose values do not match the collection
schema, so values are cast before upsert.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from typebridge.exceptions import TypesenseError

Scalar = bool | float | int | str


class FieldType(str, Enum):
    """Field-type tags declared on schema fields."""

    BOOL = "typesense_bool"
    FLOAT = "typesense_float"
    INT32 = "typesense_int32"
    INT64 = "typesense_int64"
    STRING = "typesense_string"


_FALSE_STRINGS = frozenset({"", "0", "false"})


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip() or 0
    return float(value)


def _to_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            # "3.7" and "1e3" are valid numerics that int() refuses.
            return int(float(text))
    return int(value)


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


_CASTS = {
    FieldType.BOOL: _to_bool,
    FieldType.FLOAT: _to_float,
    FieldType.INT32: _to_int,
    FieldType.INT64: _to_int,
    FieldType.STRING: _to_str,
}


def _cast(value: Any, field_type: FieldType) -> Scalar:
    try:
        return _CASTS[field_type](value)
    except (TypeError, ValueError, OverflowError) as e:
        raise TypesenseError(f"Cannot cast {value!r} to {field_type.value}: {e}") from e


def _field_type(type_tag: str) -> FieldType | None:
    try:
        return FieldType(type_tag)
    except ValueError:
        return None


def prepare_item_value(value: Any, type_tag: str) -> Any:
    """Cast a raw value to the scalar type named by ``type_tag``.

    A list or tuple of at most one element is unwrapped first (an empty one
    becomes ``None``). Longer sequences are returned untouched; use
    :func:`prepare_item_values` for multi-valued fields. Unknown type tags
    pass the value through.

    Args:
        value: Raw scalar, or a sequence holding a single scalar.
        type_tag: One of the :class:`FieldType` values.

    Returns:
        The coerced scalar.

    Raises:
        TypesenseError: If the value cannot be cast to the declared type.

    Example::

        prepare_item_value(["42"], "typesense_int32")   # 42
        prepare_item_value("true", "typesense_bool")    # True
        prepare_item_value(3.14, "typesense_string")    # "3.14"
    """
    if isinstance(value, (list, tuple)):
        if len(value) > 1:
            return value
        value = value[0] if value else None

    field_type = _field_type(type_tag)
    if field_type is None:
        return value
    return _cast(value, field_type)


def prepare_item_values(values: Any, type_tag: str) -> list[Any]:
    """Cast every element of a multi-valued field.

    ``type_tag`` may carry the ``[]`` array suffix (``typesense_int32[]``).
    A scalar is treated as a one-element list; ``None`` yields ``[]``.
    """
    if values is None:
        return []
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        values = [values]

    field_type = _field_type(type_tag.removesuffix("[]"))
    if field_type is None:
        return list(values)
    return [_cast(v, field_type) for v in values]
