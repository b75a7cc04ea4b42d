from __future__ import annotations

from typing import Any, Dict

from recordtools.connect.data import Schema, Struct, Type, require_struct


def _convert(schema: Schema, value: Any) -> Any:
    if value is None:
        return None
    if schema.type is Type.STRUCT:
        return to_nested_value(value)
    if schema.type is Type.ARRAY:
        return [_convert(schema.value_schema, v) for v in value]
    if schema.type is Type.MAP:
        return {k: _convert(schema.value_schema, v) for k, v in value.items()}
    if schema.type is Type.BYTES:
        return bytes(value)
    return value


def to_nested_value(struct: Struct) -> Dict[str, Any]:
    """
    Convert a schema-bound Struct into plain dicts / lists / scalars.

    Fields are visited in schema order, so the resulting dict keeps the
    declared field order. The struct is not modified.
    """
    struct = require_struct(struct, "convert a struct to a nested value")
    return {f.name: _convert(f.schema, struct.get(f.name)) for f in struct.schema.fields}
