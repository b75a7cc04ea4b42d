"""
JSON envelope codec for records.

One record per JSON document:

    {
      "topic": "orders",
      "partition": 0,
      "timestamp": 1700000000000,
      "key": ...,            "key_schema": {...} | null,
      "value": ...,          "value_schema": {...} | null,
      "headers": [{"key": "h1", "value": ...}, ...]
    }

Schemas use the struct/array/map descriptor form:

    {"type": "struct", "name": "Order", "optional": false,
     "fields": [{"field": "id", "type": "string"},
                {"field": "tags", "type": "array", "items": {"type": "string"}}]}
"""
from __future__ import annotations

import base64
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import jsonschema

from recordtools.errors import DataError
from .data import Schema, SchemaBuilder, Struct, Type
from .headers import Headers
from .record import ConnectRecord

SCHEMA_DESCRIPTOR = {
    "type": "object",
    "required": ["type"],
    "properties": {
        "type": {"enum": [t.value for t in Type]},
        "optional": {"type": "boolean"},
        "name": {"type": ["string", "null"]},
        "doc": {"type": ["string", "null"]},
        "version": {"type": ["integer", "null"]},
        "field": {"type": "string"},
        "fields": {"type": "array", "items": {"$ref": "#/definitions/schema"}},
        "items": {"$ref": "#/definitions/schema"},
        "keys": {"$ref": "#/definitions/schema"},
        "values": {"$ref": "#/definitions/schema"},
    },
}

RECORD_ENVELOPE = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "definitions": {"schema": SCHEMA_DESCRIPTOR},
    "type": "object",
    "required": ["value"],
    "properties": {
        "topic": {"type": ["string", "null"]},
        "partition": {"type": ["integer", "null"]},
        "timestamp": {"type": ["integer", "null"]},
        "key_schema": {"oneOf": [{"type": "null"}, {"$ref": "#/definitions/schema"}]},
        "value_schema": {"oneOf": [{"type": "null"}, {"$ref": "#/definitions/schema"}]},
        "headers": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["key"],
                "properties": {"key": {"type": "string"}},
            },
        },
    },
}


def validate_envelope(doc: Any) -> None:
    """Raise DataError when `doc` is not a record envelope."""
    try:
        jsonschema.validate(instance=doc, schema=RECORD_ENVELOPE)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise DataError(f"Invalid record envelope at {where}: {e.message}") from e


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

def schema_from_json(desc: Optional[Dict[str, Any]]) -> Optional[Schema]:
    if desc is None:
        return None
    typ = Type(desc["type"])

    if typ is Type.STRUCT:
        builder = SchemaBuilder.struct()
        for f in desc.get("fields", []):
            if "field" not in f:
                raise DataError(f"Struct field descriptor without 'field' name: {f}")
            builder.field(f["field"], schema_from_json(f))
    elif typ is Type.ARRAY:
        if "items" not in desc:
            raise DataError("Array schema requires 'items'")
        builder = SchemaBuilder.array(schema_from_json(desc["items"]))
    elif typ is Type.MAP:
        if "keys" not in desc or "values" not in desc:
            raise DataError("Map schema requires 'keys' and 'values'")
        builder = SchemaBuilder.map(schema_from_json(desc["keys"]), schema_from_json(desc["values"]))
    else:
        builder = SchemaBuilder(typ)

    if desc.get("optional"):
        builder.optional()
    if desc.get("name"):
        builder.name(desc["name"])
    if desc.get("doc"):
        builder.doc(desc["doc"])
    if desc.get("version") is not None:
        builder.version(desc["version"])
    return builder.build()


def schema_to_json(schema: Optional[Schema]) -> Optional[Dict[str, Any]]:
    if schema is None:
        return None
    out: Dict[str, Any] = {"type": schema.type.value, "optional": schema.optional}
    if schema.type is Type.STRUCT:
        fields = []
        for f in schema.fields:
            fd = {"field": f.name}
            fd.update(schema_to_json(f.schema))
            fields.append(fd)
        out["fields"] = fields
    elif schema.type is Type.ARRAY:
        out["items"] = schema_to_json(schema.value_schema)
    elif schema.type is Type.MAP:
        out["keys"] = schema_to_json(schema.key_schema)
        out["values"] = schema_to_json(schema.value_schema)
    if schema.name:
        out["name"] = schema.name
    if schema.doc:
        out["doc"] = schema.doc
    if schema.version is not None:
        out["version"] = schema.version
    return out


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------

def _decode_bytes(payload: Any) -> Any:
    if isinstance(payload, str):
        try:
            return base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise DataError(f"Invalid base64 bytes payload: {payload!r}") from e
    return payload


def _decode_map_key(schema: Schema, key: str) -> Any:
    if schema.type in (Type.INT8, Type.INT16, Type.INT32, Type.INT64):
        try:
            return int(key)
        except ValueError as e:
            raise DataError(f"Map key {key!r} is not an integer") from e
    return key


def value_from_json(schema: Optional[Schema], payload: Any) -> Any:
    """Bind a JSON payload to `schema`; schemaless payloads pass through."""
    if schema is None or payload is None:
        return payload

    if schema.type is Type.STRUCT:
        if not isinstance(payload, Mapping):
            raise DataError(f"Struct payload must be an object, found {type(payload).__name__}")
        struct = Struct(schema)
        for f in schema.fields:
            struct.put(f.name, value_from_json(f.schema, payload.get(f.name)))
        return struct
    if schema.type is Type.ARRAY:
        if not isinstance(payload, list):
            raise DataError(f"Array payload must be a list, found {type(payload).__name__}")
        return [value_from_json(schema.value_schema, v) for v in payload]
    if schema.type is Type.MAP:
        if not isinstance(payload, Mapping):
            raise DataError(f"Map payload must be an object, found {type(payload).__name__}")
        return {
            _decode_map_key(schema.key_schema, k): value_from_json(schema.value_schema, v)
            for k, v in payload.items()
        }
    if schema.type is Type.BYTES:
        return _decode_bytes(payload)
    if schema.type in (Type.FLOAT32, Type.FLOAT64) and isinstance(payload, int) and not isinstance(payload, bool):
        return float(payload)
    return payload


def value_to_json(value: Any) -> Any:
    """Plain JSON form of a value: structs become objects, bytes become base64."""
    if isinstance(value, Struct):
        return {f.name: value_to_json(value.get(f.name)) for f in value.schema.fields}
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): value_to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [value_to_json(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

def record_from_json(doc: Dict[str, Any], default_topic: str = "records") -> ConnectRecord:
    validate_envelope(doc)
    key_schema = schema_from_json(doc.get("key_schema"))
    value_schema = schema_from_json(doc.get("value_schema"))

    headers = Headers()
    for h in doc.get("headers", []):
        headers.add(h["key"], h.get("value"))

    return ConnectRecord(
        topic=doc.get("topic") or default_topic,
        kafka_partition=doc.get("partition"),
        key_schema=key_schema,
        key=value_from_json(key_schema, doc.get("key")),
        value_schema=value_schema,
        value=value_from_json(value_schema, doc["value"]),
        timestamp=doc.get("timestamp"),
        headers=headers,
    )


def record_to_json(record: ConnectRecord) -> Dict[str, Any]:
    headers: List[Dict[str, Any]] = [
        {"key": h.key, "value": value_to_json(h.value)} for h in record.headers
    ]
    return {
        "topic": record.topic,
        "partition": record.kafka_partition,
        "timestamp": record.timestamp,
        "key_schema": schema_to_json(record.key_schema),
        "key": value_to_json(record.key),
        "value_schema": schema_to_json(record.value_schema),
        "value": value_to_json(record.value),
        "headers": headers,
    }
