from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from recordtools.errors import DataError


class Type(str, Enum):
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float"
    FLOAT64 = "double"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTES = "bytes"
    ARRAY = "array"
    MAP = "map"
    STRUCT = "struct"

    @property
    def is_primitive(self) -> bool:
        return self not in (Type.ARRAY, Type.MAP, Type.STRUCT)


_PY_TYPES = {
    Type.INT8: (int,),
    Type.INT16: (int,),
    Type.INT32: (int,),
    Type.INT64: (int,),
    Type.FLOAT32: (float, int),
    Type.FLOAT64: (float, int),
    Type.BOOLEAN: (bool,),
    Type.STRING: (str,),
    Type.BYTES: (bytes, bytearray),
}

_INT_RANGES = {
    Type.INT8: 8,
    Type.INT16: 16,
    Type.INT32: 32,
    Type.INT64: 64,
}


@dataclass(frozen=True)
class Field:
    name: str
    index: int
    schema: "Schema"


@dataclass(frozen=True)
class Schema:
    """
    Declared structural type of a key or value.

    STRUCT schemas carry `fields`; ARRAY schemas carry `value_schema`
    (the element schema); MAP schemas carry `key_schema` and `value_schema`.
    """

    type: Type
    optional: bool = False
    name: Optional[str] = None
    doc: Optional[str] = None
    version: Optional[int] = None
    fields: Tuple[Field, ...] = ()
    key_schema: Optional["Schema"] = None
    value_schema: Optional["Schema"] = None

    def field(self, name: str) -> Optional[Field]:
        if self.type is not Type.STRUCT:
            raise DataError(f"Cannot look up field '{name}' on a {self.type.value} schema")
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_names(self):
        return [f.name for f in self.fields]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class SchemaBuilder:
    """Fluent construction of Schema values."""

    def __init__(self, type: Type) -> None:
        self._type = Type(type)
        self._optional = False
        self._name: Optional[str] = None
        self._doc: Optional[str] = None
        self._version: Optional[int] = None
        self._fields: Dict[str, Schema] = {}
        self._key_schema: Optional[Schema] = None
        self._value_schema: Optional[Schema] = None

    # -- entry points --------------------------------------------------
    @classmethod
    def struct(cls) -> "SchemaBuilder":
        return cls(Type.STRUCT)

    @classmethod
    def array(cls, value_schema: Schema) -> "SchemaBuilder":
        b = cls(Type.ARRAY)
        b._value_schema = value_schema
        return b

    @classmethod
    def map(cls, key_schema: Schema, value_schema: Schema) -> "SchemaBuilder":
        b = cls(Type.MAP)
        b._key_schema = key_schema
        b._value_schema = value_schema
        return b

    @classmethod
    def string(cls) -> "SchemaBuilder":
        return cls(Type.STRING)

    # -- modifiers -----------------------------------------------------
    def optional(self) -> "SchemaBuilder":
        self._optional = True
        return self

    def name(self, name: str) -> "SchemaBuilder":
        self._name = name
        return self

    def doc(self, doc: str) -> "SchemaBuilder":
        self._doc = doc
        return self

    def version(self, version: int) -> "SchemaBuilder":
        self._version = version
        return self

    def field(self, name: str, schema: Schema) -> "SchemaBuilder":
        if self._type is not Type.STRUCT:
            raise DataError("Cannot add fields to a non-struct schema")
        if not name:
            raise DataError("Field name must be non-empty")
        if name in self._fields:
            raise DataError(f"Cannot create field because of field name duplication: {name}")
        self._fields[name] = schema
        return self

    def build(self) -> Schema:
        fields = tuple(
            Field(name=n, index=i, schema=s) for i, (n, s) in enumerate(self._fields.items())
        )
        return Schema(
            type=self._type,
            optional=self._optional,
            name=self._name,
            doc=self._doc,
            version=self._version,
            fields=fields,
            key_schema=self._key_schema,
            value_schema=self._value_schema,
        )


INT8_SCHEMA = Schema(Type.INT8)
INT32_SCHEMA = Schema(Type.INT32)
INT64_SCHEMA = Schema(Type.INT64)
FLOAT64_SCHEMA = Schema(Type.FLOAT64)
STRING_SCHEMA = Schema(Type.STRING)
BYTES_SCHEMA = Schema(Type.BYTES)

OPTIONAL_BOOLEAN_SCHEMA = Schema(Type.BOOLEAN, optional=True)
OPTIONAL_STRING_SCHEMA = Schema(Type.STRING, optional=True)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_value(schema: Schema, value: Any, where: str = "value") -> None:
    """Raise DataError if `value` does not conform to `schema`."""
    if value is None:
        if not schema.optional:
            raise DataError(f"Invalid value: null used for required {where}")
        return

    if schema.type.is_primitive:
        expected = _PY_TYPES[schema.type]
        # bool is an int subclass; keep the two apart
        if isinstance(value, bool) and schema.type is not Type.BOOLEAN:
            raise DataError(f"Invalid primitive for {where}: bool used as {schema.type.value}")
        if not isinstance(value, expected):
            raise DataError(
                f"Invalid value for {where}: expected {schema.type.value}, found {type(value).__name__}"
            )
        bits = _INT_RANGES.get(schema.type)
        if bits is not None and not (-(2 ** (bits - 1)) <= value < 2 ** (bits - 1)):
            raise DataError(f"Value {value} out of range for {schema.type.value} {where}")
        return

    if schema.type is Type.STRUCT:
        if not isinstance(value, Struct):
            raise DataError(f"Invalid value for {where}: expected Struct, found {type(value).__name__}")
        if value.schema != schema:
            raise DataError(f"Struct schemas do not match for {where}")
        value.validate()
        return

    if schema.type is Type.ARRAY:
        if not isinstance(value, (list, tuple)):
            raise DataError(f"Invalid value for {where}: expected array, found {type(value).__name__}")
        for i, item in enumerate(value):
            validate_value(schema.value_schema, item, f"{where}[{i}]")
        return

    if not isinstance(value, Mapping):
        raise DataError(f"Invalid value for {where}: expected map, found {type(value).__name__}")
    for k, v in value.items():
        validate_value(schema.key_schema, k, f"{where} key")
        validate_value(schema.value_schema, v, f"{where}[{k!r}]")


# ---------------------------------------------------------------------------
# Struct
# ---------------------------------------------------------------------------

class Struct:
    """A value bound to a STRUCT schema."""

    def __init__(self, schema: Schema) -> None:
        if schema.type is not Type.STRUCT:
            raise DataError(f"Not a struct schema: {schema.type.value}")
        self.schema = schema
        self._values: Dict[str, Any] = {}

    def _lookup(self, name: str) -> Field:
        f = self.schema.field(name)
        if f is None:
            raise DataError(f"{name} is not a valid field name")
        return f

    def put(self, name: str, value: Any) -> "Struct":
        f = self._lookup(name)
        validate_value(f.schema, value, f"field '{name}'")
        self._values[name] = value
        return self

    def get(self, name: str) -> Any:
        self._lookup(name)
        return self._values.get(name)

    def validate(self) -> None:
        for f in self.schema.fields:
            validate_value(f.schema, self._values.get(f.name), f"field '{f.name}'")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return self.schema == other.schema and self._values == other._values

    def __repr__(self) -> str:
        inner = ", ".join(f"{f.name}={self._values.get(f.name)!r}" for f in self.schema.fields)
        return f"Struct{{{inner}}}"


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------

def require_map(value: Any, purpose: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise DataError(
            f"Only Map objects supported in absence of schema for [{purpose}], "
            f"found: {_type_name(value)}"
        )
    return value


def require_struct(value: Any, purpose: str) -> Struct:
    if not isinstance(value, Struct):
        raise DataError(
            f"Only Struct objects supported for [{purpose}], found: {_type_name(value)}"
        )
    return value


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__
