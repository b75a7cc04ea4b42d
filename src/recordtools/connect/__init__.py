"""
Minimal record model the transforms run against: schemas, structs,
headers, records and option declarations.
"""
from .data import (
    Type,
    Field,
    Schema,
    SchemaBuilder,
    Struct,
    require_map,
    require_struct,
)
from .headers import Header, Headers
from .record import ConnectRecord
from .config import ConfigDef, ConfigType, Importance, SimpleConfig

__all__ = [
    "Type",
    "Field",
    "Schema",
    "SchemaBuilder",
    "Struct",
    "require_map",
    "require_struct",
    "Header",
    "Headers",
    "ConnectRecord",
    "ConfigDef",
    "ConfigType",
    "Importance",
    "SimpleConfig",
]
