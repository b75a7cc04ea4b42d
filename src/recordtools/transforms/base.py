from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from recordtools.connect.config import ConfigDef, ConfigType, Importance, SimpleConfig
from recordtools.connect.data import (
    STRING_SCHEMA,
    Schema,
    SchemaBuilder,
    Struct,
    require_map,
    require_struct,
)
from recordtools.connect.headers import Headers
from recordtools.connect.record import ConnectRecord
from recordtools.errors import ConfigurationError, TransformStateError
from recordtools.mapping.extract import PathExtractor
from recordtools.mapping.parse import parse_mappings
from recordtools.mapping.types import FieldMapping

from .adapter import to_nested_value

log = logging.getLogger(__name__)

KEY_FIELD_MAPPING = "keyFieldMapping"
HEADER_FIELD_MAPPING = "headerFieldMapping"

SCHEMALESS_LOOKUP = "schemaless.lookup"
LOOKUP_FLAT = "flat"
LOOKUP_PATH = "path"

KEY_SCHEMA_NAME = "MAP_STRING_TO_ANY"


# ---------------------------------------------------------------------------
# Record value variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RawMapping:
    """Schemaless value: a string-keyed mapping used as-is."""
    value: Mapping[str, Any]


@dataclass(frozen=True)
class TypedStructure:
    """Schema-bound value: a Struct and its declared schema."""
    schema: Schema
    value: Struct


RecordValue = Union[RawMapping, TypedStructure]


def classify(record: ConnectRecord, purpose: str) -> RecordValue:
    if record.value_schema is None:
        return RawMapping(require_map(record.value, purpose))
    return TypedStructure(record.value_schema, require_struct(record.value, purpose))


def build_key_schema(owner: str) -> Schema:
    return (
        SchemaBuilder.map(STRING_SCHEMA, SchemaBuilder.string().optional().build())
        .doc(f"Schema generated by {owner} transform")
        .name(KEY_SCHEMA_NAME)
        .build()
    )


def common_config_def() -> ConfigDef:
    """Options shared by every nested-value transform."""
    return ConfigDef().define(
        SCHEMALESS_LOOKUP,
        ConfigType.STRING,
        LOOKUP_FLAT,
        Importance.LOW,
        "How paths are resolved against schemaless values: 'flat' reads the whole "
        "path string as one top-level key, 'path' evaluates it as a path expression.",
        choices=(LOOKUP_FLAT, LOOKUP_PATH),
    )


@dataclass(frozen=True)
class BoundMapping:
    option: str
    field_mapping: FieldMapping
    extractor: PathExtractor


# ---------------------------------------------------------------------------
# Base transform
# ---------------------------------------------------------------------------

class BaseNestedValue(ABC):
    """
    Derives record keys and/or headers from values found inside the record value.

    Subclasses declare CONFIG_DEF, PURPOSE and the mapping options they require,
    and implement one method per value variant.
    """

    CONFIG_DEF: ConfigDef
    PURPOSE: str = "derive fields from value"
    REQUIRED_MAPPINGS: Tuple[str, ...] = ()

    def __init__(self) -> None:
        self.key_schema = build_key_schema(type(self).__name__)
        self.schemaless_lookup = LOOKUP_FLAT
        self._mappings: Optional[Dict[str, BoundMapping]] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def config(self) -> ConfigDef:
        return self.CONFIG_DEF

    @property
    def configured(self) -> bool:
        return self._mappings is not None

    def configure(self, props: Mapping[str, Any]) -> None:
        if self.configured:
            raise TransformStateError(f"`{self._identity()}` is already configured")

        config = SimpleConfig(self.config(), props)
        mappings: Dict[str, BoundMapping] = {}
        for option in self.REQUIRED_MAPPINGS:
            tokens = config.get_list(option)
            if not tokens:
                raise ConfigurationError(f"`{option}` is required for `{self._identity()}`")
            field_mapping = parse_mappings(tokens, option)
            mappings[option] = BoundMapping(option, field_mapping, PathExtractor(field_mapping, option))
            log.debug("%s: %s -> %s", self._identity(), option, field_mapping.as_dict())

        self.schemaless_lookup = config.get_string(SCHEMALESS_LOOKUP)
        self._mappings = mappings

    def close(self) -> None:
        pass

    def _identity(self) -> str:
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    def mapping(self, option: str) -> BoundMapping:
        if self._mappings is None:
            raise TransformStateError(f"`{self._identity()}` used before configure()")
        return self._mappings[option]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def apply(self, record: ConnectRecord) -> ConnectRecord:
        if self._mappings is None:
            raise TransformStateError(f"`{self._identity()}` used before configure()")

        log.debug("%s: applying to record on topic %s", self._identity(), record.topic)
        match classify(record, self.PURPOSE):
            case RawMapping(value=value):
                return self.apply_schemaless(record, value)
            case TypedStructure(value=struct):
                return self.apply_with_schema(record, struct)

    @abstractmethod
    def apply_schemaless(self, record: ConnectRecord, value: Mapping[str, Any]) -> ConnectRecord:
        raise NotImplementedError()

    @abstractmethod
    def apply_with_schema(self, record: ConnectRecord, struct: Struct) -> ConnectRecord:
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Extraction helpers
    # ------------------------------------------------------------------
    def lookup_schemaless(self, option: str, value: Mapping[str, Any]) -> List[Tuple[str, Any]]:
        """(field, value) pairs in mapping order, resolved against a schemaless value."""
        bound = self.mapping(option)
        if self.schemaless_lookup == LOOKUP_PATH:
            return [(name, bound.extractor.extract_value(name, value)) for name in bound.field_mapping]
        return [(name, value.get(path)) for name, path in bound.field_mapping.items()]

    def lookup_nested(self, option: str, nested: Any) -> List[Tuple[str, Any]]:
        """(field, value) pairs in mapping order, resolved by full path evaluation."""
        bound = self.mapping(option)
        return [(name, bound.extractor.extract_value(name, nested)) for name in bound.field_mapping]

    def extend_headers(self, record: ConnectRecord, pairs: List[Tuple[str, Any]]) -> Headers:
        headers = record.headers.duplicate()
        for name, value in pairs:
            headers.add(name, value, None)
        return headers

    @staticmethod
    def nested_value(struct: Struct) -> Dict[str, Any]:
        return to_nested_value(struct)
