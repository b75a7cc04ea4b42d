from __future__ import annotations

from typing import Any, Mapping

from recordtools.connect.config import ConfigType, Importance
from recordtools.connect.data import Struct
from recordtools.connect.record import ConnectRecord

from .base import HEADER_FIELD_MAPPING, KEY_FIELD_MAPPING, BaseNestedValue, common_config_def


class NestedValueToKeysAndHeader(BaseNestedValue):
    """Replaces the record key with a map of key fields and adds one header per header field."""

    KEY_FIELD_MAPPING = KEY_FIELD_MAPPING
    HEADER_FIELD_MAPPING = HEADER_FIELD_MAPPING

    CONFIG_DEF = (
        common_config_def()
        .define(
            KEY_FIELD_MAPPING,
            ConfigType.LIST,
            None,
            Importance.LOW,
            "Map of key field name to path in the message body. eg: field1:path1,field2:path2..",
        )
        .define(
            HEADER_FIELD_MAPPING,
            ConfigType.LIST,
            None,
            Importance.LOW,
            "Map of header field name to path in the message body. eg: field1:path1,field2:path2..",
        )
    )

    PURPOSE = "construct the record key and header from value"
    REQUIRED_MAPPINGS = (KEY_FIELD_MAPPING, HEADER_FIELD_MAPPING)

    def apply_schemaless(self, record: ConnectRecord, value: Mapping[str, Any]) -> ConnectRecord:
        key_data = dict(self.lookup_schemaless(KEY_FIELD_MAPPING, value))
        headers = self.extend_headers(record, self.lookup_schemaless(HEADER_FIELD_MAPPING, value))
        return record.new_record(
            record.topic,
            record.kafka_partition,
            None,
            key_data,
            record.value_schema,
            record.value,
            record.timestamp,
            headers,
        )

    def apply_with_schema(self, record: ConnectRecord, struct: Struct) -> ConnectRecord:
        nested = self.nested_value(struct)
        headers = self.extend_headers(record, self.lookup_nested(HEADER_FIELD_MAPPING, nested))
        key_data = self.mapping(KEY_FIELD_MAPPING).extractor.extract_values(nested)
        return record.new_record(
            record.topic,
            record.kafka_partition,
            self.key_schema,
            key_data,
            record.value_schema,
            record.value,
            record.timestamp,
            headers,
        )
