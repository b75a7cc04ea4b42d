from __future__ import annotations

from typing import Any, Mapping

from recordtools.connect.config import ConfigType, Importance
from recordtools.connect.data import Struct
from recordtools.connect.record import ConnectRecord

from .base import HEADER_FIELD_MAPPING, BaseNestedValue, common_config_def


class NestedValueToHeader(BaseNestedValue):
    """Adds one header per mapped field; key and value are left as they are."""

    HEADER_FIELD_MAPPING = HEADER_FIELD_MAPPING

    CONFIG_DEF = common_config_def().define(
        HEADER_FIELD_MAPPING,
        ConfigType.LIST,
        None,
        Importance.LOW,
        "Map of header field name to path in the message value. eg: field1:path1,field2:path2..",
    )

    PURPOSE = "construct the record header from value"
    REQUIRED_MAPPINGS = (HEADER_FIELD_MAPPING,)

    def _with_headers(self, record: ConnectRecord, headers) -> ConnectRecord:
        return record.new_record(
            record.topic,
            record.kafka_partition,
            record.key_schema,
            record.key,
            record.value_schema,
            record.value,
            record.timestamp,
            headers,
        )

    def apply_schemaless(self, record: ConnectRecord, value: Mapping[str, Any]) -> ConnectRecord:
        pairs = self.lookup_schemaless(HEADER_FIELD_MAPPING, value)
        return self._with_headers(record, self.extend_headers(record, pairs))

    def apply_with_schema(self, record: ConnectRecord, struct: Struct) -> ConnectRecord:
        nested = self.nested_value(struct)
        pairs = self.lookup_nested(HEADER_FIELD_MAPPING, nested)
        return self._with_headers(record, self.extend_headers(record, pairs))
