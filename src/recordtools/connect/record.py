from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .data import Schema
from .headers import Headers


@dataclass(frozen=True)
class ConnectRecord:
    """
    A message flowing through a transform chain.

    Transforms never mutate a record; they build a new one with `new_record`.
    """

    topic: str
    kafka_partition: Optional[int] = None
    key_schema: Optional[Schema] = None
    key: Any = None
    value_schema: Optional[Schema] = None
    value: Any = None
    timestamp: Optional[int] = None
    headers: Headers = field(default_factory=Headers)

    def new_record(
        self,
        topic: str,
        kafka_partition: Optional[int],
        key_schema: Optional[Schema],
        key: Any,
        value_schema: Optional[Schema],
        value: Any,
        timestamp: Optional[int],
        headers: Optional[Headers] = None,
    ) -> "ConnectRecord":
        return ConnectRecord(
            topic=topic,
            kafka_partition=kafka_partition,
            key_schema=key_schema,
            key=key,
            value_schema=value_schema,
            value=value,
            timestamp=timestamp,
            headers=self.headers.duplicate() if headers is None else headers,
        )
