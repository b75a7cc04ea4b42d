import pytest

from recordtools.connect.data import INT32_SCHEMA, STRING_SCHEMA, SchemaBuilder, Struct, Type
from recordtools.connect.headers import Headers
from recordtools.connect.record import ConnectRecord
from recordtools.errors import ConfigurationError
from recordtools.transforms.base import KEY_SCHEMA_NAME
from recordtools.transforms.keys import NestedValueToKeys
from recordtools.transforms.keys_and_header import NestedValueToKeysAndHeader


ORDER = (
    SchemaBuilder.struct()
    .field("identifier", STRING_SCHEMA)
    .field("source", STRING_SCHEMA)
    .field("meta", SchemaBuilder.struct().field("shard", INT32_SCHEMA).build())
    .build()
)


def _order_record():
    meta = Struct(ORDER.field("meta").schema).put("shard", 4)
    value = Struct(ORDER).put("identifier", "abc123").put("source", "svcA").put("meta", meta)
    return ConnectRecord(topic="orders", kafka_partition=1, key="old", value_schema=ORDER, value=value, timestamp=9)


# ==========================================================
# KEYS AND HEADER
# ==========================================================

def _keys_and_header(**props):
    t = NestedValueToKeysAndHeader()
    t.configure(props)
    return t


@pytest.mark.parametrize(
    "props, missing",
    [
        ({"headerFieldMapping": "src:source"}, "keyFieldMapping"),
        ({"keyFieldMapping": "id:identifier"}, "headerFieldMapping"),
        ({"keyFieldMapping": "", "headerFieldMapping": "src:source"}, "keyFieldMapping"),
    ],
)
def test_both_mappings_required(props, missing):
    with pytest.raises(ConfigurationError, match=f"`{missing}` is required for `.*NestedValueToKeysAndHeader`"):
        _keys_and_header(**props)


def test_schemaless_key_and_header():
    t = _keys_and_header(keyFieldMapping="id:identifier", headerFieldMapping="src:source")
    rec = ConnectRecord(topic="t", key="old", value={"identifier": "abc123", "source": "svcA"})

    out = t.apply(rec)

    assert out.key == {"id": "abc123"}
    assert out.key_schema is None
    assert [(h.key, h.value) for h in out.headers] == [("src", "svcA")]
    assert out.value is rec.value


def test_schemaless_key_keeps_mapping_order_and_missing_fields():
    t = _keys_and_header(keyFieldMapping="b:second,a:first,c:absent", headerFieldMapping="h:first")
    out = t.apply(ConnectRecord(topic="t", value={"first": 1, "second": 2}))
    assert list(out.key.items()) == [("b", 2), ("a", 1), ("c", None)]


def test_schema_bound_key_and_header():
    t = _keys_and_header(keyFieldMapping="id:identifier,shard:meta.shard", headerFieldMapping="src:source")
    rec = _order_record()

    out = t.apply(rec)

    assert out.key == {"id": "abc123", "shard": 4}
    assert out.key_schema.type is Type.MAP
    assert out.key_schema.name == KEY_SCHEMA_NAME
    assert out.key_schema.key_schema.type is Type.STRING
    assert out.key_schema.value_schema.type is Type.STRING
    assert out.key_schema.value_schema.optional
    assert [(h.key, h.value) for h in out.headers] == [("src", "svcA")]
    assert (out.topic, out.kafka_partition, out.timestamp) == ("orders", 1, 9)
    assert out.value is rec.value
    assert out.value_schema is ORDER


def test_key_schema_owned_per_instance():
    a = NestedValueToKeysAndHeader()
    b = NestedValueToKeysAndHeader()
    assert a.key_schema == b.key_schema
    assert a.key_schema is not b.key_schema
    with pytest.raises(AttributeError):
        a.key_schema.name = "other"


# ==========================================================
# KEYS ONLY
# ==========================================================

def test_keys_only_requires_key_mapping():
    with pytest.raises(ConfigurationError, match="`keyFieldMapping` is required"):
        NestedValueToKeys().configure({})


def test_keys_only_leaves_headers_alone():
    t = NestedValueToKeys()
    t.configure({"keyFieldMapping": ["id:identifier", "shard:meta.shard"]})
    rec = _order_record()
    rec = rec.new_record(rec.topic, rec.kafka_partition, None, rec.key, rec.value_schema, rec.value,
                         rec.timestamp, Headers().add("x", 1))

    out = t.apply(rec)

    assert out.key == {"id": "abc123", "shard": 4}
    assert out.key_schema == t.key_schema
    assert out.headers == rec.headers
    assert out.headers is not rec.headers


def test_keys_only_schemaless():
    t = NestedValueToKeys()
    t.configure({"keyFieldMapping": "id:identifier"})
    out = t.apply(ConnectRecord(topic="t", value={"identifier": "abc123"}))
    assert out.key == {"id": "abc123"}
    assert out.key_schema is None
    assert len(out.headers) == 0
