import pytest

from recordtools.connect.data import (
    INT32_SCHEMA,
    INT8_SCHEMA,
    OPTIONAL_STRING_SCHEMA,
    STRING_SCHEMA,
    SchemaBuilder,
    Struct,
    Type,
    require_map,
    require_struct,
)
from recordtools.connect.headers import Headers
from recordtools.connect.record import ConnectRecord
from recordtools.errors import DataError


def _order_schema():
    return (
        SchemaBuilder.struct()
        .name("Order")
        .field("id", STRING_SCHEMA)
        .field("qty", INT32_SCHEMA)
        .field("note", OPTIONAL_STRING_SCHEMA)
        .build()
    )


def test_struct_schema_field_order():
    schema = _order_schema()
    assert schema.type is Type.STRUCT
    assert schema.field_names() == ["id", "qty", "note"]
    assert schema.field("qty").index == 1
    assert schema.field("missing") is None


def test_struct_put_validates():
    s = Struct(_order_schema()).put("id", "o1").put("qty", 3)
    assert s.get("id") == "o1"
    assert s.get("note") is None
    s.validate()

    with pytest.raises(DataError):
        s.put("qty", "three")
    with pytest.raises(DataError):
        s.put("qty", True)
    with pytest.raises(DataError):
        s.put("id", None)
    with pytest.raises(DataError, match="not a valid field name"):
        s.put("unknown", 1)


def test_struct_validate_reports_missing_required():
    s = Struct(_order_schema()).put("id", "o1")
    with pytest.raises(DataError, match="qty"):
        s.validate()


def test_int_range_checked():
    schema = SchemaBuilder.struct().field("small", INT8_SCHEMA).build()
    with pytest.raises(DataError, match="out of range"):
        Struct(schema).put("small", 300)


def test_duplicate_field_rejected():
    with pytest.raises(DataError, match="duplication"):
        SchemaBuilder.struct().field("a", STRING_SCHEMA).field("a", STRING_SCHEMA)


def test_requirements():
    assert require_map({"a": 1}, "purpose") == {"a": 1}
    with pytest.raises(DataError, match=r"Only Map objects supported in absence of schema for \[purpose\], found: list"):
        require_map([1], "purpose")
    with pytest.raises(DataError, match=r"Only Struct objects supported for \[purpose\], found: dict"):
        require_struct({"a": 1}, "purpose")


def test_headers_are_multivalued_and_duplicate_independent():
    h = Headers().add("a", 1).add("a", 2)
    dup = h.duplicate()
    dup.add("b", 3)
    assert len(h) == 2
    assert len(dup) == 3
    assert [x.value for x in h.all_with_name("a")] == [1, 2]
    assert h.last_with_name("a").value == 2
    assert h.last_with_name("zzz") is None


def test_new_record_copies_headers_by_default():
    rec = ConnectRecord(topic="t", value={"a": 1}, headers=Headers().add("x", 1))
    out = rec.new_record("t", 0, None, "k", None, rec.value, 5)
    assert out.key == "k"
    assert out.headers == rec.headers
    assert out.headers is not rec.headers
