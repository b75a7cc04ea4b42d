import pytest

from recordtools.errors import ConfigurationError
from recordtools.mapping.parse import parse_mappings
from recordtools.mapping.types import FieldMapping


def test_preserves_token_order():
    fm = parse_mappings(["z:a.b", "a:c", "m:$.d[0]"], "headerFieldMapping")
    assert isinstance(fm, FieldMapping)
    assert fm.names() == ["z", "a", "m"]
    assert fm.items() == [("z", "a.b"), ("a", "c"), ("m", "$.d[0]")]


def test_trims_name_and_path():
    fm = parse_mappings(["  region :  geo.region  "], "headerFieldMapping")
    assert fm.items() == [("region", "geo.region")]


@pytest.mark.parametrize(
    "token, match",
    [
        ("no_separator", "expected 'name:path'"),
        ("a:b:c", "exactly one ':'"),
        ("ts:$['event:time']", "exactly one ':'"),
        (":path.only", "empty field name"),
        ("name_only:", "empty path expression"),
        ("  :  ", "empty field name"),
    ],
)
def test_malformed_token_fails(token, match):
    with pytest.raises(ConfigurationError, match=match) as exc:
        parse_mappings(["ok:a", token], "headerFieldMapping")
    assert "headerFieldMapping" in str(exc.value)
    assert repr(token) in str(exc.value)


def test_duplicate_field_name_fails():
    with pytest.raises(ConfigurationError, match="Duplicate field name 'id'"):
        parse_mappings(["id:a", "other:b", "id:c"], "keyFieldMapping")


def test_empty_list_gives_empty_mapping():
    assert len(parse_mappings([], "keyFieldMapping")) == 0
    assert len(parse_mappings(None, "keyFieldMapping")) == 0


def test_field_mapping_is_immutable():
    fm = parse_mappings(["a:b"], "x")
    with pytest.raises(AttributeError):
        fm.pairs = ()
    assert "a" in fm
    assert "b" not in fm
    with pytest.raises(KeyError):
        fm.path_for("b")
