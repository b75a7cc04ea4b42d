import pytest

from recordtools.errors import ExtractionError
from recordtools.mapping.extract import PathExtractor
from recordtools.mapping.parse import parse_mappings
from recordtools.mapping.types import Err, Missing, Value


def _extractor(*tokens, label="headerFieldMapping"):
    return PathExtractor(parse_mappings(list(tokens), label), label)


def test_extract_value_single_field():
    ex = _extractor("h1:a.b", "h2:c")
    assert ex.extract_value("h1", {"a": {"b": "x"}, "c": 1}) == "x"
    assert ex.extract_value("h2", {"a": {"b": "x"}, "c": 1}) == 1


def test_missing_path_yields_none_not_error():
    ex = _extractor("h1:a.b.c")
    value = {"a": {"x": 1}}
    assert ex.evaluate("h1", value) is Missing
    assert ex.extract_value("h1", value) is None


def test_extract_values_in_mapping_order():
    ex = _extractor("z:third", "a:first", "m:second.inner")
    out = ex.extract_values({"first": 1, "second": {"inner": 2}, "third": 3})
    assert list(out) == ["z", "a", "m"]
    assert out == {"z": 3, "a": 1, "m": 2}


def test_malformed_path_fails_at_evaluation_not_construction():
    ex = _extractor("good:a", "bad:a..b", label="keyFieldMapping")

    # the good field still works
    assert ex.extract_value("good", {"a": 1}) == 1

    result = ex.evaluate("bad", {"a": 1})
    assert isinstance(result, Err)

    with pytest.raises(ExtractionError) as exc:
        ex.extract_value("bad", {"a": 1})
    err = exc.value
    assert err.config_label == "keyFieldMapping"
    assert err.field_name == "bad"
    assert err.path == "a..b"
    assert "keyFieldMapping" in str(err) and "'bad'" in str(err)

    with pytest.raises(ExtractionError):
        ex.extract_values({"a": 1})


def test_unknown_field_is_a_key_error():
    ex = _extractor("h1:a")
    with pytest.raises(KeyError):
        ex.extract_value("nope", {"a": 1})


def test_evaluate_returns_value_wrapper():
    ex = _extractor("h1:a")
    assert ex.evaluate("h1", {"a": [1, 2]}) == Value([1, 2])
