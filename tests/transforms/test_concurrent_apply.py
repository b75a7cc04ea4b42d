from concurrent.futures import ThreadPoolExecutor

from recordtools.connect.headers import Headers
from recordtools.connect.record import ConnectRecord
from recordtools.transforms.keys_and_header import NestedValueToKeysAndHeader


def _transform():
    t = NestedValueToKeysAndHeader()
    t.configure({"keyFieldMapping": "id:identifier", "headerFieldMapping": "src:source,n:n"})
    return t


def _records(n, shared_headers):
    return [
        ConnectRecord(
            topic="t",
            value={"identifier": f"id-{i}", "source": f"svc{i % 3}", "n": i},
            headers=shared_headers,
        )
        for i in range(n)
    ]


def _summary(rec):
    return rec.key, [(h.key, h.value) for h in rec.headers]


def test_parallel_matches_sequential():
    t = _transform()
    shared = Headers().add("origin", "batch-1")
    records = _records(200, shared)

    sequential = [_summary(t.apply(r)) for r in records]
    with ThreadPoolExecutor(max_workers=8) as pool:
        parallel = [_summary(r) for r in pool.map(t.apply, records)]

    assert parallel == sequential
    # records sharing one origin header set never see each other's headers
    assert [(h.key, h.value) for h in shared] == [("origin", "batch-1")]


def test_repeated_application_only_appends():
    t = _transform()
    origin = Headers().add("origin", "o").add("origin", "o2")
    rec = ConnectRecord(topic="t", value={"identifier": "x", "source": "s", "n": 1}, headers=origin)

    first = t.apply(rec)
    second = t.apply(rec)

    assert list(first.headers)[:2] == list(origin)
    assert list(second.headers)[:2] == list(origin)
    assert first.headers == second.headers
    assert first.key == second.key
