"""
Path expressions over nested values.

A JSONPath subset:

    $                  the whole value
    a.b.c              member access ($ prefix optional: $.a.b.c)
    a['b.c'] / a["x"]  bracketed member (may contain dots)
    items[0]           sequence index, negative counts from the end
    items[*].id        wildcard over a mapping's values or a sequence's items

Deep scan (`..`), filters and slices are not supported and fail to compile.
"""
from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from recordtools.errors import ExtractionError
from .types import Missing, Value

ROOT = "$"
_INDEX_RE = re.compile(r"^-?\d+$")
_QUOTES = ("'", '"')


@dataclass(frozen=True)
class Member:
    name: str


@dataclass(frozen=True)
class Index:
    index: int


@dataclass(frozen=True)
class Wildcard:
    pass


Segment = Union[Member, Index, Wildcard]


# ---------------------------------------------------------------------------
# Compilation
# ---------------------------------------------------------------------------

def _malformed(path: str, reason: str) -> ExtractionError:
    return ExtractionError(f"Malformed path expression {path!r}: {reason}", path=path)


def _read_name(path: str, i: int) -> Tuple[str, int]:
    start = i
    while i < len(path) and path[i] not in ".[":
        if path[i] == "]":
            raise _malformed(path, f"unexpected ']' at position {i}")
        i += 1
    return path[start:i], i


def _read_quoted(path: str, i: int) -> Tuple[str, int]:
    # path[i] is the opening quote
    quote = path[i]
    out: List[str] = []
    i += 1
    while i < len(path):
        ch = path[i]
        if ch == "\\" and i + 1 < len(path):
            out.append(path[i + 1])
            i += 2
            continue
        if ch == quote:
            return "".join(out), i + 1
        out.append(ch)
        i += 1
    raise _malformed(path, "unterminated quoted member")


def _read_bracket(path: str, i: int) -> Tuple[Segment, int]:
    # path[i] is '['
    i += 1
    if i < len(path) and path[i] in _QUOTES:
        name, i = _read_quoted(path, i)
        if i >= len(path) or path[i] != "]":
            raise _malformed(path, "expected ']' after quoted member")
        return Member(name), i + 1

    close = path.find("]", i)
    if close < 0:
        raise _malformed(path, "unterminated '['")
    content = path[i:close].strip()
    if content == "*":
        return Wildcard(), close + 1
    if _INDEX_RE.match(content):
        return Index(int(content)), close + 1
    raise _malformed(path, f"unsupported bracket expression [{content}]")


def parse_path(path: str) -> Tuple[Segment, ...]:
    """Split a path expression into segments; raise ExtractionError if malformed."""
    if not isinstance(path, str) or not path.strip():
        raise _malformed(str(path), "empty path")
    path = path.strip()

    segments: List[Segment] = []
    i = 0
    if path[0] == ROOT:
        i = 1
    elif path[0] == ".":
        raise _malformed(path, "leading '.' without '$'")
    elif path[0] == "*" and (len(path) == 1 or path[1] in ".["):
        segments.append(Wildcard())
        i = 1
    elif path[0] != "[":
        name, i = _read_name(path, 0)
        segments.append(Member(name))

    while i < len(path):
        ch = path[i]
        if ch == ".":
            i += 1
            if i >= len(path):
                raise _malformed(path, "trailing '.'")
            if path[i] == ".":
                raise _malformed(path, "deep scan '..' is not supported")
            if path[i] == "[":
                raise _malformed(path, "'.' followed by '['")
            if path[i] == "*" and (i + 1 == len(path) or path[i + 1] in ".["):
                segments.append(Wildcard())
                i += 1
                continue
            name, i = _read_name(path, i)
            segments.append(Member(name))
        elif ch == "[":
            seg, i = _read_bracket(path, i)
            segments.append(seg)
        else:
            raise _malformed(path, f"unexpected character {ch!r} at position {i}")

    return tuple(segments)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

_UNRESOLVED = object()


def _is_sequence(node: Any) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


def _walk(node: Any, segments: Tuple[Segment, ...], pos: int) -> Any:
    if pos == len(segments):
        return node
    seg = segments[pos]

    if isinstance(seg, Member):
        if isinstance(node, Mapping) and seg.name in node:
            return _walk(node[seg.name], segments, pos + 1)
        return _UNRESOLVED

    if isinstance(seg, Index):
        if not _is_sequence(node):
            return _UNRESOLVED
        if -len(node) <= seg.index < len(node):
            return _walk(node[seg.index], segments, pos + 1)
        return _UNRESOLVED

    # wildcard
    if isinstance(node, Mapping):
        children = list(node.values())
    elif _is_sequence(node):
        children = list(node)
    else:
        return _UNRESOLVED
    out = []
    for child in children:
        res = _walk(child, segments, pos + 1)
        if res is not _UNRESOLVED:
            out.append(res)
    return out


@dataclass(frozen=True)
class CompiledPath:
    expression: str
    segments: Tuple[Segment, ...]

    @classmethod
    def compile(cls, expression: str) -> "CompiledPath":
        return cls(expression=expression, segments=parse_path(expression))

    def evaluate(self, value: Any):
        """Return Value(result) or Missing. Never mutates `value`."""
        res = _walk(value, self.segments, 0)
        if res is _UNRESOLVED:
            return Missing
        return Value(res)


def get_path(value: Any, path: str, default: Any = None) -> Any:
    """One-shot evaluation; malformed paths still raise ExtractionError."""
    res = CompiledPath.compile(path).evaluate(value)
    if isinstance(res, Value):
        return res.value
    return default
