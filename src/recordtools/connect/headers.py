from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional

from .data import Schema


@dataclass(frozen=True)
class Header:
    key: str
    value: Any
    schema: Optional[Schema] = None


class Headers:
    """
    Ordered, multi-valued header collection.

    Adding a header never replaces an existing one with the same key.
    """

    def __init__(self, headers: Iterable[Header] = ()) -> None:
        self._headers: List[Header] = list(headers)

    def add(self, key: str, value: Any, schema: Optional[Schema] = None) -> "Headers":
        if not isinstance(key, str):
            raise TypeError(f"Header key must be a string, got {type(key).__name__}")
        self._headers.append(Header(key, value, schema))
        return self

    def duplicate(self) -> "Headers":
        return Headers(self._headers)

    def all_with_name(self, key: str) -> List[Header]:
        return [h for h in self._headers if h.key == key]

    def last_with_name(self, key: str) -> Optional[Header]:
        matches = self.all_with_name(key)
        return matches[-1] if matches else None

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers))

    def __len__(self) -> int:
        return len(self._headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Headers):
            return NotImplemented
        return self._headers == other._headers

    def __repr__(self) -> str:
        return f"Headers({self._headers!r})"
