from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Tuple, Union

from recordtools.errors import ExtractionError


@dataclass(frozen=True)
class FieldMapping:
    """
    Ordered, immutable pairs of (derived field name, path expression).

    Invariants:
    - field names are unique
    - names and paths are non-empty and already trimmed
    - iteration order is the order the pairs were configured in
    """

    pairs: Tuple[Tuple[str, str], ...] = ()

    def __post_init__(self):
        seen = set()
        for name, path in self.pairs:
            if not name or not path:
                raise ValueError(f"FieldMapping entries must be non-empty: {name!r}:{path!r}")
            if name in seen:
                raise ValueError(f"Duplicate field name in FieldMapping: {name!r}")
            seen.add(name)

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self.pairs)

    def __contains__(self, name: object) -> bool:
        return any(n == name for n, _ in self.pairs)

    def names(self) -> List[str]:
        return [name for name, _ in self.pairs]

    def items(self) -> List[Tuple[str, str]]:
        return list(self.pairs)

    def path_for(self, name: str) -> str:
        for n, path in self.pairs:
            if n == name:
                return path
        raise KeyError(name)

    def as_dict(self) -> Dict[str, str]:
        return dict(self.pairs)


# ---------------------------------------------------------------------------
# Evaluation results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Value:
    value: Any


class _MissingType:
    """Singleton marker for a path that did not resolve."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Missing"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_MissingType, ())


Missing = _MissingType()


@dataclass(frozen=True)
class Err:
    error: ExtractionError


ExtractionResult = Union[Value, _MissingType, Err]


def unwrap(result: ExtractionResult) -> Any:
    """Value -> its payload, Missing -> None, Err -> raise."""
    if isinstance(result, Value):
        return result.value
    if isinstance(result, Err):
        raise result.error
    return None
