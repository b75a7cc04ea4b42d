from __future__ import annotations

from typing import Iterable, List, Tuple

from recordtools.errors import ConfigurationError
from .types import FieldMapping

SEPARATOR = ":"


def _split_token(token: str, config_label: str) -> Tuple[str, str]:
    if not isinstance(token, str) or token.count(SEPARATOR) != 1:
        raise ConfigurationError(
            f"Invalid `{config_label}` entry {token!r}: expected 'name:path' with exactly one ':'"
        )
    name, path = token.split(SEPARATOR)
    name, path = name.strip(), path.strip()
    if not name:
        raise ConfigurationError(
            f"Invalid `{config_label}` entry {token!r}: empty field name"
        )
    if not path:
        raise ConfigurationError(
            f"Invalid `{config_label}` entry {token!r}: empty path expression"
        )
    return name, path


def parse_mappings(tokens: Iterable[str], config_label: str) -> FieldMapping:
    """
    Parse `name:path` tokens into an ordered FieldMapping.

    Raises ConfigurationError for a malformed token or a repeated field name.
    An empty token list yields an empty mapping; callers decide whether
    that is acceptable.
    """
    pairs: List[Tuple[str, str]] = []
    seen = set()
    for token in tokens or []:
        name, path = _split_token(token, config_label)
        if name in seen:
            raise ConfigurationError(
                f"Duplicate field name {name!r} in `{config_label}` (entry {token!r})"
            )
        seen.add(name)
        pairs.append((name, path))
    return FieldMapping(tuple(pairs))
