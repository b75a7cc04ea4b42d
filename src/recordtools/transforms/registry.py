from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

from recordtools.errors import ConfigurationError
from .base import BaseNestedValue
from .header import NestedValueToHeader
from .keys import NestedValueToKeys
from .keys_and_header import NestedValueToKeysAndHeader


TRANSFORM_REGISTRY: Dict[str, Type[BaseNestedValue]] = {
    # short aliases
    "header": NestedValueToHeader,
    "keys": NestedValueToKeys,
    "keys-and-header": NestedValueToKeysAndHeader,

    # class names
    "NestedValueToHeader": NestedValueToHeader,
    "NestedValueToKeys": NestedValueToKeys,
    "NestedValueToKeysAndHeader": NestedValueToKeysAndHeader,
}


def resolve_transform(name: str) -> Type[BaseNestedValue]:
    # fully qualified names resolve by their last component
    cls = TRANSFORM_REGISTRY.get(name) or TRANSFORM_REGISTRY.get(name.rsplit(".", 1)[-1])
    if cls is None:
        raise ConfigurationError(
            f"Unknown transform '{name}'. Known: {sorted(TRANSFORM_REGISTRY)}"
        )
    return cls


def create_transform(name: str, props: Optional[Mapping[str, Any]] = None) -> BaseNestedValue:
    transform = resolve_transform(name)()
    transform.configure(props or {})
    return transform
