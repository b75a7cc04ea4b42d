"""
Transforms that derive record keys and headers from nested record values.

Exports the public API:
- NestedValueToHeader
- NestedValueToKeys
- NestedValueToKeysAndHeader
- to_nested_value
- create_transform
"""
from .adapter import to_nested_value
from .base import BaseNestedValue, RawMapping, TypedStructure, classify
from .header import NestedValueToHeader
from .keys import NestedValueToKeys
from .keys_and_header import NestedValueToKeysAndHeader
from .registry import TRANSFORM_REGISTRY, create_transform, resolve_transform
