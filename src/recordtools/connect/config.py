from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from recordtools.errors import ConfigurationError

NO_DEFAULT = object()
_LIST_SPLIT = re.compile(r"\s*,\s*")


class ConfigType(str, Enum):
    LIST = "list"
    STRING = "string"


class Importance(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ConfigKey:
    name: str
    type: ConfigType
    default: Any
    importance: Importance
    doc: str
    choices: Optional[Sequence[str]] = None

    @property
    def required(self) -> bool:
        return self.default is NO_DEFAULT


def _coerce(key: ConfigKey, raw: Any) -> Any:
    if raw is None:
        if key.choices is not None:
            raise ConfigurationError(
                f"Invalid value None for configuration {key.name}: must be one of {list(key.choices)}"
            )
        return None

    if key.type is ConfigType.LIST:
        if isinstance(raw, str):
            raw = raw.strip()
            return [] if not raw else _LIST_SPLIT.split(raw)
        if isinstance(raw, (list, tuple)):
            return [str(v).strip() for v in raw]
        raise ConfigurationError(
            f"Invalid value {raw!r} for configuration {key.name}: expected a list or comma-separated string"
        )

    # STRING
    if not isinstance(raw, str):
        raise ConfigurationError(f"Invalid value {raw!r} for configuration {key.name}: expected a string")
    value = raw.strip()
    if key.choices is not None and value not in key.choices:
        raise ConfigurationError(
            f"Invalid value {value!r} for configuration {key.name}: "
            f"must be one of {list(key.choices)}"
        )
    return value


class ConfigDef:
    """Declared options of a transform: name, type, default, importance, doc."""

    def __init__(self) -> None:
        self._keys: Dict[str, ConfigKey] = {}

    def define(
        self,
        name: str,
        type: ConfigType,
        default: Any = NO_DEFAULT,
        importance: Importance = Importance.MEDIUM,
        doc: str = "",
        choices: Optional[Sequence[str]] = None,
    ) -> "ConfigDef":
        if name in self._keys:
            raise ConfigurationError(f"Configuration {name} is defined twice.")
        self._keys[name] = ConfigKey(name, ConfigType(type), default, Importance(importance), doc, choices)
        return self

    def names(self) -> List[str]:
        return list(self._keys)

    def keys(self) -> List[ConfigKey]:
        return list(self._keys.values())

    def parse(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        props = props or {}
        parsed: Dict[str, Any] = {}
        for name, key in self._keys.items():
            if name in props:
                parsed[name] = _coerce(key, props[name])
            elif key.required:
                raise ConfigurationError(
                    f'Missing required configuration "{name}" which has no default value.'
                )
            else:
                parsed[name] = key.default
        return parsed


class SimpleConfig:
    """Parsed view over a ConfigDef; unknown props are ignored."""

    def __init__(self, config_def: ConfigDef, props: Mapping[str, Any]) -> None:
        self.config_def = config_def
        self.originals = dict(props or {})
        self.values = config_def.parse(self.originals)

    def _get(self, name: str) -> Any:
        if name not in self.values:
            raise ConfigurationError(f"Unknown configuration '{name}'")
        return self.values[name]

    def get_list(self, name: str) -> Optional[List[str]]:
        return self._get(name)

    def get_string(self, name: str) -> Optional[str]:
        return self._get(name)

