from __future__ import annotations

from typing import Any, Dict

from recordtools.errors import ExtractionError
from .paths import CompiledPath
from .types import Err, ExtractionResult, FieldMapping, unwrap


class PathExtractor:
    """
    Evaluates the path expressions of one FieldMapping against nested values.

    Paths are compiled once here. A path that fails to compile is kept as an
    error and reported when a value is evaluated against it, so a bad path
    only breaks the records that actually need it.
    """

    def __init__(self, field_mapping: FieldMapping, config_label: str) -> None:
        self.field_mapping = field_mapping
        self.config_label = config_label
        compiled: Dict[str, Any] = {}
        for name, path in field_mapping.items():
            try:
                compiled[name] = CompiledPath.compile(path)
            except ExtractionError as e:
                compiled[name] = ExtractionError(
                    f"`{config_label}` field '{name}': {e}",
                    config_label=config_label,
                    field_name=name,
                    path=path,
                )
        self._compiled = compiled

    def evaluate(self, field_name: str, value: Any) -> ExtractionResult:
        # unknown field names are a caller bug, not a data problem
        target = self._compiled[field_name]
        if isinstance(target, ExtractionError):
            return Err(target)
        return target.evaluate(value)

    def extract_value(self, field_name: str, value: Any) -> Any:
        """Value at the field's path; None when unresolved; ExtractionError when malformed."""
        return unwrap(self.evaluate(field_name, value))

    def extract_values(self, value: Any) -> Dict[str, Any]:
        return {name: self.extract_value(name, value) for name in self.field_mapping}

    def __repr__(self) -> str:
        return f"PathExtractor({self.config_label!r}, {self.field_mapping.as_dict()!r})"
