from __future__ import annotations

from typing import Optional


class RecordToolsError(Exception):
    """Base class for every error raised by record-tools."""


class ConfigurationError(RecordToolsError, ValueError):
    """Invalid transform configuration. Raised at configure time only."""


class DataError(RecordToolsError, ValueError):
    """A record value does not have the shape its schema (or lack of one) implies."""


class TransformStateError(RecordToolsError, RuntimeError):
    """A transform was used before `configure` succeeded."""


class ExtractionError(RecordToolsError, ValueError):
    """
    A path expression could not be evaluated because it is malformed.

    Unresolved paths are not errors; they evaluate to a missing value.
    """

    def __init__(
        self,
        message: str,
        *,
        config_label: Optional[str] = None,
        field_name: Optional[str] = None,
        path: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.config_label = config_label
        self.field_name = field_name
        self.path = path
