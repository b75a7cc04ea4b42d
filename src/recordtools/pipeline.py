"""
Transform chains and the YAML files that describe them.

    on_error: skip            # fail (default) | skip
    transforms:
      - type: keys-and-header
        config:
          keyFieldMapping: "id:identifier"
          headerFieldMapping: ["src:source", "region:geo.region"]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Literal, Optional

import pydantic
import yaml
from pydantic import BaseModel, Field

from recordtools.connect.record import ConnectRecord
from recordtools.errors import ConfigurationError, DataError, ExtractionError
from recordtools.transforms.base import BaseNestedValue
from recordtools.transforms.registry import create_transform

ON_ERROR_POLICIES = ("fail", "skip")


# ---------------------------------------------------------------------------
# Pipeline file model
# ---------------------------------------------------------------------------

class TransformSpec(BaseModel):
    type: str
    config: Dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    transforms: List[TransformSpec] = Field(min_length=1)
    on_error: Literal["fail", "skip"] = "fail"


def load_pipeline_config(path: Path) -> PipelineConfig:
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(path)

    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: invalid YAML") from e

    try:
        return PipelineConfig.model_validate(doc or {})
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"{path}: invalid pipeline config\n{e}") from e


# ---------------------------------------------------------------------------
# TransformChain
# ---------------------------------------------------------------------------

@dataclass
class TransformChain:
    """
    Applies configured transforms to records, in order.

    Per-record data problems (wrong value shape, malformed path) either
    stop the run (`fail`) or drop the record with a warning (`skip`).
    """

    transforms: List[BaseNestedValue]
    on_error: str = "fail"

    # Logger
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("record-tools"))

    # Run counters
    processed: int = field(default=0, init=False)
    skipped: int = field(default=0, init=False)

    def __post_init__(self):
        if self.on_error not in ON_ERROR_POLICIES:
            raise ConfigurationError(
                f"Invalid on_error policy '{self.on_error}'. Expected one of {ON_ERROR_POLICIES}."
            )

        # Configure logger if not configured
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("[record-tools] %(message)s"))
            self.logger.addHandler(handler)
        self.logger.setLevel(logging.INFO)

    @classmethod
    def from_config(
        cls, cfg: PipelineConfig, logger: Optional[logging.Logger] = None
    ) -> "TransformChain":
        transforms = [create_transform(entry.type, entry.config) for entry in cfg.transforms]
        if logger is None:
            return cls(transforms=transforms, on_error=cfg.on_error)
        return cls(transforms=transforms, on_error=cfg.on_error, logger=logger)

    # -----------------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------------
    def apply(self, record: ConnectRecord) -> ConnectRecord:
        for transform in self.transforms:
            record = transform.apply(record)
        return record

    def run(self, records: Iterable[ConnectRecord]) -> Iterator[ConnectRecord]:
        for n, record in enumerate(records, start=1):
            try:
                out = self.apply(record)
            except (DataError, ExtractionError) as e:
                if self.on_error == "fail":
                    raise
                self.skipped += 1
                self.logger.warning("skipping record %d: %s", n, e)
                continue
            self.processed += 1
            yield out

    def close(self) -> None:
        for transform in self.transforms:
            transform.close()

    def summary(self) -> Dict[str, Any]:
        """Return a dictionary summary for debugging/logging."""
        return {
            "transforms": [type(t).__name__ for t in self.transforms],
            "on_error": self.on_error,
            "processed": self.processed,
            "skipped": self.skipped,
        }
