from .types import FieldMapping, Value, Missing, Err, ExtractionResult, unwrap
from .parse import parse_mappings
from .paths import CompiledPath, parse_path, get_path
from .extract import PathExtractor

__all__ = [
    "FieldMapping",
    "Value",
    "Missing",
    "Err",
    "ExtractionResult",
    "unwrap",
    "parse_mappings",
    "CompiledPath",
    "parse_path",
    "get_path",
    "PathExtractor",
]
