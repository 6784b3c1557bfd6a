"""Domain layer: configuration objects, typed values, output records. ZERO I/O."""

from csv_ingestion.domain.types import (
    Casing,
    CasingMode,
    Eradicate,
    LineFilterRules,
    ParserConfig,
    ParserOptions,
    RegexTake,
    Replace,
    ReplacePair,
    SanitizerChainEntry,
    SanitizerSpec,
    Trim,
    TrimMode,
    TypeColumn,
    TypedRecord,
)
from csv_ingestion.domain.values import TypedValue, ValueType, value_from_string

__all__ = [
    "Casing",
    "CasingMode",
    "Eradicate",
    "LineFilterRules",
    "ParserConfig",
    "ParserOptions",
    "RegexTake",
    "Replace",
    "ReplacePair",
    "SanitizerChainEntry",
    "SanitizerSpec",
    "Trim",
    "TrimMode",
    "TypeColumn",
    "TypedRecord",
    "TypedValue",
    "ValueType",
    "value_from_string",
]
