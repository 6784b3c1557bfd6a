"""
csv_ingestion -- Configuration-driven CSV ingestion.

Turns delimited text into strongly-typed records in three configurable
stages: line selection, per-column sanitization, per-column typed
conversion.

Architecture:
    domain/     frozen configuration objects, typed values, records. ZERO I/O.
    pipeline/   line filter, tokenizer, sanitizers, conversion, row assembler.
    config/     YAML/JSON document -> ParserConfig.
    adapters/   line sources (text buffers, files).
    services/   file-level orchestration with structured logging.
"""

from csv_ingestion.config.loader import load_config_file, parse_config
from csv_ingestion.domain.types import ParserConfig, TypedRecord
from csv_ingestion.domain.values import TypedValue, ValueType
from csv_ingestion.pipeline.assembler import RowAssembler, parse_lines

__all__ = [
    "ParserConfig",
    "RowAssembler",
    "TypedRecord",
    "TypedValue",
    "ValueType",
    "load_config_file",
    "parse_config",
    "parse_lines",
]
