"""Parse pipeline: line filter, tokenizer, sanitizers, conversion, row assembler."""

from csv_ingestion.pipeline.assembler import (
    ParserState,
    ParseStats,
    RowAssembler,
    parse_lines,
)
from csv_ingestion.pipeline.conversion import CoercionResult, coerce_token, convert_token
from csv_ingestion.pipeline.lenient import LenientRowReader, RowFailure
from csv_ingestion.pipeline.line_filter import AdmittedLine, LineFilter
from csv_ingestion.pipeline.sanitizers import apply_sanitizer, sanitize_row
from csv_ingestion.pipeline.tokenizer import tokenize_line

__all__ = [
    "AdmittedLine",
    "CoercionResult",
    "LenientRowReader",
    "LineFilter",
    "ParseStats",
    "ParserState",
    "RowAssembler",
    "RowFailure",
    "apply_sanitizer",
    "coerce_token",
    "convert_token",
    "parse_lines",
    "sanitize_row",
    "tokenize_line",
]
