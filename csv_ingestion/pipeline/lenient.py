"""
Skip-and-continue wrapper over the strict RowAssembler.

Opt-in only. Row-scoped failures (malformed line, sanitization, conversion)
are collected as RowFailure and the row is dropped; everything else (header
missing, configuration inconsistency at the header) still fails the run.
The per-row logic is the assembler's own process_line, so strict and lenient
runs agree on every row that succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from csv_ingestion.domain.types import ParserConfig, TypedRecord
from csv_ingestion.exceptions import (
    CsvIngestionError,
    MalformedLineError,
    RowError,
    SanitizationError,
    TypeConversionError,
)
from csv_ingestion.logging_config import get_logger
from csv_ingestion.pipeline.assembler import ParserState, RowAssembler

logger = get_logger("pipeline.lenient")

_SKIPPABLE = (MalformedLineError, SanitizationError, TypeConversionError)


@dataclass(frozen=True)
class RowFailure:
    """A dropped row: where it was, what it said, and why it failed."""

    line_number: int
    text: str
    error: RowError


class LenientRowReader:
    """Yields the rows that parse; collects the ones that don't in ``failures``."""

    def __init__(self, config: ParserConfig, *, max_failures: int | None = None):
        self.assembler = RowAssembler(config)
        self.max_failures = max_failures
        self.failures: list[RowFailure] = []

    @property
    def stats(self):
        return self.assembler.stats

    def records(self, lines: Iterable[str]) -> Iterator[TypedRecord]:
        assembler = self.assembler
        try:
            for admitted in assembler.data_lines(lines):
                try:
                    record = assembler.process_line(admitted.line_number, admitted.text)
                except _SKIPPABLE as exc:
                    self._skip(admitted.line_number, admitted.text, exc)
                    continue
                assembler.stats.rows_emitted += 1
                yield record
        except CsvIngestionError as exc:
            assembler.fail(exc)
            raise
        assembler.state = ParserState.DONE

    def _skip(self, line_number: int, text: str, exc: RowError) -> None:
        self.failures.append(RowFailure(line_number, text, exc))
        logger.info(
            "row_skipped",
            extra={
                "line_number": line_number,
                "error_code": exc.code,
                "error_msg": str(exc),
            },
        )
        if self.max_failures is not None and len(self.failures) > self.max_failures:
            raise exc
