"""
Row assembler: drives line filter -> tokenizer -> sanitizers -> conversion
and yields one TypedRecord per admitted data line.

State machine:

    AWAITING_HEADER --header line--> STREAMING_ROWS --exhausted--> DONE
          |                               |
          +--------------+----------------+
                         v
                       FAILED  (terminal; keeps the first error and its line)

Strict: the first row-level error halts the run. Best-effort ingestion is
layered on top (csv_ingestion.pipeline.lenient), never done in here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from csv_ingestion.domain.types import ParserConfig, TypeColumn, TypedRecord
from csv_ingestion.exceptions import (
    ColumnCountMismatchError,
    ConfigurationInconsistencyError,
    CsvIngestionError,
    HeaderMissingError,
)
from csv_ingestion.logging_config import get_logger
from csv_ingestion.pipeline.conversion import convert_row
from csv_ingestion.pipeline.line_filter import AdmittedLine, LineFilter
from csv_ingestion.pipeline.sanitizers import sanitize_row
from csv_ingestion.pipeline.tokenizer import tokenize_line

logger = get_logger("pipeline.assembler")


class ParserState(str, Enum):
    AWAITING_HEADER = "awaiting_header"
    STREAMING_ROWS = "streaming_rows"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ParseStats:
    """Counters for one run. Skipped line text is only kept with save_skipped_lines."""

    lines_read: int = 0
    rows_emitted: int = 0
    header_line_number: int | None = None
    skipped_line_numbers: list[int] = field(default_factory=list)
    skipped_lines: list[tuple[int, str]] = field(default_factory=list)


class RowAssembler:
    """
    One parse run over one line source.

    Contract:
        records(lines) lazily yields TypedRecord in source order.
        On error: state becomes FAILED, failure/failed_line are set, the
        error is re-raised and no partial record is emitted.

    Not reusable: build a new assembler per run.
    """

    def __init__(self, config: ParserConfig):
        self.config = config
        self.state = ParserState.AWAITING_HEADER
        self.headers: tuple[str, ...] | None = None
        self.columns: tuple[TypeColumn, ...] | None = None
        self.failure: CsvIngestionError | None = None
        self.failed_line: int | None = None
        self.stats = ParseStats()
        opts = config.options
        self._line_filter = LineFilter(
            opts.lines,
            first_line_is_header=opts.first_line_is_header,
            save_skipped_lines=opts.save_skipped_lines,
        )
        self._started = False
        self._current_line: int | None = None

    # ------------------------------------------------------------------
    # Column layout
    # ------------------------------------------------------------------

    def _layout_from_header(self, admitted: AdmittedLine) -> None:
        opts = self.config.options
        tokens = tokenize_line(
            admitted.text, opts.separator, opts.enclosure, admitted.line_number
        )
        typings = self.config.type_columns
        if typings and len(typings) != len(tokens):
            raise ConfigurationInconsistencyError(
                f"{len(typings)} column typings configured but header has {len(tokens)} columns",
                line_number=admitted.line_number,
                value=admitted.text,
                config_fragment=typings,
            )
        self.columns = typings or tuple(TypeColumn() for _ in tokens)
        self.headers = tuple(
            col.rename if col.rename is not None else token
            for col, token in zip(self.columns, tokens)
        )
        self.stats.header_line_number = admitted.line_number
        logger.debug(
            "header_detected",
            extra={"line_number": admitted.line_number, "headers": list(self.headers)},
        )

    def _layout_without_header(self, column_count: int) -> None:
        self.columns = self.config.type_columns or tuple(
            TypeColumn() for _ in range(column_count)
        )
        self.headers = tuple(
            col.rename if col.rename is not None else str(i)
            for i, col in enumerate(self.columns)
        )

    # ------------------------------------------------------------------
    # Per-row transformation
    # ------------------------------------------------------------------

    def process_line(self, line_number: int, text: str) -> TypedRecord:
        """
        Tokenize, sanitize and convert one admitted data line.

        Does not change the assembler state; records() does that.

        Raises:
            MalformedLineError: tokenizing failed or the token count is off.
            SanitizationError: a sanitizer failed.
            TypeConversionError: a token is not valid for its column type.
        """
        opts = self.config.options
        tokens = tokenize_line(text, opts.separator, opts.enclosure, line_number)
        if self.columns is None:
            self._layout_without_header(len(tokens))
        if len(tokens) != len(self.columns):
            raise ColumnCountMismatchError(line_number, len(self.columns), len(tokens), text)
        sanitized = sanitize_row(tokens, self.config.sanitize_columns, line_number)
        values = convert_row(sanitized, self.columns, self.headers, line_number)
        return TypedRecord(line_number, tuple(zip(self.headers, values)))

    def data_lines(self, lines: Iterable[str]) -> Iterator[AdmittedLine]:
        """
        Admit lines, consume the header, yield the data lines.

        Moves AWAITING_HEADER -> STREAMING_ROWS. Raises HeaderMissingError
        when a header is required and the source ends first.
        """
        if self._started:
            raise RuntimeError("RowAssembler is single-use; create a new one per run")
        self._started = True
        opts = self.config.options
        logger.debug(
            "parse_started",
            extra={
                "first_line_is_header": opts.first_line_is_header,
                "materialized": self._line_filter.materializes,
            },
        )
        if not opts.first_line_is_header:
            self.state = ParserState.STREAMING_ROWS
        try:
            for admitted in self._line_filter.admit(lines):
                self._current_line = admitted.line_number
                if admitted.is_header:
                    self._layout_from_header(admitted)
                    self.state = ParserState.STREAMING_ROWS
                    continue
                yield admitted
            if self.state is ParserState.AWAITING_HEADER:
                self._current_line = None
                raise HeaderMissingError()
        finally:
            self._sync_filter_stats()

    def records(self, lines: Iterable[str]) -> Iterator[TypedRecord]:
        """Lazily yield one TypedRecord per admitted data line."""
        try:
            for admitted in self.data_lines(lines):
                record = self.process_line(admitted.line_number, admitted.text)
                self.stats.rows_emitted += 1
                yield record
        except CsvIngestionError as exc:
            self.fail(exc)
            raise
        self.state = ParserState.DONE
        logger.info(
            "parse_completed",
            extra={
                "lines_read": self.stats.lines_read,
                "rows_emitted": self.stats.rows_emitted,
                "lines_skipped": len(self.stats.skipped_line_numbers),
            },
        )

    # ------------------------------------------------------------------
    # Failure and bookkeeping
    # ------------------------------------------------------------------

    def fail(self, exc: CsvIngestionError) -> None:
        """Move to FAILED, keeping the error and the line it belongs to."""
        self.state = ParserState.FAILED
        self.failure = exc
        self.failed_line = getattr(exc, "line_number", None) or self._current_line
        logger.warning(
            "row_failed",
            extra={
                "line_number": self.failed_line,
                "error_code": exc.code,
                "error_msg": str(exc),
            },
        )

    def _sync_filter_stats(self) -> None:
        lf = self._line_filter
        self.stats.lines_read = lf.lines_read
        self.stats.skipped_line_numbers = list(lf.skipped_line_numbers)
        self.stats.skipped_lines = list(lf.skipped_lines)


def parse_lines(config: ParserConfig, lines: Iterable[str]) -> Iterator[TypedRecord]:
    """Convenience: a fresh RowAssembler's records()."""
    return RowAssembler(config).records(lines)
