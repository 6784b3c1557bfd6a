"""
Ingest service: configuration + CSV file -> typed records.

Orchestrates the line source, the strict RowAssembler (or the lenient
wrapper when skip_errors is set) and structured logging (LogContext,
get_logger("services.ingest")). Materializes the records; callers that
want streaming use RowAssembler directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from csv_ingestion.adapters.line_source import iter_file_lines
from csv_ingestion.config.loader import load_config_document
from csv_ingestion.domain.types import ParserConfig, TypedRecord
from csv_ingestion.logging_config import LogContext, get_logger
from csv_ingestion.pipeline.assembler import ParseStats, RowAssembler
from csv_ingestion.pipeline.lenient import LenientRowReader, RowFailure

logger = get_logger("services.ingest")


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one ingest run. failures is empty unless skip_errors was set."""

    run_id: str
    source: str
    records: tuple[TypedRecord, ...]
    stats: ParseStats
    failures: tuple[RowFailure, ...] = field(default_factory=tuple)

    @property
    def success(self) -> bool:
        return not self.failures


def ingest_file(
    config: ParserConfig | Path | str,
    csv_path: Path | str,
    *,
    encoding: str = "utf-8",
    skip_errors: bool = False,
    max_failures: int | None = None,
) -> IngestResult:
    """
    Parse a whole CSV file.

    ``config`` is either a ParserConfig or the path of a configuration file.
    Strict by default: the first row error propagates as CsvIngestionError.
    With ``skip_errors`` failing rows are dropped and reported in
    ``IngestResult.failures``.
    """
    checksum = None
    if not isinstance(config, ParserConfig):
        config, checksum = load_config_document(config)
    csv_path = Path(csv_path)
    run_id = str(uuid4())

    with LogContext.bind(run_id=run_id, source=str(csv_path), config_checksum=checksum):
        lines = iter_file_lines(csv_path, encoding)
        failures: tuple[RowFailure, ...] = ()
        if skip_errors:
            reader = LenientRowReader(config, max_failures=max_failures)
            records = tuple(reader.records(lines))
            failures = tuple(reader.failures)
            stats = reader.stats
        else:
            assembler = RowAssembler(config)
            records = tuple(assembler.records(lines))
            stats = assembler.stats

        logger.info(
            "ingest_completed",
            extra={
                "rows_emitted": stats.rows_emitted,
                "rows_failed": len(failures),
                "lines_read": stats.lines_read,
            },
        )

    return IngestResult(
        run_id=run_id,
        source=str(csv_path),
        records=records,
        stats=stats,
        failures=failures,
    )
