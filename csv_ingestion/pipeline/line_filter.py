"""
Line admission filter: decides per physical line whether it is skipped,
taken as data, or is the header.

Two source modes, picked once at construction:
    streaming     lines are pulled lazily (the common case)
    materialized  the whole source is buffered first; only when
                  skip_from_end > 0, since the total line count must be known

Rule order: skip_from_start / skip_from_end, then prefix rules
(skip_by_prefix wins over take_by_prefix), then skip_by_regex, then
skip_empty, then header detection on the first surviving line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from csv_ingestion.domain.types import LineFilterRules
from csv_ingestion.exceptions import InvalidConfigurationError
from csv_ingestion.logging_config import get_logger

logger = get_logger("pipeline.line_filter")


@dataclass(frozen=True)
class AdmittedLine:
    """A physical line that survived filtering. line_number is 1-based."""

    line_number: int
    text: str
    is_header: bool = False


class SkipReason(str, Enum):
    """Why a line was dropped; the value is the rule name used in logs."""

    FROM_START = "skip_from_start"
    FROM_END = "skip_from_end"
    PREFIX = "skip_by_prefix"
    NOT_TAKEN = "take_by_prefix"
    REGEX = "skip_by_regex"
    EMPTY = "skip_empty"


class LineFilter:
    """Applies LineFilterRules to a line source. One instance per parse run."""

    def __init__(
        self,
        rules: LineFilterRules,
        *,
        first_line_is_header: bool = False,
        save_skipped_lines: bool = False,
    ):
        self.rules = rules
        self.first_line_is_header = first_line_is_header
        self.save_skipped_lines = save_skipped_lines
        try:
            self._skip_regexes = tuple(re.compile(p) for p in rules.skip_by_regex)
        except re.error as exc:
            raise InvalidConfigurationError(
                f"Invalid skip_by_regex pattern: {exc}", rules.skip_by_regex
            ) from exc
        self.lines_read = 0
        self.skipped_line_numbers: list[int] = []
        self.skipped_lines: list[tuple[int, str]] = []

    @property
    def materializes(self) -> bool:
        return self.rules.skip_from_end > 0

    def skip_reason(
        self, line_number: int, text: str, total: int | None = None
    ) -> SkipReason | None:
        """Return why the line is dropped, or None if it is admitted."""
        rules = self.rules
        if line_number <= rules.skip_from_start:
            return SkipReason.FROM_START
        if total is not None and line_number > total - rules.skip_from_end:
            return SkipReason.FROM_END
        if rules.skip_by_prefix and text.startswith(rules.skip_by_prefix):
            return SkipReason.PREFIX
        if (
            rules.take_by_prefix
            and not rules.skip_by_prefix
            and not text.startswith(rules.take_by_prefix)
        ):
            return SkipReason.NOT_TAKEN
        if any(rx.search(text) for rx in self._skip_regexes):
            return SkipReason.REGEX
        if rules.skip_empty and not text.strip():
            return SkipReason.EMPTY
        return None

    def _numbered(self, lines: Iterable[str]) -> Iterator[tuple[int, str, int | None]]:
        if self.materializes:
            buffered = list(lines)
            total = len(buffered)
            logger.debug("source_materialized", extra={"total_lines": total})
            for i, text in enumerate(buffered, start=1):
                yield i, text, total
        else:
            for i, text in enumerate(lines, start=1):
                yield i, text, None

    def admit(self, lines: Iterable[str]) -> Iterator[AdmittedLine]:
        """Yield admitted lines lazily; the first one is the header if configured."""
        header_pending = self.first_line_is_header
        for line_number, text, total in self._numbered(lines):
            self.lines_read = line_number
            reason = self.skip_reason(line_number, text, total)
            if reason is not None:
                self.skipped_line_numbers.append(line_number)
                if self.save_skipped_lines:
                    self.skipped_lines.append((line_number, text))
                logger.debug(
                    "line_skipped", extra={"line_number": line_number, "reason": reason.value}
                )
                continue
            if header_pending:
                header_pending = False
                yield AdmittedLine(line_number, text, is_header=True)
            else:
                yield AdmittedLine(line_number, text)
