"""
csv_ingestion.domain.types -- Pure frozen dataclasses for the parse pipeline.

ZERO I/O. Built once per parse run (by the config loader or directly in
code) and shared read-only by every stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union

from csv_ingestion.domain.values import TypedValue, ValueType
from csv_ingestion.exceptions import InvalidConfigurationError


# =============================================================================
# Parser options
# =============================================================================


@dataclass(frozen=True)
class LineFilterRules:
    """
    Line admission rules, applied in a fixed order.

    Positional trimming (start/end), then prefix filtering, then regex
    filtering, then empty-line filtering. When both prefix lists are set,
    skip_by_prefix wins.
    """

    skip_from_start: int = 0
    skip_from_end: int = 0  # forces full buffering of the source
    skip_by_prefix: tuple[str, ...] = ()
    take_by_prefix: tuple[str, ...] = ()
    skip_by_regex: tuple[str, ...] = ()
    skip_empty: bool = False

    def __post_init__(self) -> None:
        if self.skip_from_start < 0 or self.skip_from_end < 0:
            raise InvalidConfigurationError(
                "skip_from_start/skip_from_end must not be negative", self
            )


@dataclass(frozen=True)
class ParserOptions:
    """Tokenizer and line-handling options. Separator and enclosure must differ."""

    separator: str = ","
    enclosure: str | None = '"'
    lines: LineFilterRules = field(default_factory=LineFilterRules)
    first_line_is_header: bool = True
    save_skipped_lines: bool = False

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise InvalidConfigurationError(
                f"separator must be a single character, got {self.separator!r}", self
            )
        if self.enclosure is not None:
            if len(self.enclosure) != 1:
                raise InvalidConfigurationError(
                    f"enclosure must be a single character, got {self.enclosure!r}", self
                )
            if self.enclosure == self.separator:
                raise InvalidConfigurationError(
                    "separator and enclosure must differ", self
                )


# =============================================================================
# Sanitizers (closed variant set)
# =============================================================================


class TrimMode(str, Enum):
    ALL = "all"
    LEADING = "leading"
    TRAILING = "trailing"


class CasingMode(str, Enum):
    TO_LOWER = "toLower"
    TO_UPPER = "toUpper"


@dataclass(frozen=True)
class Trim:
    mode: TrimMode = TrimMode.ALL


@dataclass(frozen=True)
class Casing:
    mode: CasingMode


@dataclass(frozen=True)
class Eradicate:
    """Delete every occurrence of each substring, in list order."""

    substrings: tuple[str, ...]


@dataclass(frozen=True)
class RegexTake:
    """Replace the token with capture group 1 of the first match."""

    pattern: str


@dataclass(frozen=True)
class ReplacePair:
    from_: str
    to: str


@dataclass(frozen=True)
class Replace:
    """Literal substring replacements, applied in list order."""

    pairs: tuple[ReplacePair, ...]


SanitizerSpec = Union[Trim, Casing, Eradicate, RegexTake, Replace]


@dataclass(frozen=True)
class SanitizerChainEntry:
    """One sanitizeColumns entry. idx None means the entry is global."""

    sanitizers: tuple[SanitizerSpec, ...]
    idx: int | None = None
    comment: str | None = None

    @property
    def is_global(self) -> bool:
        return self.idx is None

    def applies_to(self, column_index: int) -> bool:
        return self.idx is None or self.idx == column_index


# =============================================================================
# Column typing
# =============================================================================


@dataclass(frozen=True)
class TypeColumn:
    """Target type of one output column; position is the tuple position."""

    target_type: ValueType = ValueType.STRING
    rename: str | None = None
    src_pattern: str | None = None  # temporal types only
    map_to_none: tuple[str, ...] = ()  # tokens that become a null value
    comment: str | None = None


# =============================================================================
# Whole configuration
# =============================================================================


@dataclass(frozen=True)
class ParserConfig:
    """Parsed configuration document, consumed read-only by the pipeline."""

    options: ParserOptions = field(default_factory=ParserOptions)
    sanitize_columns: tuple[SanitizerChainEntry, ...] = ()
    type_columns: tuple[TypeColumn, ...] = ()  # empty: every column is String
    comment: str | None = None


# =============================================================================
# Output
# =============================================================================


@dataclass(frozen=True)
class TypedRecord:
    """One data row: ordered (header, value) pairs plus its physical line number."""

    line_number: int
    cells: tuple[tuple[str, TypedValue], ...]

    def headers(self) -> tuple[str, ...]:
        return tuple(h for h, _ in self.cells)

    def values(self) -> tuple[Any, ...]:
        """Plain Python values, in column order."""
        return tuple(v.value for _, v in self.cells)

    def as_dict(self) -> dict[str, Any]:
        """Header -> plain value. Later duplicates of a header win."""
        return {h: v.value for h, v in self.cells}

    def __getitem__(self, key: int | str) -> TypedValue:
        if isinstance(key, int):
            return self.cells[key][1]
        for h, v in self.cells:
            if h == key:
                return v
        raise KeyError(key)

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[tuple[str, TypedValue]]:
        return iter(self.cells)
