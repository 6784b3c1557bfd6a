"""
Typed Exception Hierarchy for CSV ingestion.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Ingestion errors must be attributable: which line, which column, which
stage, which piece of configuration. Callers catch by type, read structured
attributes, and never parse message strings.

Every exception:
  1. Is a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable)
  3. Carries structured DATA (line_number, column_index, value, config_fragment)

Example:
    try:
        records = list(RowAssembler(config).records(lines))
    except TypeConversionError as e:
        log.warning("bad cell", extra={"line": e.line_number, "column": e.column_index})
    except MalformedLineError as e:
        reject_file(e.code, e.line_number)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    CsvIngestionError (base)
    |
    +-- InvalidConfigurationError
    |
    +-- MalformedLineError
    |   +-- UnterminatedEnclosureError
    |   +-- StrayEnclosureError
    |   +-- ColumnCountMismatchError
    |
    +-- SanitizationError
    |   +-- RegexNoMatchError
    |   +-- InvalidPatternError
    |   +-- ColumnIndexOutOfRangeError
    |
    +-- TypeConversionError
    |
    +-- ConfigurationInconsistencyError
    |
    +-- HeaderMissingError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | Document shape is unusable
                | CONFIGURATION_INCONSISTENCY | Typings disagree with observed data
                | HEADER_MISSING              | Header required, source exhausted
----------------|-----------------------------|-----------------------------------------
Line            | UNTERMINATED_ENCLOSURE      | Line ended inside an enclosure
                | STRAY_ENCLOSURE             | Enclosure char outside an enclosure
                | COLUMN_COUNT_MISMATCH       | Token count != expected columns
----------------|-----------------------------|-----------------------------------------
Sanitization    | REGEX_NO_MATCH              | regexTake found no capture group 1
                | INVALID_PATTERN             | regexTake pattern does not compile
                | COLUMN_INDEX_OUT_OF_RANGE   | Positional entry idx >= token count
----------------|-----------------------------|-----------------------------------------
Conversion      | TYPE_CONVERSION_FAILURE     | Token not valid for the target type

===============================================================================
"""

from __future__ import annotations

from typing import Any


class CsvIngestionError(Exception):
    """
    Base exception for all ingestion errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CSV_INGESTION_ERROR"


class InvalidConfigurationError(CsvIngestionError):
    """The configuration document cannot be turned into a ParserConfig."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, message: str, config_fragment: Any = None):
        self.config_fragment = config_fragment
        super().__init__(message)


# Row-scoped errors


class RowError(CsvIngestionError):
    """
    Base for errors that belong to one physical line.

    Not part of the public taxonomy by itself; it holds the attributes every
    row-scoped error shares.
    """

    code: str = "ROW_ERROR"

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        column_index: int | None = None,
        value: str | None = None,
        config_fragment: Any = None,
    ):
        self.line_number = line_number
        self.column_index = column_index
        self.value = value
        self.config_fragment = config_fragment
        super().__init__(message)

    def __str__(self) -> str:
        msg = super().__str__()
        where = []
        if self.line_number is not None:
            where.append(f"line {self.line_number}")
        if self.column_index is not None:
            where.append(f"column {self.column_index}")
        if where:
            return f"{msg} ({', '.join(where)})"
        return msg


class MalformedLineError(RowError):
    """The line cannot be split into the expected tokens."""

    code: str = "MALFORMED_LINE"


class UnterminatedEnclosureError(MalformedLineError):
    """End of line reached while an enclosure was still open."""

    code: str = "UNTERMINATED_ENCLOSURE"

    def __init__(self, line_number: int | None, column_index: int, value: str):
        super().__init__(
            f"Unterminated enclosure in token #{column_index}",
            line_number=line_number,
            column_index=column_index,
            value=value,
        )


class StrayEnclosureError(MalformedLineError):
    """
    Enclosure character where none is allowed.

    Either inside a token that was not opened with an enclosure, or directly
    after a closing enclosure without a separator.
    """

    code: str = "STRAY_ENCLOSURE"

    def __init__(self, line_number: int | None, column_index: int, value: str):
        super().__init__(
            f"Enclosure character not allowed here in token #{column_index}",
            line_number=line_number,
            column_index=column_index,
            value=value,
        )


class ColumnCountMismatchError(MalformedLineError):
    """Token count of a data line differs from the expected column count."""

    code: str = "COLUMN_COUNT_MISMATCH"

    def __init__(self, line_number: int | None, expected: int, actual: int, value: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} columns, got {actual}",
            line_number=line_number,
            value=value,
        )


class SanitizationError(RowError):
    """A sanitizer could not be applied to a token."""

    code: str = "SANITIZATION_FAILURE"


class RegexNoMatchError(SanitizationError):
    """regexTake pattern did not match, or has no capture group 1."""

    code: str = "REGEX_NO_MATCH"


class InvalidPatternError(SanitizationError):
    """regexTake pattern does not compile."""

    code: str = "INVALID_PATTERN"


class ColumnIndexOutOfRangeError(SanitizationError):
    """Positional sanitizer entry addresses a column the row does not have."""

    code: str = "COLUMN_INDEX_OUT_OF_RANGE"

    def __init__(self, line_number: int | None, column_index: int, column_count: int, config_fragment: Any = None):
        self.column_count = column_count
        super().__init__(
            f"Sanitizer column index {column_index} out of range for {column_count} tokens",
            line_number=line_number,
            column_index=column_index,
            config_fragment=config_fragment,
        )


class TypeConversionError(RowError):
    """
    A sanitized token is not a valid value of its column's target type.

    target_type and expected_pattern (temporal types only) are kept as
    attributes next to the shared row context.
    """

    code: str = "TYPE_CONVERSION_FAILURE"

    def __init__(
        self,
        message: str,
        *,
        target_type: str,
        value: str,
        expected_pattern: str | None = None,
        header: str | None = None,
        line_number: int | None = None,
        column_index: int | None = None,
        config_fragment: Any = None,
    ):
        self.target_type = target_type
        self.expected_pattern = expected_pattern
        self.header = header
        super().__init__(
            message,
            line_number=line_number,
            column_index=column_index,
            value=value,
            config_fragment=config_fragment,
        )


class ConfigurationInconsistencyError(RowError):
    """Configuration disagrees with the data where it first manifests."""

    code: str = "CONFIGURATION_INCONSISTENCY"


class HeaderMissingError(RowError):
    """A header line was required but the source ended first."""

    code: str = "HEADER_MISSING"

    def __init__(self) -> None:
        super().__init__("Header line required but no line was admitted")
