"""Tests for the typed exception hierarchy."""

import pytest

from csv_ingestion.exceptions import (
    ColumnCountMismatchError,
    ColumnIndexOutOfRangeError,
    ConfigurationInconsistencyError,
    CsvIngestionError,
    HeaderMissingError,
    InvalidConfigurationError,
    InvalidPatternError,
    MalformedLineError,
    RegexNoMatchError,
    SanitizationError,
    StrayEnclosureError,
    TypeConversionError,
    UnterminatedEnclosureError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc_cls, parent",
        [
            (UnterminatedEnclosureError, MalformedLineError),
            (StrayEnclosureError, MalformedLineError),
            (ColumnCountMismatchError, MalformedLineError),
            (RegexNoMatchError, SanitizationError),
            (InvalidPatternError, SanitizationError),
            (ColumnIndexOutOfRangeError, SanitizationError),
            (TypeConversionError, CsvIngestionError),
            (ConfigurationInconsistencyError, CsvIngestionError),
            (HeaderMissingError, CsvIngestionError),
            (InvalidConfigurationError, CsvIngestionError),
        ],
    )
    def test_subclassing(self, exc_cls, parent):
        assert issubclass(exc_cls, parent)

    def test_codes_are_unique(self):
        classes = [
            CsvIngestionError,
            InvalidConfigurationError,
            MalformedLineError,
            UnterminatedEnclosureError,
            StrayEnclosureError,
            ColumnCountMismatchError,
            SanitizationError,
            RegexNoMatchError,
            InvalidPatternError,
            ColumnIndexOutOfRangeError,
            TypeConversionError,
            ConfigurationInconsistencyError,
            HeaderMissingError,
        ]
        codes = [c.code for c in classes]
        assert len(set(codes)) == len(codes)


class TestMessages:
    def test_row_context_in_str(self):
        err = UnterminatedEnclosureError(7, 2, '"a')
        assert str(err).endswith("(line 7, column 2)")

    def test_line_only(self):
        err = ColumnCountMismatchError(3, expected=2, actual=4)
        assert str(err) == "Expected 2 columns, got 4 (line 3)"

    def test_no_context(self):
        assert str(HeaderMissingError()) == "Header line required but no line was admitted"

    def test_invalid_configuration_keeps_fragment(self):
        fragment = {"separatorChar": ""}
        err = InvalidConfigurationError("bad separator", fragment)
        assert err.config_fragment is fragment
        assert str(err) == "bad separator"
