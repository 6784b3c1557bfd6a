"""
Pytest fixtures for the csv_ingestion test suite.

Provides:
- Config builders for the common parser setups
- A sample configuration document in the camelCase document shape
"""

from typing import Any

import pytest

from csv_ingestion.domain.types import (
    LineFilterRules,
    ParserConfig,
    ParserOptions,
    SanitizerChainEntry,
    TypeColumn,
)


@pytest.fixture
def make_config():
    """Build a ParserConfig with keyword overrides for options and sections."""

    def _make(
        *,
        separator: str = ",",
        enclosure: str | None = '"',
        first_line_is_header: bool = True,
        save_skipped_lines: bool = False,
        lines: LineFilterRules | None = None,
        sanitize_columns: tuple[SanitizerChainEntry, ...] = (),
        type_columns: tuple[TypeColumn, ...] = (),
    ) -> ParserConfig:
        return ParserConfig(
            options=ParserOptions(
                separator=separator,
                enclosure=enclosure,
                lines=lines or LineFilterRules(),
                first_line_is_header=first_line_is_header,
                save_skipped_lines=save_skipped_lines,
            ),
            sanitize_columns=sanitize_columns,
            type_columns=type_columns,
        )

    return _make


@pytest.fixture
def sample_document() -> dict[str, Any]:
    return {
        "comment": "Some optional explanation",
        "parserOpts": {
            "comment": "Some optional explanation",
            "separatorChar": ",",
            "enclosureChar": '"',
            "lines": {
                "skipLinesFromStart": 1,
                "skipLinesByStartswith": ["#", "-"],
                "skipEmptyLines": True,
            },
            "saveSkippedLines": False,
            "firstLineIsHeader": True,
        },
        "sanitizeColumns": [
            {"comment": "global", "sanitizers": [{"type": "trim", "spec": "all"}]},
            {"idxs": [0], "sanitizers": [{"type": "casing", "spec": "toLower"}]},
            {"idxs": [1], "sanitizers": [{"type": "casing", "spec": "toUpper"}]},
        ],
        "typeColumns": [
            {"comment": "0", "header": "Header-1", "targetType": "Char"},
            {"comment": "1", "header": "Header-2", "targetType": "String"},
            {"comment": "2", "header": "Header-3", "targetType": "Int8"},
            {"comment": "3", "header": "Header-4", "targetType": "DateTime", "srcPattern": "%FT%T%:z"},
        ],
    }
