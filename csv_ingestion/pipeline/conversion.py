"""
Typed conversion: sanitized token + TypeColumn -> TypedValue.

Thin layer over the value model (csv_ingestion.domain.values) that adds
map_to_none handling and row/column error context. Pure functions with no
shared mutable state; safe to run in parallel across rows and columns.
A failed conversion always raises; nothing is silently defaulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from csv_ingestion.domain.types import TypeColumn
from csv_ingestion.domain.values import (
    TypedValue,
    ValueType,
    expected_pattern,
    null_value,
    value_from_string,
)
from csv_ingestion.exceptions import TypeConversionError


@dataclass(frozen=True)
class CoercionResult:
    """Result of coercing a token, for callers that collect instead of raise."""

    success: bool
    value: TypedValue | None = None
    error: TypeConversionError | None = None


def convert_token(
    token: str,
    column: TypeColumn,
    *,
    line_number: int | None = None,
    column_index: int | None = None,
    header: str | None = None,
) -> TypedValue:
    """
    Convert one sanitized token to its column's target type.

    Raises:
        TypeConversionError: token is not a valid literal of the target type,
            naming the expected pattern for temporal types.
    """
    if column.map_to_none and token in column.map_to_none:
        return null_value(column.target_type)
    if column.target_type is ValueType.STRING:
        return TypedValue(ValueType.STRING, token)
    try:
        return value_from_string(token, column.target_type, column.src_pattern)
    except ValueError as exc:
        pattern = expected_pattern(column.target_type, column.src_pattern)
        detail = f"; expected pattern {pattern!r}" if pattern else ""
        raise TypeConversionError(
            f"Cannot convert {token!r} to {column.target_type.value}: {exc}{detail}",
            target_type=column.target_type.value,
            value=token,
            expected_pattern=pattern,
            header=header,
            line_number=line_number,
            column_index=column_index,
            config_fragment=column,
        ) from exc


def coerce_token(token: str, column: TypeColumn) -> CoercionResult:
    """Non-raising variant of convert_token."""
    try:
        return CoercionResult(success=True, value=convert_token(token, column))
    except TypeConversionError as exc:
        return CoercionResult(success=False, error=exc)


def convert_row(
    tokens: Sequence[str],
    columns: Sequence[TypeColumn],
    headers: Sequence[str],
    line_number: int | None = None,
) -> tuple[TypedValue, ...]:
    """Convert a sanitized row; tokens, columns and headers are aligned by position."""
    return tuple(
        convert_token(
            token,
            column,
            line_number=line_number,
            column_index=i,
            header=headers[i],
        )
        for i, (token, column) in enumerate(zip(tokens, columns))
    )
