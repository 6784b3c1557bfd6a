"""
Typed values: the closed set of column types and their construction from strings.

This is the value model the conversion stage calls into. It owns the
representation (``TypedValue``) and the per-type string parsers; it knows
nothing about rows, columns or configuration. ZERO I/O.

Accepted literal spellings (public contract):
    Bool          true / false / 1 / 0, case-insensitive, nothing else
    Int*/UInt*    ASCII decimal digits with optional sign (``+`` only for
                  unsigned), range checked per bit width
    Float32/64    decimal or exponent notation, ``inf``/``infinity``/``nan``;
                  a finite literal that overflows the width is rejected
    Decimal       decimal or exponent notation, finite, scale preserved
    NaiveDate     default ``%Y-%m-%d``
    NaiveDateTime default ``%Y-%m-%dT%H:%M:%S`` with optional ``.%f``
    DateTime      default ``%Y-%m-%dT%H:%M:%S%z`` with optional ``.%f``

Fractional seconds take up to nine digits; digits past microseconds are
truncated.
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


class ValueType(str, Enum):
    """Supported column target types. Values are the configuration spellings."""

    CHAR = "Char"
    STRING = "String"
    INT8 = "Int8"
    INT16 = "Int16"
    INT32 = "Int32"
    INT64 = "Int64"
    INT128 = "Int128"
    UINT8 = "UInt8"
    UINT16 = "UInt16"
    UINT32 = "UInt32"
    UINT64 = "UInt64"
    UINT128 = "UInt128"
    FLOAT32 = "Float32"
    FLOAT64 = "Float64"
    BOOL = "Bool"
    DECIMAL = "Decimal"
    NAIVE_DATE = "NaiveDate"
    NAIVE_DATE_TIME = "NaiveDateTime"
    DATE_TIME = "DateTime"  # offset-aware

    @property
    def is_temporal(self) -> bool:
        return self in _TEMPORAL_TYPES

    @property
    def is_integer(self) -> bool:
        return self in INTEGER_RANGES


@dataclass(frozen=True)
class TypedValue:
    """A converted cell. ``value`` is None for a null (see map_to_none)."""

    value_type: ValueType
    value: Any

    @property
    def is_null(self) -> bool:
        return self.value is None


def _signed(bits: int) -> tuple[int, int]:
    return (-(2 ** (bits - 1)), 2 ** (bits - 1) - 1)


def _unsigned(bits: int) -> tuple[int, int]:
    return (0, 2**bits - 1)


INTEGER_RANGES: dict[ValueType, tuple[int, int]] = {
    ValueType.INT8: _signed(8),
    ValueType.INT16: _signed(16),
    ValueType.INT32: _signed(32),
    ValueType.INT64: _signed(64),
    ValueType.INT128: _signed(128),
    ValueType.UINT8: _unsigned(8),
    ValueType.UINT16: _unsigned(16),
    ValueType.UINT32: _unsigned(32),
    ValueType.UINT64: _unsigned(64),
    ValueType.UINT128: _unsigned(128),
}

_TEMPORAL_TYPES = frozenset(
    {ValueType.NAIVE_DATE, ValueType.NAIVE_DATE_TIME, ValueType.DATE_TIME}
)

# Primary default first; the fractional variant is also tried on parse.
DEFAULT_PATTERNS: dict[ValueType, tuple[str, ...]] = {
    ValueType.NAIVE_DATE: ("%Y-%m-%d",),
    ValueType.NAIVE_DATE_TIME: ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S.%f"),
    ValueType.DATE_TIME: ("%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S.%f%z"),
}

BOOL_TRUE = frozenset({"true", "1"})
BOOL_FALSE = frozenset({"false", "0"})

_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_INT_RE = re.compile(r"\+?[0-9]+")
_NUMERAL = r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_DECIMAL_RE = re.compile(_NUMERAL)
_FLOAT_RE = re.compile(rf"{_NUMERAL}|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

# chrono-style directives that strptime does not know
_CHRONO_DIRECTIVE_RE = re.compile(r"%%|%\.\d?f|%:z|%F|%T")
_CHRONO_FRACTION_RE = re.compile(r"%%|%\.\d?f")
_CHRONO_TRANSLATION = {"%:z": "%z", "%F": "%Y-%m-%d", "%T": "%H:%M:%S"}

# strptime's %f stops at six digits
_LONG_FRACTION_RE = re.compile(r"(\.[0-9]{6})[0-9]{1,3}(?![0-9])")


def translate_pattern(pattern: str) -> str:
    """Rewrite chrono-style shorthands (%F, %T, %:z, %.f) into strptime directives."""

    def _sub(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%%":
            return token
        if token.startswith("%."):
            return ".%f"
        return _CHRONO_TRANSLATION[token]

    return _CHRONO_DIRECTIVE_RE.sub(_sub, pattern)


def _drop_fraction(match: re.Match[str]) -> str:
    return match.group(0) if match.group(0) == "%%" else ""


def parse_patterns(pattern: str) -> tuple[str, ...]:
    """
    strptime patterns to try for a configured pattern.

    ``%.f`` marks an optional fraction, so a pattern using it yields the
    with-fraction and the without-fraction variant.
    """
    translated = translate_pattern(pattern)
    without = _CHRONO_FRACTION_RE.sub(_drop_fraction, pattern)
    if without == pattern:
        return (translated,)
    return (translated, translate_pattern(without))


# -----------------------------------------------------------------------------
# Per-type parsers (raise ValueError)
# -----------------------------------------------------------------------------


def parse_char(s: str) -> str:
    if len(s) != 1:
        raise ValueError(f"expected exactly one character, got {len(s)}")
    return s


def parse_integer(s: str, value_type: ValueType) -> int:
    lo, hi = INTEGER_RANGES[value_type]
    regex = _SIGNED_INT_RE if lo < 0 else _UNSIGNED_INT_RE
    if not regex.fullmatch(s):
        raise ValueError("not a decimal integer")
    n = int(s)
    if n < lo or n > hi:
        raise ValueError(f"out of range [{lo}, {hi}]")
    return n


def parse_float(s: str, value_type: ValueType) -> float:
    if not _FLOAT_RE.fullmatch(s):
        raise ValueError("not a decimal float")
    f = float(s)
    if value_type is ValueType.FLOAT32:
        try:
            (f,) = struct.unpack("f", struct.pack("f", f))
        except OverflowError as exc:
            raise ValueError("out of range for Float32") from exc
    if math.isinf(f) and "inf" not in s.lower():
        raise ValueError(f"out of range for {value_type.value}")
    return f


def parse_bool(s: str) -> bool:
    low = s.lower()
    if low in BOOL_TRUE:
        return True
    if low in BOOL_FALSE:
        return False
    raise ValueError("expected one of true/false/1/0")


def parse_decimal(s: str) -> Decimal:
    if not _DECIMAL_RE.fullmatch(s):
        raise ValueError("not a decimal numeral")
    try:
        return Decimal(s)
    except InvalidOperation as exc:  # pragma: no cover - regex already guards
        raise ValueError("not a decimal numeral") from exc


def _strptime_any(s: str, patterns: tuple[str, ...]) -> datetime:
    for fmt in patterns:
        candidate = _LONG_FRACTION_RE.sub(r"\1", s) if "%f" in fmt else s
        try:
            return datetime.strptime(candidate, fmt)
        except ValueError:
            continue
    raise ValueError("does not match the expected pattern")


def parse_temporal(s: str, value_type: ValueType, pattern: str | None = None) -> date | datetime:
    patterns = parse_patterns(pattern) if pattern else DEFAULT_PATTERNS[value_type]
    parsed = _strptime_any(s, patterns)
    if value_type is ValueType.NAIVE_DATE:
        return parsed.date()
    if value_type is ValueType.NAIVE_DATE_TIME:
        if parsed.tzinfo is not None:
            raise ValueError("NaiveDateTime must not carry an offset")
        return parsed
    if parsed.tzinfo is None:
        raise ValueError("DateTime requires an offset")
    return parsed


def expected_pattern(value_type: ValueType, pattern: str | None = None) -> str | None:
    """The pattern named in error messages for temporal types, else None."""
    if not value_type.is_temporal:
        return None
    return pattern or DEFAULT_PATTERNS[value_type][0]


# -----------------------------------------------------------------------------
# Construction entry point
# -----------------------------------------------------------------------------


def value_from_string(
    s: str,
    value_type: ValueType,
    pattern: str | None = None,
) -> TypedValue:
    """
    Build a TypedValue of ``value_type`` from ``s``. Pure function.

    Raises:
        ValueError: if ``s`` is not a valid literal of ``value_type``.
    """
    if value_type is ValueType.STRING:
        return TypedValue(value_type, s)
    if value_type is ValueType.CHAR:
        return TypedValue(value_type, parse_char(s))
    if value_type.is_integer:
        return TypedValue(value_type, parse_integer(s, value_type))
    if value_type in (ValueType.FLOAT32, ValueType.FLOAT64):
        return TypedValue(value_type, parse_float(s, value_type))
    if value_type is ValueType.BOOL:
        return TypedValue(value_type, parse_bool(s))
    if value_type is ValueType.DECIMAL:
        return TypedValue(value_type, parse_decimal(s))
    if value_type.is_temporal:
        return TypedValue(value_type, parse_temporal(s, value_type, pattern))
    raise ValueError(f"Unsupported value type: {value_type}")  # pragma: no cover


def null_value(value_type: ValueType) -> TypedValue:
    return TypedValue(value_type, None)


def format_value(tv: TypedValue, pattern: str | None = None) -> str | None:
    """
    Render a TypedValue back to text.

    Temporal values use ``pattern`` or the type's default; fractional seconds
    are only written when present.
    """
    v = tv.value
    if v is None:
        return None
    if tv.value_type.is_temporal:
        if pattern:
            return v.strftime(translate_pattern(pattern))
        fmt = DEFAULT_PATTERNS[tv.value_type][0]
        if isinstance(v, datetime) and v.microsecond:
            fmt = DEFAULT_PATTERNS[tv.value_type][1]
        return v.strftime(fmt)
    if tv.value_type is ValueType.BOOL:
        return "true" if v else "false"
    return str(v)
