"""Tests for the typed value model."""

import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from csv_ingestion.domain.values import (
    INTEGER_RANGES,
    TypedValue,
    ValueType,
    expected_pattern,
    format_value,
    null_value,
    parse_patterns,
    translate_pattern,
    value_from_string,
)


class TestValueType:
    def test_spellings(self):
        assert ValueType("UInt128") is ValueType.UINT128
        assert ValueType("NaiveDateTime") is ValueType.NAIVE_DATE_TIME

    def test_classification(self):
        assert ValueType.DATE_TIME.is_temporal
        assert not ValueType.DECIMAL.is_temporal
        assert ValueType.INT128.is_integer
        assert not ValueType.FLOAT32.is_integer


class TestIntegers:
    @pytest.mark.parametrize("value_type", list(INTEGER_RANGES))
    def test_bounds_accepted(self, value_type):
        lo, hi = INTEGER_RANGES[value_type]
        assert value_from_string(str(hi), value_type).value == hi
        assert value_from_string(str(lo), value_type).value == lo

    @pytest.mark.parametrize("value_type", list(INTEGER_RANGES))
    def test_one_past_bounds_rejected(self, value_type):
        lo, hi = INTEGER_RANGES[value_type]
        with pytest.raises(ValueError):
            value_from_string(str(hi + 1), value_type)
        with pytest.raises(ValueError):
            value_from_string(str(lo - 1), value_type)

    def test_widths(self):
        assert INTEGER_RANGES[ValueType.INT8] == (-128, 127)
        assert INTEGER_RANGES[ValueType.UINT64] == (0, 2**64 - 1)

    @pytest.mark.parametrize("text", ["1.0", " 1", "1_000", "0x10", "", "1e3", "١"])
    def test_non_decimal_rejected(self, text):
        with pytest.raises(ValueError):
            value_from_string(text, ValueType.INT64)

    def test_plus_sign(self):
        assert value_from_string("+5", ValueType.UINT8).value == 5
        assert value_from_string("+5", ValueType.INT8).value == 5

    def test_minus_zero_unsigned_rejected(self):
        with pytest.raises(ValueError):
            value_from_string("-0", ValueType.UINT8)


class TestFloats:
    def test_float64(self):
        assert value_from_string("10.12", ValueType.FLOAT64).value == 10.12
        assert value_from_string("1e-3", ValueType.FLOAT64).value == 0.001

    def test_float32_rounding(self):
        v = value_from_string("0.1", ValueType.FLOAT32).value
        assert v != 0.1
        assert math.isclose(v, 0.1, rel_tol=1e-7)

    @pytest.mark.parametrize("text", ["1e39", "-1e39", "3.5e38"])
    def test_float32_overflow(self, text):
        with pytest.raises(ValueError, match="out of range"):
            value_from_string(text, ValueType.FLOAT32)

    def test_float32_largest_finite_accepted(self):
        assert math.isfinite(value_from_string("3.4e38", ValueType.FLOAT32).value)

    def test_float32_explicit_infinity_accepted(self):
        assert value_from_string("-inf", ValueType.FLOAT32).value == -math.inf
        assert math.isinf(value_from_string("Infinity", ValueType.FLOAT32).value)

    def test_float64_overflow(self):
        with pytest.raises(ValueError, match="out of range"):
            value_from_string("1e400", ValueType.FLOAT64)

    def test_special_values(self):
        assert math.isinf(value_from_string("inf", ValueType.FLOAT64).value)
        assert math.isnan(value_from_string("NaN", ValueType.FLOAT64).value)

    @pytest.mark.parametrize("text", ["", "1,5", "abc", "1.2.3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            value_from_string(text, ValueType.FLOAT64)


class TestOtherScalars:
    @pytest.mark.parametrize("text, expected", [("true", True), ("FALSE", False), ("1", True), ("0", False)])
    def test_bool(self, text, expected):
        assert value_from_string(text, ValueType.BOOL).value is expected

    @pytest.mark.parametrize("text", ["yes", "", "2", "t"])
    def test_bool_rejects_other_spellings(self, text):
        with pytest.raises(ValueError):
            value_from_string(text, ValueType.BOOL)

    def test_decimal(self):
        assert value_from_string("-0.50", ValueType.DECIMAL).value == Decimal("-0.50")

    @pytest.mark.parametrize("text", ["NaN", "Infinity", "1,000", ""])
    def test_decimal_rejects(self, text):
        with pytest.raises(ValueError):
            value_from_string(text, ValueType.DECIMAL)

    def test_char(self):
        assert value_from_string("x", ValueType.CHAR).value == "x"
        with pytest.raises(ValueError):
            value_from_string("", ValueType.CHAR)

    def test_null_value(self):
        tv = null_value(ValueType.DECIMAL)
        assert tv == TypedValue(ValueType.DECIMAL, None)
        assert tv.is_null


class TestTemporal:
    def test_naive_datetime_fraction_round_trip(self):
        tv = value_from_string("2022-12-31T10:20:30.500", ValueType.NAIVE_DATE_TIME)
        assert tv.value == datetime(2022, 12, 31, 10, 20, 30, 500000)
        assert format_value(tv, "%Y-%m-%dT%H:%M:%S.%f")[:23] == "2022-12-31T10:20:30.500"

    @pytest.mark.parametrize(
        "text, micros",
        [
            ("2022-12-31T10:20:30.1234567", 123456),
            ("2022-12-31T10:20:30.123456789", 123456),
            ("2022-12-31T10:20:30.999999999", 999999),
        ],
    )
    def test_naive_datetime_nanosecond_fraction_truncated(self, text, micros):
        tv = value_from_string(text, ValueType.NAIVE_DATE_TIME)
        assert tv.value == datetime(2022, 12, 31, 10, 20, 30, micros)

    def test_fraction_longer_than_nine_digits_rejected(self):
        with pytest.raises(ValueError):
            value_from_string("2022-12-31T10:20:30.1234567891", ValueType.NAIVE_DATE_TIME)

    def test_datetime_nanosecond_fraction_with_offset(self):
        tv = value_from_string("2022-12-31T10:20:30.123456789+0100", ValueType.DATE_TIME)
        assert tv.value.microsecond == 123456
        assert tv.value.utcoffset() == timedelta(hours=1)

    def test_custom_pattern_fraction_is_optional(self):
        pattern = "%Y-%m-%dT%H:%M:%S%.f"
        whole = value_from_string("2022-12-31T10:20:30", ValueType.NAIVE_DATE_TIME, pattern)
        fractional = value_from_string("2022-12-31T10:20:30.5", ValueType.NAIVE_DATE_TIME, pattern)
        assert whole.value == datetime(2022, 12, 31, 10, 20, 30)
        assert fractional.value == datetime(2022, 12, 31, 10, 20, 30, 500000)

    def test_custom_pattern_fraction_with_offset_is_optional(self):
        tv = value_from_string("2022-12-31T10:20:30+01:00", ValueType.DATE_TIME, "%FT%T%.f%:z")
        assert tv.value.utcoffset() == timedelta(hours=1)
        assert tv.value.microsecond == 0

    def test_naive_datetime_default_format(self):
        tv = value_from_string("2022-12-31T10:20:30", ValueType.NAIVE_DATE_TIME)
        assert format_value(tv) == "2022-12-31T10:20:30"

    def test_naive_datetime_rejects_offset(self):
        with pytest.raises(ValueError):
            value_from_string("2022-12-31T10:20:30+01:00", ValueType.NAIVE_DATE_TIME, "%FT%T%:z")

    def test_datetime_requires_offset(self):
        with pytest.raises(ValueError):
            value_from_string("2022-12-31T10:20:30", ValueType.DATE_TIME, "%FT%T")

    def test_datetime_default_pattern(self):
        tv = value_from_string("2022-12-31T10:20:30+0200", ValueType.DATE_TIME)
        assert tv.value.utcoffset() == timedelta(hours=2)

    def test_datetime_utc_z(self):
        tv = value_from_string("2022-12-31T10:20:30Z", ValueType.DATE_TIME)
        assert tv.value.tzinfo == timezone.utc

    def test_naive_date_custom_pattern(self):
        tv = value_from_string("31.12.2022", ValueType.NAIVE_DATE, "%d.%m.%Y")
        assert tv.value == date(2022, 12, 31)
        assert format_value(tv) == "2022-12-31"

    def test_invalid_calendar_date(self):
        with pytest.raises(ValueError):
            value_from_string("2022-02-30", ValueType.NAIVE_DATE)

    def test_expected_pattern(self):
        assert expected_pattern(ValueType.NAIVE_DATE) == "%Y-%m-%d"
        assert expected_pattern(ValueType.DATE_TIME, "%FT%T%:z") == "%FT%T%:z"
        assert expected_pattern(ValueType.INT8) is None


class TestTranslatePattern:
    @pytest.mark.parametrize(
        "chrono, strptime",
        [
            ("%FT%T%:z", "%Y-%m-%dT%H:%M:%S%z"),
            ("%F %T%.3f", "%Y-%m-%d %H:%M:%S.%f"),
            ("%T%.f", "%H:%M:%S.%f"),
            ("%d/%m/%Y", "%d/%m/%Y"),
            ("100%%", "100%%"),
        ],
    )
    def test_translation(self, chrono, strptime):
        assert translate_pattern(chrono) == strptime

    def test_fraction_directive_yields_both_variants(self):
        assert parse_patterns("%T%.f") == ("%H:%M:%S.%f", "%H:%M:%S")
        assert parse_patterns("%F %T%.3f") == ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S")

    def test_no_fraction_directive_yields_one_pattern(self):
        assert parse_patterns("%F") == ("%Y-%m-%d",)
        assert parse_patterns("%H:%M:%S.%f") == ("%H:%M:%S.%f",)


class TestFormatValue:
    def test_bool(self):
        assert format_value(TypedValue(ValueType.BOOL, True)) == "true"

    def test_null(self):
        assert format_value(null_value(ValueType.INT8)) is None

    def test_decimal_keeps_scale(self):
        assert format_value(value_from_string("1.50", ValueType.DECIMAL)) == "1.50"
