"""
Sanitizer chain executor: ordered text transforms per column.

Entries run strictly in document order; global entries apply to every token,
positional entries only to the token at their idx. Scope does not reorder
anything, so a later global entry sees the output of an earlier positional
one and vice versa. Pure functions of (tokens, chain).
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Sequence

from csv_ingestion.domain.types import (
    Casing,
    CasingMode,
    Eradicate,
    RegexTake,
    Replace,
    SanitizerChainEntry,
    SanitizerSpec,
    Trim,
    TrimMode,
)
from csv_ingestion.exceptions import (
    ColumnIndexOutOfRangeError,
    InvalidPatternError,
    RegexNoMatchError,
)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _regex_take(
    token: str,
    spec: RegexTake,
    line_number: int | None,
    column_index: int | None,
) -> str:
    try:
        rx = _compile(spec.pattern)
    except re.error as exc:
        raise InvalidPatternError(
            f"regexTake pattern {spec.pattern!r} does not compile: {exc}",
            line_number=line_number,
            column_index=column_index,
            value=token,
            config_fragment=spec,
        ) from exc
    match = rx.search(token)
    if match is None:
        raise RegexNoMatchError(
            f"regexTake pattern {spec.pattern!r} does not match",
            line_number=line_number,
            column_index=column_index,
            value=token,
            config_fragment=spec,
        )
    if rx.groups < 1 or match.group(1) is None:
        raise RegexNoMatchError(
            f"regexTake pattern {spec.pattern!r} has no capture group #1 match",
            line_number=line_number,
            column_index=column_index,
            value=token,
            config_fragment=spec,
        )
    return match.group(1)


def apply_sanitizer(
    token: str,
    spec: SanitizerSpec,
    *,
    line_number: int | None = None,
    column_index: int | None = None,
) -> str:
    """
    Apply one sanitizer to one token.

    line_number and column_index are only used as error context.

    Raises:
        RegexNoMatchError: regexTake found nothing to take.
        InvalidPatternError: regexTake pattern does not compile.
    """
    if isinstance(spec, Trim):
        if spec.mode is TrimMode.LEADING:
            return token.lstrip()
        if spec.mode is TrimMode.TRAILING:
            return token.rstrip()
        return token.strip()
    if isinstance(spec, Casing):
        if spec.mode is CasingMode.TO_UPPER:
            return token.upper()
        return token.lower()
    if isinstance(spec, Eradicate):
        for s in spec.substrings:
            if s:
                token = token.replace(s, "")
        return token
    if isinstance(spec, Replace):
        for pair in spec.pairs:
            if pair.from_:
                token = token.replace(pair.from_, pair.to)
        return token
    if isinstance(spec, RegexTake):
        return _regex_take(token, spec, line_number, column_index)
    raise TypeError(f"Unsupported sanitizer: {spec!r}")


def apply_chain(
    token: str,
    sanitizers: Sequence[SanitizerSpec],
    *,
    line_number: int | None = None,
    column_index: int | None = None,
) -> str:
    for spec in sanitizers:
        token = apply_sanitizer(
            token, spec, line_number=line_number, column_index=column_index
        )
    return token


def sanitize_row(
    tokens: Sequence[str],
    chain: Sequence[SanitizerChainEntry],
    line_number: int | None = None,
) -> list[str]:
    """
    Return a new token list of the same length with every entry applied.

    Raises:
        ColumnIndexOutOfRangeError: a positional entry's idx is not a column
            of this row.
        SanitizationError: any sanitizer failure, with line and column set.
    """
    out = list(tokens)
    for entry in chain:
        if not entry.is_global and not 0 <= entry.idx < len(out):
            raise ColumnIndexOutOfRangeError(line_number, entry.idx, len(out), entry)
        for i, token in enumerate(out):
            if entry.applies_to(i):
                out[i] = apply_chain(
                    token, entry.sanitizers, line_number=line_number, column_index=i
                )
    return out
