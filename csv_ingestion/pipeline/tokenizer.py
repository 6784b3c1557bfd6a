"""
Delimited-line tokenizer.

RFC 4180 style splitting of one admitted line into raw string tokens. Works
for any single-character separator (comma, tab, pipe, ...) and an optional
single-character enclosure. Inside an enclosure a doubled enclosure
character stands for one literal enclosure character. There is no escaping
outside enclosures. Pure function; line_number is only error context.
"""

from __future__ import annotations

from enum import Enum

from csv_ingestion.exceptions import StrayEnclosureError, UnterminatedEnclosureError


class _State(Enum):
    SCAN = "scan"  # at the start of a token
    FIELD = "field"  # inside an unenclosed token
    ENCLOSED = "enclosed"  # inside an enclosure
    ENCLOSURE_SEEN = "enclosure_seen"  # enclosure char seen inside an enclosure


def tokenize_line(
    text: str,
    separator: str = ",",
    enclosure: str | None = '"',
    line_number: int | None = None,
) -> list[str]:
    """
    Split ``text`` into tokens.

    An empty line yields a single empty token; a trailing separator yields a
    trailing empty token.

    Raises:
        UnterminatedEnclosureError: the line ends inside an open enclosure.
        StrayEnclosureError: an enclosure character appears inside an
            unenclosed token, or a closing enclosure is followed by anything
            but a separator.
    """
    tokens: list[str] = []
    buf: list[str] = []
    state = _State.SCAN

    for c in text:
        if state is _State.SCAN:
            if c == separator:
                tokens.append("")
            elif c == enclosure:
                state = _State.ENCLOSED
            else:
                buf.append(c)
                state = _State.FIELD
        elif state is _State.FIELD:
            if c == separator:
                tokens.append("".join(buf))
                buf = []
                state = _State.SCAN
            elif c == enclosure:
                raise StrayEnclosureError(line_number, len(tokens), text)
            else:
                buf.append(c)
        elif state is _State.ENCLOSED:
            if c == enclosure:
                state = _State.ENCLOSURE_SEEN
            else:
                buf.append(c)
        else:  # ENCLOSURE_SEEN
            if c == enclosure:
                buf.append(c)  # doubled: literal enclosure char
                state = _State.ENCLOSED
            elif c == separator:
                tokens.append("".join(buf))
                buf = []
                state = _State.SCAN
            else:
                raise StrayEnclosureError(line_number, len(tokens), text)

    if state is _State.ENCLOSED:
        raise UnterminatedEnclosureError(line_number, len(tokens), text)
    tokens.append("".join(buf))
    return tokens
