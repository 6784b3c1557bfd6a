"""
Configuration Loader (``csv_ingestion.config.loader``).

Responsibility
--------------
Reads a configuration document (YAML or JSON; JSON is valid YAML) and
parses it into the frozen ``csv_ingestion.domain.types.ParserConfig`` the
pipeline consumes. The pipeline itself never reads configuration files.

Document shape
--------------
::

    comment: optional
    parserOpts:
      separatorChar: ","
      enclosureChar: '"'          # optional, null for none
      firstLineIsHeader: true
      saveSkippedLines: false
      lines:
        skipLinesFromStart: 1
        skipLinesFromEnd: 0
        skipLinesByStartswith: ["#"]
        takeLinesByStartswith: []
        skipLinesByRegex: []
        skipEmptyLines: true
    sanitizeColumns:              # applied in document order
      - sanitizers: [{type: trim, spec: all}]           # global
      - idx: 0                                          # or idxs: [0, 2]
        sanitizers: [{type: casing, spec: toLower}]
    typeColumns:                  # one entry per column, by position
      - {header: Name, targetType: String}
      - {targetType: NaiveDate, srcPattern: "%d.%m.%Y", mapToNone: ["", "n/a"]}

Failure modes
-------------
* Missing file  -> ``FileNotFoundError`` propagates.
* Malformed YAML/JSON  -> ``yaml.YAMLError`` propagates.
* Wrong shape (missing ``parserOpts``, unknown sanitizer or target type,
  bad separator)  -> ``InvalidConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from csv_ingestion.domain.types import (
    Casing,
    CasingMode,
    Eradicate,
    LineFilterRules,
    ParserConfig,
    ParserOptions,
    RegexTake,
    Replace,
    ReplacePair,
    SanitizerChainEntry,
    SanitizerSpec,
    Trim,
    TrimMode,
    TypeColumn,
)
from csv_ingestion.domain.values import ValueType
from csv_ingestion.exceptions import InvalidConfigurationError
from csv_ingestion.logging_config import get_logger

logger = get_logger("config.loader")

_VALUE_TYPES = {vt.value.lower(): vt for vt in ValueType}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML (or JSON) file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file is not valid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the document, for change detection."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# -----------------------------------------------------------------------------
# Section parsers
# -----------------------------------------------------------------------------


def _tuple_of_str(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise InvalidConfigurationError(f"{key} must be a list of strings", value)
    return tuple(str(v) for v in value)


def _single_char(value: Any, key: str) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise InvalidConfigurationError(f"{key} must be a single character, got {value!r}", value)
    return value


def parse_line_rules(data: dict[str, Any] | None) -> LineFilterRules:
    """Parse ``parserOpts.lines``."""
    if not data:
        return LineFilterRules()
    return LineFilterRules(
        skip_from_start=int(data.get("skipLinesFromStart") or 0),
        skip_from_end=int(data.get("skipLinesFromEnd") or 0),
        skip_by_prefix=_tuple_of_str(data.get("skipLinesByStartswith"), "skipLinesByStartswith"),
        take_by_prefix=_tuple_of_str(data.get("takeLinesByStartswith"), "takeLinesByStartswith"),
        skip_by_regex=_tuple_of_str(data.get("skipLinesByRegex"), "skipLinesByRegex"),
        skip_empty=bool(data.get("skipEmptyLines", False)),
    )


def parse_parser_options(data: dict[str, Any]) -> ParserOptions:
    """Parse ``parserOpts``. ``separatorChar`` is mandatory."""
    if "separatorChar" not in data:
        raise InvalidConfigurationError("parserOpts.separatorChar is required", data)
    enclosure = data.get("enclosureChar")
    return ParserOptions(
        separator=_single_char(data["separatorChar"], "separatorChar"),
        enclosure=_single_char(enclosure, "enclosureChar") if enclosure is not None else None,
        lines=parse_line_rules(data.get("lines")),
        first_line_is_header=bool(data.get("firstLineIsHeader", True)),
        save_skipped_lines=bool(data.get("saveSkippedLines", False)),
    )


def _payload(data: dict[str, Any], alt_key: str) -> Any:
    if "spec" in data:
        return data["spec"]
    if alt_key in data:
        return data[alt_key]
    raise InvalidConfigurationError(
        f"sanitizer {data.get('type')!r} needs 'spec' (or '{alt_key}')", data
    )


def parse_sanitizer(data: dict[str, Any]) -> SanitizerSpec:
    """Parse one ``{type, spec}`` sanitizer."""
    kind = data.get("type")
    try:
        if kind == "trim":
            return Trim(TrimMode(_payload(data, "mode")))
        if kind == "casing":
            return Casing(CasingMode(_payload(data, "mode")))
        if kind == "eradicate":
            return Eradicate(_tuple_of_str(_payload(data, "substrings"), "eradicate"))
        if kind == "regexTake":
            pattern = _payload(data, "pattern")
            if not isinstance(pattern, str):
                raise InvalidConfigurationError("regexTake spec must be a string", data)
            return RegexTake(pattern)
        if kind == "replace":
            pairs = _payload(data, "pairs")
            if not isinstance(pairs, list):
                raise InvalidConfigurationError("replace spec must be a list", data)
            return Replace(
                tuple(ReplacePair(from_=str(p["from"]), to=str(p["to"])) for p in pairs)
            )
    except (ValueError, KeyError, TypeError) as exc:
        raise InvalidConfigurationError(f"Invalid {kind} sanitizer: {exc}", data) from exc
    raise InvalidConfigurationError(f"Unknown sanitizer type {kind!r}", data)


def parse_sanitize_columns(entries: list[dict[str, Any]] | None) -> tuple[SanitizerChainEntry, ...]:
    """
    Parse ``sanitizeColumns``, keeping document order.

    ``idx`` gives one positional entry; ``idxs`` gives one positional entry per
    listed index, in listed order; neither gives a global entry.
    """
    if not entries:
        return ()
    result: list[SanitizerChainEntry] = []
    for entry in entries:
        sanitizers = tuple(parse_sanitizer(s) for s in entry.get("sanitizers") or ())
        comment = entry.get("comment")
        if "idxs" in entry and entry["idxs"] is not None:
            idxs = [int(i) for i in entry["idxs"]]
        elif entry.get("idx") is not None:
            idxs = [int(entry["idx"])]
        else:
            result.append(SanitizerChainEntry(sanitizers=sanitizers, comment=comment))
            continue
        for idx in idxs:
            result.append(SanitizerChainEntry(sanitizers=sanitizers, idx=idx, comment=comment))
    return tuple(result)


def parse_type_column(data: dict[str, Any]) -> TypeColumn:
    """Parse one ``typeColumns`` entry. ``header`` and ``rename`` are synonyms."""
    raw_type = data.get("targetType")
    if raw_type is None:
        raise InvalidConfigurationError("typeColumns entry needs targetType", data)
    target_type = _VALUE_TYPES.get(str(raw_type).lower())
    if target_type is None:
        raise InvalidConfigurationError(f"Unknown targetType {raw_type!r}", data)
    rename = data.get("rename", data.get("header"))
    return TypeColumn(
        target_type=target_type,
        rename=str(rename) if rename is not None else None,
        src_pattern=data.get("srcPattern"),
        map_to_none=_tuple_of_str(data.get("mapToNone"), "mapToNone"),
        comment=data.get("comment"),
    )


def parse_config(data: dict[str, Any]) -> ParserConfig:
    """
    Parse a whole configuration document.

    Raises:
        InvalidConfigurationError: if ``parserOpts`` is missing or any
            section has the wrong shape.
    """
    if not isinstance(data, dict) or "parserOpts" not in data:
        raise InvalidConfigurationError("configuration needs a parserOpts section", data)
    return ParserConfig(
        options=parse_parser_options(data["parserOpts"]),
        sanitize_columns=parse_sanitize_columns(data.get("sanitizeColumns")),
        type_columns=tuple(parse_type_column(t) for t in data.get("typeColumns") or ()),
        comment=data.get("comment"),
    )


def load_config_document(path: Path | str) -> tuple[ParserConfig, str]:
    """Load and parse a configuration file; also return the document checksum."""
    path = Path(path)
    data = load_yaml_file(path)
    config = parse_config(data)
    checksum = compute_checksum(data)
    logger.info(
        "config_loaded",
        extra={
            "config_path": str(path),
            "config_checksum": checksum,
            "sanitize_entries": len(config.sanitize_columns),
            "type_columns": len(config.type_columns),
        },
    )
    return config, checksum


def load_config_file(path: Path | str) -> ParserConfig:
    """Load and parse a configuration file."""
    config, _ = load_config_document(path)
    return config
