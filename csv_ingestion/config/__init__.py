"""Configuration document loading: YAML/JSON -> ParserConfig."""

from csv_ingestion.config.loader import (
    compute_checksum,
    load_config_document,
    load_config_file,
    load_yaml_file,
    parse_config,
)

__all__ = [
    "compute_checksum",
    "load_config_document",
    "load_config_file",
    "load_yaml_file",
    "parse_config",
]
