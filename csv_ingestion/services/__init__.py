"""Services: file-level orchestration over the parse pipeline."""

from csv_ingestion.services.ingest_service import IngestResult, ingest_file

__all__ = ["IngestResult", "ingest_file"]
