"""Line sources: text and files in, terminator-free lines out."""

from csv_ingestion.adapters.line_source import iter_file_lines, iter_text_lines

__all__ = ["iter_file_lines", "iter_text_lines"]
