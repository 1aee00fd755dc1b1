"""CSV export of the fasting history."""

from .csv_export import CSV_HEADER, export_filename, render_csv, write_csv

__all__ = ["CSV_HEADER", "export_filename", "render_csv", "write_csv"]
