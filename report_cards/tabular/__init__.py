from .reader import CsvDataSource, TransportError, read_grade_csv, resolve_class_path

__all__ = ["CsvDataSource", "TransportError", "read_grade_csv", "resolve_class_path"]
