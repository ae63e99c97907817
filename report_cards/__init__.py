"""Report cards from spreadsheet grade exports.

The grade pipeline turns a CSV export (headers, max scores, one row per
student) into class statistics and per-student footer metrics.
"""

from .models.grades import GradeTable, StudentMetrics, SubjectStat
from .services.metrics import MetricsCalculator, compute_metrics
from .services.orchestrator import MalformedTableError, ProcessingError, run
from .tabular.reader import CsvDataSource, TransportError

__version__ = "0.1.0"

__all__ = [
    "CsvDataSource",
    "GradeTable",
    "MalformedTableError",
    "MetricsCalculator",
    "ProcessingError",
    "StudentMetrics",
    "SubjectStat",
    "TransportError",
    "compute_metrics",
    "run",
]
