"""Core domain package for the KasFlow application.

The dashboard service and CSV export depend on :mod:`analytics`; import them
from :mod:`core.dashboard` and :mod:`core.export`.
"""

from .ai import AIAnswerError, AIAnswerRequest, build_answer_request, generate_ai_answer
from .amounts import normalize_number
from .cache import MemoryCache, put_if_small
from .errors import DashboardError, MissingDataError
from .logging_setup import configure_logging, get_logger
from .models import DashboardSnapshot, FilterOptions, Filters, PeriodWindow
from .periods import resolve_period, resolve_previous_period
from .projection import project_transactions
from .store import CsvDirectoryStore, MemoryTableStore

__all__ = [
    "AIAnswerError",
    "AIAnswerRequest",
    "build_answer_request",
    "generate_ai_answer",
    "normalize_number",
    "MemoryCache",
    "put_if_small",
    "DashboardError",
    "MissingDataError",
    "configure_logging",
    "get_logger",
    "DashboardSnapshot",
    "FilterOptions",
    "Filters",
    "PeriodWindow",
    "resolve_period",
    "resolve_previous_period",
    "project_transactions",
    "CsvDirectoryStore",
    "MemoryTableStore",
]
