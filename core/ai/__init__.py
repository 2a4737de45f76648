"""AI-focused helpers for KasFlow."""

from .answer import AIAnswerError, AIAnswerRequest, build_answer_request, generate_ai_answer
from .context import AIQueryFilters, build_financial_context, fetch_scheduled, fetch_transactions, format_records

__all__ = [
    "AIAnswerError",
    "AIAnswerRequest",
    "AIQueryFilters",
    "build_answer_request",
    "build_financial_context",
    "fetch_scheduled",
    "fetch_transactions",
    "format_records",
    "generate_ai_answer",
]
