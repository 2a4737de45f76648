"""AI-assisted answers to questions about the ledger."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Mapping

from openai import APIError, OpenAI

from config.settings import Settings, get_settings
from core.ai.context import (
    AIQueryFilters,
    build_financial_context,
    fetch_scheduled,
    fetch_transactions,
    format_records,
)
from core.formatting import format_display_date
from core.logging_setup import get_logger
from core.tables import RawTable
from prompts import get_prompt_text

PROMPT_ANSWER = "answer"
MAX_OUTPUT_TOKENS = 600
HISTORY_DAYS = 90
MIN_HISTORY_ROWS = 3

__all__ = [
    "AIAnswerError",
    "AIAnswerRequest",
    "build_answer_request",
    "generate_ai_answer",
]

_logger = get_logger("kasflow.ai")


class AIAnswerError(RuntimeError):
    """Raised when an AI answer cannot be produced."""


@dataclass(frozen=True, slots=True)
class AIAnswerRequest:
    question: str
    user_message: str
    model: str
    today: str
    history_rows: int
    scheduled_rows: int


def _resolve_openai_client(settings: Settings) -> OpenAI:
    kwargs: dict[str, Any] = dict(settings.openai_client_kwargs)
    if "api_key" not in kwargs:
        api_key = os.getenv("OPENAI_API_KEY")
        if api_key:
            kwargs["api_key"] = api_key
        base_url = os.getenv("OPENAI_BASE_URL")
        if base_url and "base_url" not in kwargs:
            kwargs["base_url"] = base_url

    if not kwargs.get("api_key"):
        raise AIAnswerError("Missing OpenAI API key. Add it to .streamlit/secrets.toml under [openai].")
    return OpenAI(**kwargs)


def _default_window(filters: AIQueryFilters, today: date) -> tuple[AIQueryFilters, AIQueryFilters]:
    """History defaults to the last 90 days and commitments to the next 90."""

    if filters.start_date is not None and filters.end_date is not None:
        return filters, filters
    midnight = datetime(today.year, today.month, today.day)
    end_of_today = midnight + timedelta(days=1) - timedelta(milliseconds=1)
    history = AIQueryFilters(
        beneficiaries=filters.beneficiaries,
        category=filters.category,
        start_date=midnight - timedelta(days=HISTORY_DAYS),
        end_date=end_of_today,
    )
    upcoming = AIQueryFilters(
        beneficiaries=filters.beneficiaries,
        category=filters.category,
        start_date=midnight,
        end_date=end_of_today + timedelta(days=HISTORY_DAYS),
    )
    return history, upcoming


def build_answer_request(
    question: str,
    input_table: RawTable | None,
    scheduled_table: RawTable | None,
    filters: AIQueryFilters | Mapping[str, Any] | None = None,
    *,
    wallet_setup: RawTable | None = None,
    goals_setup: RawTable | None = None,
    settings: Settings | None = None,
    today: date | None = None,
) -> AIAnswerRequest:
    """Collect the matching ledger rows and lay out the user message."""

    question = (question or "").strip()
    if not question:
        raise AIAnswerError("Question is empty.")

    settings = settings or get_settings()
    active = filters if isinstance(filters, AIQueryFilters) else AIQueryFilters.from_mapping(filters)
    reference_day = today or date.today()
    history_filters, upcoming_filters = _default_window(active, reference_day)

    tz = settings.reporting_timezone
    history = fetch_transactions(input_table, history_filters, tz=tz)
    scheduled = fetch_scheduled(scheduled_table, upcoming_filters, tz=tz)
    if len(history) < MIN_HISTORY_ROWS and not scheduled:
        raise AIAnswerError("Not enough transaction data to answer this question.")

    history_text = format_records(history) if history else "No relevant historical data."
    scheduled_text = format_records(scheduled, scheduled=True) if scheduled else "No relevant scheduled data."
    user_message = (
        f"FINANCIAL CONTEXT:\n{build_financial_context(wallet_setup, goals_setup, tz=tz)}\n---\n"
        f"HISTORICAL DATA:\n{history_text}\n---\n"
        f"SCHEDULED DATA:\n{scheduled_text}\n---\n"
        f'USER QUESTION: "{question}"'
    )
    return AIAnswerRequest(
        question=question,
        user_message=user_message,
        model=settings.openai_model,
        today=format_display_date(reference_day),
        history_rows=len(history),
        scheduled_rows=len(scheduled),
    )


def generate_ai_answer(
    request: AIAnswerRequest,
    *,
    settings: Settings | None = None,
    client_factory: Callable[[], OpenAI] | None = None,
) -> str:
    """Send ``request`` to the chat completions API and return the answer text."""

    settings = settings or get_settings()
    client = client_factory() if client_factory is not None else _resolve_openai_client(settings)
    _logger.info(
        "Asking %s with %d history and %d scheduled rows",
        request.model,
        request.history_rows,
        request.scheduled_rows,
    )

    try:
        response = client.chat.completions.create(
            model=request.model,
            messages=[
                {"role": "system", "content": get_prompt_text(PROMPT_ANSWER, today=request.today)},
                {"role": "user", "content": request.user_message},
            ],
            max_tokens=MAX_OUTPUT_TOKENS,
            temperature=0.2,
        )
    except APIError as exc:
        raise AIAnswerError(f"OpenAI API error: {exc}") from exc

    try:
        text = response.choices[0].message.content or ""
    except (AttributeError, IndexError) as exc:  # pragma: no cover - unexpected SDK output
        raise AIAnswerError("Unexpected response format from OpenAI API") from exc

    text = text.strip()
    if not text:
        raise AIAnswerError("OpenAI response was empty")
    return text
