"""AI context extraction and answer generation with an injected client."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from typing import cast

import pytest
from openai import OpenAI

from config.settings import Settings
from core.ai import (
    AIAnswerError,
    AIQueryFilters,
    build_answer_request,
    build_financial_context,
    fetch_scheduled,
    fetch_transactions,
    format_records,
    generate_ai_answer,
)

TODAY = date(2024, 3, 20)


class DummyClient:
    """Mimics ``client.chat.completions.create`` and records the call."""

    def __init__(self, content: str = "- Spent Rp 2.500.000 on food") -> None:
        self.calls: list[dict] = []
        self.content = content
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: object):
        self.calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def test_filters_from_mapping():
    filters = AIQueryFilters.from_mapping(
        {"person_beneficiary": "Family, SARI", "category": "Food", "startDate": "2024-03-01", "endDate": "2024-03-31"}
    )

    assert filters.beneficiaries == ("family", "sari")
    assert filters.category == "Food"
    assert filters.start_date.day == 1 and filters.end_date.hour == 23


def test_fetch_transactions_filters_by_beneficiary_category_and_dates(input_table):
    everything = fetch_transactions(input_table, AIQueryFilters.from_mapping({"person_beneficiary": "family", "category": "food"}))
    march = fetch_transactions(
        input_table,
        AIQueryFilters.from_mapping(
            {"person_beneficiary": "family", "category": "food", "startDate": "2024-03-01", "endDate": "2024-03-31"}
        ),
    )

    assert [record["Amount"] for record in everything] == [1_000_000, 1_500_000]
    assert len(march) == 1


def test_half_open_date_range_is_ignored(input_table):
    records = fetch_transactions(input_table, AIQueryFilters.from_mapping({"startDate": "2024-03-01"}))

    assert len(records) == len(input_table) - 1


def test_fetch_scheduled_keeps_active_rows(scheduled_table):
    records = fetch_scheduled(scheduled_table, AIQueryFilters())

    assert [record["Description"] for record in records] == ["Cicilan motor", "Internet", "Netflix"]
    assert records[0]["Beneficiary"] == "N/A"


def test_format_records_as_compact_csv(input_table):
    records = fetch_transactions(input_table, AIQueryFilters.from_mapping({"person_beneficiary": "sari", "category": "transport"}))

    text = format_records(records)

    assert text.splitlines() == [
        "Date,Payer,Beneficiary,Category,Description,Amount",
        "2024-03-06,Sari,Sari,Transport,Ojek; kantor,250000",
    ]
    assert format_records([], scheduled=True) == "NextDueDate,Payer,Beneficiary,Category,Description,Amount"


def test_financial_context_lists_owners_and_goals(wallet_setup, goals_setup):
    context = build_financial_context(wallet_setup, goals_setup)

    assert "Wallet Owners (Payers): Budi, Sari" in context
    assert "Name: Dana Darurat, Owner: Sari, Target: Rp 12.000.000, Deadline: 31 Dec 2024" in context
    assert "Deadline: N/A" in context


def test_build_answer_request_uses_default_windows(input_table, scheduled_table, wallet_setup, goals_setup):
    request = build_answer_request(
        "How much did we spend on food?",
        input_table,
        scheduled_table,
        wallet_setup=wallet_setup,
        goals_setup=goals_setup,
        settings=Settings(openai_model="gpt-test"),
        today=TODAY,
    )

    assert request.model == "gpt-test"
    assert request.today == "20 Mar 2024"
    assert request.history_rows == 10
    assert request.scheduled_rows == 2
    assert request.user_message.endswith('USER QUESTION: "How much did we spend on food?"')
    assert "Internet" not in request.user_message


def test_build_answer_request_rejects_empty_or_thin_data(input_table, scheduled_table):
    with pytest.raises(AIAnswerError):
        build_answer_request("  ", input_table, scheduled_table, settings=Settings(), today=TODAY)

    with pytest.raises(AIAnswerError, match="Not enough"):
        build_answer_request("Anything?", input_table[:3], scheduled_table[:1], settings=Settings(), today=TODAY)


def test_generate_ai_answer_uses_injected_client(input_table, scheduled_table):
    settings = Settings(openai_model="gpt-test")
    request = build_answer_request("Where does our money go?", input_table, scheduled_table, settings=settings, today=TODAY)
    client = DummyClient("  - Food is the largest outflow.  ")

    answer = generate_ai_answer(request, settings=settings, client_factory=lambda: cast(OpenAI, client))

    assert answer == "- Food is the largest outflow."
    (call,) = client.calls
    assert call["model"] == "gpt-test"
    system, user = call["messages"]
    assert "Today is 20 Mar 2024." in system["content"]
    assert user["content"] == request.user_message


def test_generate_ai_answer_rejects_empty_response(input_table, scheduled_table):
    settings = Settings()
    request = build_answer_request("Where does our money go?", input_table, scheduled_table, settings=settings, today=TODAY)

    with pytest.raises(AIAnswerError, match="empty"):
        generate_ai_answer(request, settings=settings, client_factory=lambda: cast(OpenAI, DummyClient("   ")))


def test_missing_api_key_is_reported(input_table, scheduled_table, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    settings = Settings(openai_api_key=None)
    request = build_answer_request("Where does our money go?", input_table, scheduled_table, settings=settings, today=TODAY)

    with pytest.raises(AIAnswerError, match="API key"):
        generate_ai_answer(request, settings=settings)


def test_fetch_reads_aware_dates_in_reporting_time(input_table):
    table = [
        input_table[0],
        ["2024-03-31T20:00:00Z", "Expense", "900.000", "BCA Budi", "Budi", "Family", "Debt", "Cicilan Motor", "", "Cicilan akhir", "Liabilities"],
    ]
    april = AIQueryFilters.from_mapping({"startDate": "2024-04-01", "endDate": "2024-04-30"})

    (record,) = fetch_transactions(table, april, tz=Settings().reporting_timezone)

    assert record["Date"].day == 1 and record["Date"].hour == 3
    assert fetch_transactions(table, april) == []
