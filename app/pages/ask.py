"""Question answering page backed by the AI adapter."""

from __future__ import annotations

import streamlit as st

from app.layout import card
from core.ai import AIAnswerError, build_answer_request, generate_ai_answer
from core.dashboard import DashboardService
from core.errors import MissingDataError


def render_page(service: DashboardService, owners: list[str]) -> None:
    """Ask a free-form question about recent and scheduled transactions."""

    st.title("Ask")
    settings = service.settings
    with card("Ask about your money", suffix="AI"):
        owner = st.selectbox("Whose money?", owners, key="ask_owner") if owners else None
        question = st.text_area("Question", key="ask_question")
        if not st.button("Ask", key="ask_submit"):
            return
        try:
            request = build_answer_request(
                question,
                service.read_table(settings.input_table),
                service.read_table(settings.scheduled_table),
                {"person_beneficiary": owner} if owner else None,
                wallet_setup=service.read_table(settings.wallet_setup_table),
                goals_setup=service.read_table(settings.goals_setup_table),
                settings=settings,
            )
            with st.spinner("Thinking…"):
                answer = generate_ai_answer(request, settings=settings)
        except (AIAnswerError, MissingDataError) as exc:
            st.info(f"AI answer unavailable: {exc}")
            return
        st.markdown(answer)


__all__ = ["render_page"]
