"""Prompt templates and loaders for KasFlow."""

from .base import PromptTemplate, get_prompt_text, load_prompt

__all__ = ["PromptTemplate", "get_prompt_text", "load_prompt"]
