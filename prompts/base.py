"""Prompt loading for KasFlow AI features."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from string import Template

__all__ = ["PromptTemplate", "load_prompt", "get_prompt_text"]

PROMPTS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class PromptTemplate:
    """Prompt text stored as ``prompts/<name>.txt``; ``$name`` fields render via :meth:`render`."""

    name: str
    content: str

    def render(self, **fields: str) -> str:
        return Template(self.content).safe_substitute(fields)


@lru_cache(maxsize=32)
def load_prompt(name: str) -> PromptTemplate:
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return PromptTemplate(name=name, content=path.read_text(encoding="utf-8").strip())


def get_prompt_text(name: str, **fields: str) -> str:
    return load_prompt(name).render(**fields)
