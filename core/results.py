"""Result type for optional enrichment steps of the dashboard build."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from core.logging_setup import get_logger

__all__ = ["Derivation", "derive"]

T = TypeVar("T")

_logger = get_logger("kasflow.results")


@dataclass(frozen=True)
class Derivation(Generic[T]):
    """Outcome of an enrichment step: the value plus a failure reason, if any.

    A failed derivation still carries a usable (neutral) ``value``.
    """

    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def derive(label: str, compute: Callable[[], T], fallback: Callable[[], T]) -> Derivation[T]:
    """Run ``compute``; on failure log it and return ``fallback()`` with the reason."""

    try:
        return Derivation(compute())
    except Exception as exc:  # noqa: BLE001 - enrichment must never fail the snapshot
        _logger.warning("%s failed: %s", label, exc)
        return Derivation(fallback(), error=f"{type(exc).__name__}: {exc}")
