from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..models.entity import TranslationUnit


class FrontendAdapter(ABC):
    format: str

    @abstractmethod
    def load(self, source: str, path: Path) -> TranslationUnit:
        """Return the translation unit described by the given dump text."""


class FrontendRegistry:
    def __init__(self) -> None:
        self._registry: dict[str, FrontendAdapter] = {}

    def register(self, adapter: FrontendAdapter) -> None:
        self._registry[adapter.format] = adapter

    def get(self, format: str) -> FrontendAdapter:
        try:
            return self._registry[format]
        except KeyError as exc:
            raise ValueError(f"No front end registered for {format}") from exc

    def formats(self) -> list[str]:
        return sorted(self._registry)
