from __future__ import annotations

from dataclasses import dataclass, field

from ..config import TranslationConfig


@dataclass(frozen=True, slots=True)
class Context:
    """Everything a parsing call may consult besides the entity itself."""

    config: TranslationConfig = field(default_factory=TranslationConfig)
    pointer_width: int = 64
