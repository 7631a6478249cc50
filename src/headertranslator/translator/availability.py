from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..models.entity import PlatformAvailability

logger = logging.getLogger(__name__)

KNOWN_PLATFORMS = {"macos", "ios", "tvos", "watchos", "maccatalyst"}

PLATFORM_ALIASES = {
    "macosx": "macos",
    "ios_app_extension": "ios",
    "macos_app_extension": "macos",
    "macosx_app_extension": "macos",
    "tvos_app_extension": "tvos",
    "watchos_app_extension": "watchos",
    "maccatalyst_app_extension": "maccatalyst",
}


def _normalize_platform(platform: str) -> str:
    key = platform.strip().lower()
    key = PLATFORM_ALIASES.get(key, key)
    if key not in KNOWN_PLATFORMS:
        logger.debug("unknown availability platform %s", platform)
    return key


@dataclass(frozen=True, slots=True)
class Availability:
    """Introduced/deprecated/unavailable markers, one entry per platform."""

    introduced: Tuple[Tuple[str, str], ...] = ()
    deprecated: Tuple[Tuple[str, str], ...] = ()
    unavailable: Tuple[str, ...] = ()
    message: Optional[str] = None

    @classmethod
    def parse(cls, platforms: Iterable[PlatformAvailability]) -> Availability:
        introduced: dict[str, str] = {}
        deprecated: dict[str, str] = {}
        unavailable: list[str] = []
        message: Optional[str] = None
        for entry in platforms:
            platform = _normalize_platform(entry.platform)
            if entry.unavailable:
                if platform not in unavailable:
                    unavailable.append(platform)
                continue
            if entry.introduced:
                introduced.setdefault(platform, entry.introduced)
            if entry.deprecated:
                deprecated.setdefault(platform, entry.deprecated)
            if entry.message and message is None:
                message = entry.message
        return cls(
            introduced=tuple(sorted(introduced.items())),
            deprecated=tuple(sorted(deprecated.items())),
            unavailable=tuple(sorted(unavailable)),
            message=message,
        )
