"""Service hints understood by the RadioAPI backend.

A service hint only selects a URL path segment (``/streamtitle/spotify``); the
client never validates what a given platform does with it, so callers may also
pass plain strings for services added to the backend later.
"""

from __future__ import annotations

import enum

__all__ = ["Service", "ServiceHint", "normalize_service"]


class Service(str, enum.Enum):
    # Music catalogs
    SPOTIFY = "spotify"
    DEEZER = "deezer"
    APPLE_MUSIC = "itunes"
    YOUTUBE_MUSIC = "ytmusic"
    FLO_MUSIC = "flomusic"
    LINE_MUSIC = "linemusic"
    KKBOX_MUSIC = "kkbox"
    AUTO = "auto"

    # Radio platform integrations
    AZURACAST = "azuracast"
    LIVE365 = "live365"
    RADIOKING = "radioking"

    @property
    def is_platform(self) -> bool:
        return self in _PLATFORMS

    def __str__(self) -> str:
        return self.value


_PLATFORMS = frozenset({Service.AZURACAST, Service.LIVE365, Service.RADIOKING})

ServiceHint = Service | str


def normalize_service(value: ServiceHint | None) -> str | None:
    """Return the path segment for `value`, or None when no hint is set."""
    if value is None:
        return None
    text = value.value if isinstance(value, Service) else str(value)
    text = text.strip().strip("/")
    return text or None
