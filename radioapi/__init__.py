"""Python client for the RadioAPI service.

Quick start::

    from radioapi import RadioAPI, Service

    client = RadioAPI.make("https://api.example.com", api_key="...").language("fr")
    now = client.get_stream_title("https://stream.example.com/radio", Service.SPOTIFY)
    track = now.get_current_track()
"""

from __future__ import annotations

from radioapi.client import RadioAPI, get_image_colors, get_stream_title, search_music
from radioapi.client_config import ClientConfig
from radioapi.core.classify import Err, Ok
from radioapi.errors import (
    InvalidArgument,
    ProtocolError,
    RadioAPICoreError,
    RadioAPIError,
    TransportFailureError,
)
from radioapi.responses import (
    ColorResponse,
    CurrentTrack,
    HistoryEntry,
    MusicSearchResponse,
    SearchResult,
    StreamTitleResponse,
)
from radioapi.services import Service

__all__ = [
    "ClientConfig",
    "ColorResponse",
    "CurrentTrack",
    "Err",
    "HistoryEntry",
    "InvalidArgument",
    "MusicSearchResponse",
    "Ok",
    "ProtocolError",
    "RadioAPI",
    "RadioAPICoreError",
    "RadioAPIError",
    "SearchResult",
    "Service",
    "StreamTitleResponse",
    "TransportFailureError",
    "get_image_colors",
    "get_stream_title",
    "search_music",
]

__version__ = "0.1.0"
