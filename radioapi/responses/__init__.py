"""Typed views over RadioAPI response bodies."""

from __future__ import annotations

from radioapi.responses.base import ApiResponse
from radioapi.responses.color import ColorResponse, ColorValue, PaletteColor
from radioapi.responses.music_search import Artwork, MusicSearchResponse, SearchResult
from radioapi.responses.stream_title import CurrentTrack, HistoryEntry, StreamInfo, StreamTitleResponse

__all__ = [
    "ApiResponse",
    "Artwork",
    "ColorResponse",
    "ColorValue",
    "CurrentTrack",
    "HistoryEntry",
    "MusicSearchResponse",
    "PaletteColor",
    "SearchResult",
    "StreamInfo",
    "StreamTitleResponse",
]
