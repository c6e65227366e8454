"""Now-playing metadata returned by ``/streamtitle``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from radioapi.core.accessors import JsonView
from radioapi.responses.base import ApiResponse

__all__ = ["CurrentTrack", "HistoryEntry", "StreamInfo", "StreamTitleResponse"]

_STREAM_INFO_FIELDS = ("name", "bitrate", "format", "stream_url", "service")


@dataclass(frozen=True, slots=True)
class CurrentTrack:
    artist: str | None
    title: str | None
    album: str | None = None
    genre: str | None = None
    artwork_url: str | None = None
    year: int | None = None
    duration_seconds: int | None = None
    elapsed_seconds: int | None = None
    remaining_seconds: int | None = None
    explicit: bool | None = None
    stream_link: str | None = None
    lyrics: str | None = None


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    artist: str | None
    title: str | None
    timestamp: str | None = None
    relative_time: str | None = None
    artwork_url: str | None = None


@dataclass(frozen=True, slots=True)
class StreamInfo:
    name: str | None = None
    bitrate: int | None = None
    format: str | None = None
    stream_url: str | None = None
    service: str | None = None


def _artwork(view: JsonView) -> str | None:
    # Artwork is either a URL or an object of sized URLs.
    url = view.get_str("artwork", "image", "cover")
    if url:
        return url
    sizes = view.view("artwork")
    return sizes.get_str("large", "xl", "medium", "small")


def _history_entry(item: Mapping[str, Any]) -> HistoryEntry:
    view = JsonView(item)
    return HistoryEntry(
        artist=view.get_str("artist"),
        title=view.get_str("song", "title"),
        timestamp=view.get_str("time", "timestamp", "played_at"),
        relative_time=view.get_str("relative_time", "ago"),
        artwork_url=_artwork(view),
    )


class StreamTitleResponse(ApiResponse):
    def has_metadata(self) -> bool:
        """True only when the body says ``metadataFound: true``."""
        return self._view.is_true("metadataFound")

    def get_current_track(self) -> CurrentTrack | None:
        """Return the track playing now, or None unless metadata was found."""
        if not self.has_metadata():
            return None
        view = self._view
        return CurrentTrack(
            artist=view.get_str("artist"),
            title=view.get_str("song", "title"),
            album=view.get_str("album"),
            genre=view.get_str("genre"),
            artwork_url=_artwork(view),
            year=view.get_int("year"),
            duration_seconds=view.get_int("duration"),
            elapsed_seconds=view.get_int("elapsed"),
            remaining_seconds=view.get_int("remaining"),
            explicit=view.get_bool("explicit"),
            stream_link=view.get_str("stream"),
            lyrics=view.get_str("lyrics"),
        )

    @property
    def artist(self) -> str | None:
        track = self.get_current_track()
        return track.artist if track else None

    @property
    def title(self) -> str | None:
        track = self.get_current_track()
        return track.title if track else None

    @property
    def album(self) -> str | None:
        track = self.get_current_track()
        return track.album if track else None

    def get_history(self) -> list[Any]:
        """Raw history items, newest first, in the order the API sent them."""
        return self._view.get_list("history")

    def get_history_entries(self) -> list[HistoryEntry]:
        """Typed history; items that are not JSON objects are skipped."""
        return [_history_entry(item) for item in self.get_history() if isinstance(item, Mapping)]

    def has_history(self) -> bool:
        return bool(self.get_history())

    @property
    def history_count(self) -> int:
        return len(self.get_history())

    def get_last_track(self) -> HistoryEntry | None:
        """Most recent history entry, or None when there is no history."""
        entries = self.get_history_entries()
        return entries[0] if entries else None

    def get_stream_info(self) -> dict[str, Any]:
        """Subset of stream-level fields that are present in the body."""
        return self._view.subset(_STREAM_INFO_FIELDS)

    def stream_info(self) -> StreamInfo:
        view = self._view
        return StreamInfo(
            name=view.get_str("name"),
            bitrate=view.get_int("bitrate"),
            format=view.get_str("format"),
            stream_url=view.get_str("stream_url"),
            service=view.get_str("service"),
        )
