"""Catalog search results returned by ``/musicsearch``.

The backend answers in one of two shapes:

- a list under ``tracks`` (or ``results``), or
- a single flat track object (best-match mode).

`MusicSearchResponse` normalizes both into a list of `SearchResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from radioapi.core.accessors import JsonView
from radioapi.responses.base import ApiResponse

__all__ = ["Artwork", "MusicSearchResponse", "SearchResult"]

_TRACK_FIELDS = ("artist", "title", "song")
_LIST_KEYS = ("tracks", "results")


@dataclass(frozen=True, slots=True)
class Artwork:
    small: str | None = None
    medium: str | None = None
    large: str | None = None
    xl: str | None = None

    @property
    def best(self) -> str | None:
        return self.xl or self.large or self.medium or self.small


@dataclass(frozen=True, slots=True)
class SearchResult:
    artist: str | None
    title: str | None
    album: str | None = None
    genre: str | None = None
    year: int | None = None
    duration_seconds: int | None = None
    explicit: bool | None = None
    link: str | None = None
    service: str | None = None
    artwork: Artwork | None = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)


def _artwork(view: JsonView) -> Artwork | None:
    sizes = view.view("artwork")
    if sizes:
        return Artwork(
            small=sizes.get_str("small"),
            medium=sizes.get_str("medium"),
            large=sizes.get_str("large"),
            xl=sizes.get_str("xl"),
        )
    url = view.get_str("artwork", "image")
    if url:
        return Artwork(large=url)
    return None


def _search_result(item: Mapping[str, Any]) -> SearchResult:
    view = JsonView(item)
    return SearchResult(
        artist=view.get_str("artist"),
        title=view.get_str("title", "song"),
        album=view.get_str("album"),
        genre=view.get_str("genre"),
        year=view.get_int("year"),
        duration_seconds=view.get_int("duration"),
        explicit=view.get_bool("explicit"),
        link=view.get_str("stream", "url", "link"),
        service=view.get_str("service"),
        artwork=_artwork(view),
        raw=view.data,
    )


class MusicSearchResponse(ApiResponse):
    def _list_key(self) -> str | None:
        for key in _LIST_KEYS:
            if self._view.has(key):
                return key
        return None

    def _raw_tracks(self) -> list[Mapping[str, Any]]:
        if self._view.has("error") or not self._view:
            return []
        key = self._list_key()
        if key is not None:
            return [item for item in self._view.get_list(key) if isinstance(item, Mapping)]
        if any(self._view.has(name) for name in _TRACK_FIELDS):
            return [self._view.data]
        return []

    def get_tracks(self) -> list[SearchResult]:
        """All results as a list, whichever shape the backend used."""
        return [_search_result(item) for item in self._raw_tracks()]

    def get_first_track(self) -> SearchResult | None:
        tracks = self.get_tracks()
        return tracks[0] if tracks else None

    def has_results(self) -> bool:
        return bool(self._raw_tracks())

    @property
    def result_count(self) -> int:
        return len(self._raw_tracks())

    def get_tracks_by_service(self, service: str) -> list[SearchResult]:
        wanted = str(service)
        return [track for track in self.get_tracks() if track.service == wanted]

    @property
    def query(self) -> str | None:
        return self._view.get_str("query")

    @property
    def service(self) -> str | None:
        return self._view.get_str("service")
