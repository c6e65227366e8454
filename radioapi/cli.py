"""Terminal front-end for the RadioAPI client.

Usage::

    radioapi --base-url https://api.example.com streamtitle https://stream.example.com/radio
    radioapi search "The Beatles - Hey Jude" --service spotify
    radioapi colors https://example.com/cover.jpg --json

Settings not given on the command line come from the environment
(``RADIOAPI_BASE_URL``, ``RADIOAPI_API_KEY``, ... see `radioapi.config`).

Exit codes: 0 success, 1 API or transport error, 2 invalid arguments.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger
from rich.console import Console
from rich.table import Table

from radioapi.client import RadioAPI
from radioapi.config import get_settings
from radioapi.errors import InvalidArgument, RadioAPIError
from radioapi.responses import ColorResponse, MusicSearchResponse, StreamTitleResponse
from radioapi.responses.color import rgb_to_hex
from radioapi.services import Service

if TYPE_CHECKING:
    import httpx

console = Console()
log = logger.bind(module="cli")

__all__ = ["build_arg_parser", "configure_logging", "main"]

EXIT_OK = 0
EXIT_API_ERROR = 1
EXIT_INVALID = 2


class _LoguruInterceptHandler(logging.Handler):
    """Bridge standard-library logging records (httpx, httpcore) into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - thin wrapper
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "WARNING") -> None:
    """Send Loguru output to stderr and route stdlib logging through it."""
    level = (level or "WARNING").upper()

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        backtrace=False,
        diagnose=False,
    )

    handler: logging.Handler = _LoguruInterceptHandler()
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    logging.captureWarnings(True)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radioapi",
        description="Query the RadioAPI service from the terminal.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--base-url", default=None, help="RadioAPI base URL (default: RADIOAPI_BASE_URL).")
    parser.add_argument("--api-key", default=None, help="API key (default: RADIOAPI_API_KEY).")
    parser.add_argument("--language", default=None, help="Two-letter response language.")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds.")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON body instead of tables.")
    parser.add_argument("--log-level", default=None, help="Log level for stderr output.")

    services = ", ".join(service.value for service in Service)
    sub = parser.add_subparsers(dest="command", required=True)

    stream = sub.add_parser("streamtitle", help="Show what a radio stream is playing.")
    stream.add_argument("stream_url")
    stream.add_argument("--service", default=None, help=f"Service hint ({services}).")
    stream.add_argument("--no-history", action="store_true", help="Do not request play history.")

    search = sub.add_parser("search", help="Search music catalogs.")
    search.add_argument("query")
    search.add_argument("--service", default=None, help=f"Service hint ({services}).")
    search.add_argument("--search-language", dest="search_language", default=None, help="Language for this search only.")

    colors = sub.add_parser("colors", help="Extract colors from an image.")
    colors.add_argument("image_url")
    return parser


def _render_stream_title(response: StreamTitleResponse) -> None:
    info = response.get_stream_info()
    if info:
        console.print("[bold]Stream[/] " + "  ".join(f"{key}={value}" for key, value in info.items()))

    track = response.get_current_track()
    if track is None:
        console.print("[yellow]No metadata found for this stream.[/]")
    else:
        table = Table(title="Now playing", show_header=False)
        table.add_column("field", style="bold")
        table.add_column("value")
        for label, value in (
            ("Artist", track.artist),
            ("Title", track.title),
            ("Album", track.album),
            ("Genre", track.genre),
            ("Year", track.year),
            ("Duration", track.duration_seconds),
            ("Artwork", track.artwork_url),
        ):
            if value is not None:
                table.add_row(label, str(value))
        console.print(table)

    entries = response.get_history_entries()
    if entries:
        history = Table(title=f"History ({len(entries)})")
        history.add_column("#", justify="right")
        history.add_column("Artist")
        history.add_column("Title")
        history.add_column("When")
        for index, entry in enumerate(entries, start=1):
            history.add_row(str(index), entry.artist or "", entry.title or "", entry.relative_time or entry.timestamp or "")
        console.print(history)


def _render_search(response: MusicSearchResponse) -> None:
    tracks = response.get_tracks()
    if not tracks:
        console.print("[yellow]No results.[/]")
        return
    table = Table(title=f"Results ({len(tracks)})")
    for column in ("Artist", "Title", "Album", "Year", "Service", "Link"):
        table.add_column(column)
    for track in tracks:
        table.add_row(
            track.artist or "",
            track.title or "",
            track.album or "",
            str(track.year) if track.year is not None else "",
            track.service or response.service or "",
            track.link or "",
        )
    console.print(table)


def _render_colors(response: ColorResponse) -> None:
    table = Table(title="Colors")
    for column in ("Role", "Hex", "CSS", "Flutter"):
        table.add_column(column)
    for role, color in (("dominant", response.dominant_color), ("text", response.text_color)):
        if color is None:
            continue
        swatch = f"[on {rgb_to_hex(color.rgb)}]    [/] " if color.rgb is not None else ""
        table.add_row(role, swatch + (color.hex or ""), color.css or "", color.flutter_hex or "")
    for index, entry in enumerate(response.get_palette()):
        weight = f" ({entry.weight:g})" if entry.weight is not None else ""
        table.add_row(f"palette[{index}]{weight}", entry.hex or "", entry.css or "", "")
    console.print(table)


def _run(client: RadioAPI, args: argparse.Namespace) -> Any:
    if args.command == "streamtitle":
        return client.get_stream_title(args.stream_url, args.service, False if args.no_history else None)
    if args.command == "search":
        return client.search_music(args.query, args.service, args.search_language)
    return client.get_image_colors(args.image_url)


_RENDERERS = {
    "streamtitle": _render_stream_title,
    "search": _render_search,
    "colors": _render_colors,
}


def main(
    argv: Sequence[str] | None = None,
    *,
    transport: "httpx.BaseTransport | None" = None,
) -> int:
    args = build_arg_parser().parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        config = settings.to_client_config(
            base_url=args.base_url,
            api_key=args.api_key,
            language=args.language,
            timeout_seconds=args.timeout,
            throw_on_api_errors=True,
        )
    except InvalidArgument as exc:
        console.print(f"[bold red]Invalid configuration[/] {exc}")
        return EXIT_INVALID

    log.debug("Running {} with {}", args.command, config.export_safe())
    try:
        with RadioAPI(config, transport=transport) as client:
            response = _run(client, args)
    except InvalidArgument as exc:
        console.print(f"[bold red]Invalid argument[/] {exc}")
        return EXIT_INVALID
    except RadioAPIError as exc:
        console.print(f"[bold red]RadioAPI error[/] {exc}")
        log.debug("{}", exc.detailed_message())
        return EXIT_API_ERROR

    if args.json:
        console.print_json(json.dumps(response.to_dict()))
    else:
        _RENDERERS[args.command](response)
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
