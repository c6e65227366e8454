"""Environment doctor for RadioAPI clients.

Performs a few fast checks to reduce onboarding friction:
- Validate that the client configuration can be built from the environment.
- Report whether an API key is configured.
- Check that the RadioAPI base URL answers HTTP requests.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Sequence
from urllib.parse import urlparse, urlunparse

from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text

from radioapi.client_config import ClientConfig
from radioapi.config import Settings, get_settings
from radioapi.errors import InvalidArgument
from radioapi.net.http import HttpClient, TransportFailure

if TYPE_CHECKING:
    import httpx

console = Console()
log = logger.bind(module="doctor")

Status = Literal["ok", "warn", "fail"]


@dataclass(slots=True)
class CheckResult:
    name: str
    status: Status
    details: str


def _status_text(status: Status) -> Text:
    styles = {"ok": "bold green", "warn": "bold yellow", "fail": "bold red"}
    return Text(status.upper(), style=styles.get(status, "bold"))


def _sanitize_url(raw: str) -> str:
    """Best-effort redaction for credential-bearing URLs."""
    value = (raw or "").strip()
    if not value:
        return value

    parsed = urlparse(value)
    if not parsed.scheme:
        return value

    # Hide userinfo and query, keep host/port/path.
    netloc = parsed.hostname or ""
    if parsed.port is not None:
        netloc = f"{netloc}:{parsed.port}"
    safe = parsed._replace(netloc=netloc, query="")
    return urlunparse(safe)


def _check_config(settings: Settings) -> tuple[CheckResult, ClientConfig | None]:
    try:
        config = settings.to_client_config()
    except InvalidArgument as exc:
        return CheckResult("config", "fail", str(exc)), None
    return CheckResult("config", "ok", f"base_url={_sanitize_url(config.base_url)} language={config.language}"), config


def _check_api_key(config: ClientConfig) -> CheckResult:
    if config.api_key:
        return CheckResult("api_key", "ok", "configured")
    return CheckResult(
        "api_key",
        "warn",
        "RADIOAPI_API_KEY is not set (only required if your RadioAPI instance enforces keys).",
    )


def _check_reachable(
    config: ClientConfig,
    *,
    timeout_seconds: float,
    transport: "httpx.BaseTransport | None" = None,
) -> CheckResult:
    safe = _sanitize_url(config.base_url)
    http = HttpClient(base_url=config.base_url, timeout_seconds=timeout_seconds, transport=transport)
    result = http.execute_get("/")
    if isinstance(result, TransportFailure):
        return CheckResult("api", "fail", f"unreachable: {safe} ({result.kind.value}: {result.message})")
    if result.is_server_error:
        return CheckResult("api", "warn", f"reachable but returned HTTP {result.status_code}: {safe}")
    return CheckResult("api", "ok", f"reachable: {safe} (HTTP {result.status_code})")


def _render_table(results: Sequence[CheckResult]) -> None:
    table = Table(title="RadioAPI doctor", show_lines=False)
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Details")
    for item in results:
        table.add_row(item.name, _status_text(item.status), item.details)
    console.print(table)


def _summarize(results: Sequence[CheckResult]) -> tuple[int, int, int]:
    ok = sum(1 for r in results if r.status == "ok")
    warn = sum(1 for r in results if r.status == "warn")
    fail = sum(1 for r in results if r.status == "fail")
    return ok, warn, fail


def run_checks(
    settings: Settings,
    *,
    timeout_seconds: float = 2.0,
    offline: bool = False,
    transport: "httpx.BaseTransport | None" = None,
) -> list[CheckResult]:
    results: list[CheckResult] = []
    config_result, config = _check_config(settings)
    results.append(config_result)
    if config is None:
        return results
    results.append(_check_api_key(config))
    if not offline:
        results.append(_check_reachable(config, timeout_seconds=timeout_seconds, transport=transport))
    return results


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run environment checks for the RadioAPI client.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--timeout-seconds",
        type=float,
        default=2.0,
        help="Network timeout used for the reachability check.",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the network reachability check.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as failures (non-zero exit code).",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print results as JSON (useful for CI).",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    transport: "httpx.BaseTransport | None" = None,
) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    timeout = float(max(0.2, args.timeout_seconds))

    results = run_checks(settings, timeout_seconds=timeout, offline=args.offline, transport=transport)
    log.debug("Doctor results: {}", results)

    if args.json_output:
        payload = [{"name": r.name, "status": r.status, "details": r.details} for r in results]
        console.print(json.dumps(payload, ensure_ascii=False, indent=2), soft_wrap=True, markup=False, highlight=False)
    else:
        _render_table(results)

    ok, warn, fail = _summarize(results)
    summary = f"ok={ok} warn={warn} fail={fail}"
    if fail:
        console.print(f"[bold red]Doctor failed[/] {summary}")
        return 1
    if warn and args.strict:
        console.print(f"[bold yellow]Doctor warnings (strict)[/] {summary}")
        return 2
    console.print(f"[bold green]Doctor passed[/] {summary}")
    return 0
