from __future__ import annotations

"""Environment doctor for the RadioAPI client.

Thin wrapper around ``radioapi.doctor`` that configures Loguru first.

Usage (with uv):
    uv run python script/doctor.py
    uv run python script/doctor.py --offline --json
"""

import sys

from radioapi.cli import configure_logging
from radioapi.config import get_settings
from radioapi.doctor import main as doctor_main


def main() -> int:
    configure_logging(get_settings().log_level)
    return int(doctor_main(sys.argv[1:]))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
