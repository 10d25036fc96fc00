#!/usr/bin/env python
"""Archive a channel's current live thumbnail once, outside the event source.

Run from the project root::

    python scripts/archive_thumbnail.py --login alice

Reads the same environment variables (or ``.env``) as the worker:
``BUCKET_NAME``, ``TWITCH_CLIENT_ID`` and ``TWITCH_CLIENT_SECRET`` are
required; the ``MINIO_*`` variables select the storage endpoint.

Usage::

    python scripts/archive_thumbnail.py --login <channel_login> [--log-level DEBUG]

Options:
    --login      (required) Twitch login name of the channel.
    --log-level  Override ``LOG_LEVEL`` for this run.

Exit codes:
    0: Thumbnail archived.
    1: Configuration error or failed invocation (reason printed to stderr).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys

# Ensure the src layout is on sys.path when run as a standalone script.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.join(os.path.dirname(_SCRIPT_DIR), "src")
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)


def _run(login: str, log_level: str | None) -> int:
    """Run one pipeline invocation for ``login`` and return the exit code."""
    from dotenv import load_dotenv  # noqa: PLC0415

    from thumbnail_archiver.config.settings import load_settings  # noqa: PLC0415
    from thumbnail_archiver.core.exceptions import ConfigError  # noqa: PLC0415
    from thumbnail_archiver.core.logging_config import configure_logging  # noqa: PLC0415
    from thumbnail_archiver.pipeline import PipelineOrchestrator  # noqa: PLC0415

    load_dotenv()
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"[archive_thumbnail] ERROR: {exc}", file=sys.stderr)
        return 1

    configure_logging(log_level or settings.log_level)
    outcome = asyncio.run(PipelineOrchestrator(settings).run(login))
    summary = json.dumps(outcome.to_dict(), indent=2)

    if not outcome.accepted:
        print(f"[archive_thumbnail] FAILED:\n{summary}", file=sys.stderr)
        return 1

    print(f"[archive_thumbnail] Archived thumbnail:\n{summary}")
    return 0


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed ``argparse.Namespace`` with ``login`` and ``log_level`` attributes.
    """
    parser = argparse.ArgumentParser(
        description="Archive the current live thumbnail of one Twitch channel.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--login",
        required=True,
        help="Twitch login name of the channel (e.g. 'alice').",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging verbosity for this run (DEBUG, INFO, WARNING, ...).",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point for the manual archive script."""
    args = _parse_args()
    sys.exit(_run(login=args.login.strip(), log_level=args.log_level))


if __name__ == "__main__":
    main()
