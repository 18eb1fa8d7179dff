"""Command-line entry point: parse flags, build Settings, and run the server."""

import argparse
import logging
from typing import List, Optional

import uvicorn

from notecache.config import Settings
from notecache.main import create_app, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser. Every flag is optional and overrides its env var."""
    parser = argparse.ArgumentParser(
        prog="notecache",
        description="Serve a directory of text notes over HTTP.",
    )
    parser.add_argument("--host", help="Bind address (env: HOST, default 0.0.0.0).")
    parser.add_argument("-p", "--port", type=int, help="Bind port (env: PORT, default 3000).")
    parser.add_argument(
        "-c",
        "--cache",
        dest="storage_root",
        help="Directory where notes are stored (env: CACHE, default ./notes).",
    )
    parser.add_argument("--static-dir", help="Directory served at / (env: STATIC_DIR).")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging verbosity (env: LOG_LEVEL, default INFO).",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Merge parsed flags over environment configuration."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if value is not None
    }
    return Settings(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the NoteCache server from CLI-style arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = settings_from_args(args)

    setup_logging(settings.log_level)
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0
