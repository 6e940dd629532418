"""CLI/bootstrap helpers for the MovieHouse application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from movie_house.action_messages import build_actionable_error
from movie_house.config import load_config, resolve_api_key, save_config
from movie_house.models import (
    CONFIG_APP_NAME,
    MEDIA_TYPES,
    REQUEST_TIMEOUT_MAX,
    SearchFilters,
    UserConfig,
    is_valid_year,
)

logger = logging.getLogger(__name__)

LOG_FILENAME = "movie-house.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s movie-house[%(process)d] %(levelname)-7s %(name)s: %(message)s"

# color mode -> (variable to set, variable to drop); auto drops FORCE_COLOR only
_COLOR_ENV: dict[str, tuple[str | None, str]] = {
    "never": ("NO_COLOR", "FORCE_COLOR"),
    "always": ("FORCE_COLOR", "NO_COLOR"),
    "auto": (None, "FORCE_COLOR"),
}


def get_log_path() -> Path:
    """Location of the rotating debug log, beside the config file."""
    return Path(user_config_dir(CONFIG_APP_NAME)) / LOG_FILENAME


def _configure_logging(debug: bool) -> None:
    """Silence logging, or with ``debug`` send everything to the rotating log.

    The TUI owns the terminal, so nothing is ever written to stderr.
    """
    if not debug:
        logging.disable(logging.CRITICAL)
        return

    log_path = get_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Translate ``--color`` into the NO_COLOR / FORCE_COLOR hints Textual reads."""
    enable, drop = _COLOR_ENV.get(color_mode, _COLOR_ENV["auto"])
    os.environ.pop(drop, None)
    if enable is not None:
        os.environ[enable] = "1"


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search OMDb for movies, series, and episodes in a TUI"
    )
    parser.add_argument(
        "--query",
        type=str,
        default="",
        help="Initial search text (default: discover with a random keyword)",
    )
    parser.add_argument(
        "--type",
        dest="media_type",
        choices=MEDIA_TYPES,
        default=None,
        help="Initial media type filter",
    )
    parser.add_argument(
        "--year",
        type=str,
        default=None,
        help="Initial release year filter (YYYY; anything else is ignored)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="OMDb API key (default: $OMDB_API_KEY, then config value)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help=f"Per-request timeout in seconds (1-{REQUEST_TIMEOUT_MAX}; default: config value)",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Persist --api-key/--timeout/--ascii to the config file before starting",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/movie-house/movie-house.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        help="Use ASCII-only icons for compatibility with limited terminals",
    )
    return parser


def _apply_overrides(args: argparse.Namespace, config: UserConfig) -> UserConfig:
    """Fold CLI overrides into the loaded config."""
    if args.api_key:
        config.api_key = args.api_key.strip()
    if args.timeout is not None:
        config.request_timeout_seconds = max(1, min(args.timeout, REQUEST_TIMEOUT_MAX))
    if args.ascii:
        config.ascii_icons = True
    return config


def main(
    argv: list[str] | None = None,
    *,
    load_config_fn: Callable[[], UserConfig] = load_config,
    save_config_fn: Callable[[UserConfig], bool] = save_config,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    args = _build_parser().parse_args(argv)

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("movie-house starting, cwd=%s", Path.cwd())

    config = _apply_overrides(args, load_config_fn())
    if args.save_config and not save_config_fn(config):
        print(
            build_actionable_error(
                "save the configuration",
                why="the config directory is not writable",
                next_step="check permissions or run without --save-config",
            ),
            file=sys.stderr,
        )
        return 1

    if args.year is not None and not is_valid_year(args.year.strip()):
        logger.debug("Ignoring malformed --year %r", args.year)

    if not validate_interactive_tty_fn():
        print(
            "Error: movie-house requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run movie-house directly in a terminal session", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    if app_factory is None:
        from movie_house.app import MovieHouse as _MovieHouse

        app_factory = _MovieHouse

    app = app_factory(
        config,
        initial_query=args.query,
        initial_filters=SearchFilters(media_type=args.media_type, year=args.year),
        api_key=resolve_api_key(config, args.api_key),
        ascii_icons=args.ascii,
    )
    app.run()
    return 0


__all__ = [
    "_apply_overrides",
    "_build_parser",
    "_configure_color_mode",
    "_configure_logging",
    "_validate_interactive_tty",
    "get_log_path",
    "main",
]
