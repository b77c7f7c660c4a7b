"""Command-line interface for podcast_feed_parser."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from dotenv import load_dotenv

from . import __version__, config, config_constants, feed, registry
from .exceptions import PodcastFeedError

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HEADER_SEPARATOR = ":"
NOISY_LIBRARY_LOGGERS = ("urllib3",)


def _is_test_environment() -> bool:
    """Check if we're running under a test runner."""
    if "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ:
        return True
    return os.environ.get("TESTING", "").lower() in ("1", "true", "yes")


def _load_env_file() -> None:
    # Tests pass settings explicitly and must not pick up a developer's .env
    if _is_test_environment():
        return
    try:
        load_dotenv(override=False)
    except (PermissionError, OSError):
        _LOGGER.debug("Could not read .env file", exc_info=True)


def apply_log_level(level: str, log_file: Optional[str] = None) -> None:
    """Apply logging level to root logger and configure handlers.

    Args:
        level: Log level string (e.g., 'DEBUG', 'INFO', 'WARNING')
        log_file: Optional path to log file. If provided, logs will be written to both
                  console and file.

    Raises:
        ValueError: If log level is invalid
        OSError: If log file cannot be created or written to
    """
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    root_logger = logging.getLogger()

    if not root_logger.handlers:
        # Logs go to stderr so stdout carries only the JSON document
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(console_handler)
        root_logger.setLevel(numeric_level)
    else:
        root_logger.setLevel(numeric_level)
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)

    if numeric_level <= logging.DEBUG:
        # Keep connection-pool chatter out of debug output
        for name in NOISY_LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        file_handler_exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
            for h in root_logger.handlers
        )
        if not file_handler_exists:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root_logger.addHandler(file_handler)
            _LOGGER.info("Logging to file: %s", log_file)


def _parse_header(raw: str) -> Tuple[str, str]:
    name, sep, value = raw.partition(HEADER_SEPARATOR)
    if not sep or not name.strip():
        raise ValueError(f"Header must look like 'Name: value', got: {raw!r}")
    return name.strip(), value.strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podcast-feed-parser",
        description="Extract podcast metadata and episodes from an RSS feed as JSON.",
    )
    parser.add_argument(
        "source", nargs="?", default=None, help="Feed URL, or a local file path with --file"
    )
    parser.add_argument(
        "--file",
        action="store_true",
        help="Treat SOURCE as a path to a feed file instead of a URL",
    )
    parser.add_argument(
        "--list-fields",
        action="store_true",
        help="Print the known field names and how each is handled, then exit",
    )
    parser.add_argument("--options", default=None, help="JSON/YAML file with option overrides")
    parser.add_argument(
        "--meta-fields",
        nargs="+",
        default=None,
        metavar="FIELD",
        help="Feed fields to extract ('default' expands to the default list)",
    )
    parser.add_argument(
        "--episode-fields",
        nargs="+",
        default=None,
        metavar="FIELD",
        help="Episode fields to extract ('default' expands to the default list)",
    )
    parser.add_argument("--required-meta", nargs="+", default=None, metavar="FIELD")
    parser.add_argument("--required-episodes", nargs="+", default=None, metavar="FIELD")
    parser.add_argument(
        "--max-episodes",
        type=int,
        default=None,
        help="Only output the first N episodes after sorting",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=None,
        help=f"Request timeout in seconds (default: {config.DEFAULT_TIMEOUT_SECONDS})",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="'NAME: VALUE'",
        help="Extra request header (repeatable)",
    )
    parser.add_argument("--user-agent", default=None, help="User-Agent header for the request")
    parser.add_argument(
        "--indent",
        type=int,
        default=config_constants.DEFAULT_JSON_INDENT,
        help=f"JSON indentation (default: {config_constants.DEFAULT_JSON_INDENT})",
    )
    parser.add_argument(
        "--log-level",
        default=config.DEFAULT_LOG_LEVEL,
        choices=config.VALID_LOG_LEVELS,
        help=f"Logging level (default: {config.DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Raises:
        ValueError: If argument values are invalid.
    """
    args = _build_parser().parse_args(argv)
    errors: List[str] = []
    if args.source is None and not args.list_fields:
        errors.append("a feed URL or file path is required")
    if args.max_episodes is not None and args.max_episodes < 0:
        errors.append("--max-episodes must be non-negative")
    if args.timeout is not None and args.timeout < config.MIN_TIMEOUT_SECONDS:
        errors.append(f"--timeout must be at least {config.MIN_TIMEOUT_SECONDS}")
    if args.indent < 0:
        errors.append("--indent must be non-negative")
    if errors:
        raise ValueError("; ".join(errors))
    return args


def _describe_fields() -> List[Dict[str, Any]]:
    return [dataclasses.asdict(registry.describe_field(name)) for name in registry.known_fields()]


def _build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Combine the options file with the field flags; flags win."""
    overrides: Dict[str, Any] = {}
    if args.options:
        overrides = config.load_options_file(args.options)

    def _set(section: str, scope: str, value: Optional[List[str]]) -> None:
        if value is None:
            return
        merged = dict(overrides.get(section) or {})
        merged[scope] = value
        overrides[section] = merged

    _set("fields", "meta", args.meta_fields)
    _set("fields", "episodes", args.episode_fields)
    _set("required", "meta", args.required_meta)
    _set("required", "episodes", args.required_episodes)
    return overrides


def _build_request(args: argparse.Namespace) -> config.FeedRequest:
    payload: Dict[str, Any] = {"url": args.source}
    if args.header:
        payload["headers"] = dict(_parse_header(raw) for raw in args.header)
    if args.timeout is not None:
        payload["timeout"] = args.timeout
    if args.user_agent:
        payload["user_agent"] = args.user_agent
    return config.build_feed_request(payload)


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    apply_log_level_fn: Optional[Callable[[str, Optional[str]], None]] = None,
    logger: Optional[logging.Logger] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Entry point for the CLI; returns an exit status code."""
    log = logger or _LOGGER
    out = stdout or sys.stdout
    if apply_log_level_fn is None:
        apply_log_level_fn = apply_log_level

    _load_env_file()

    try:
        args = parse_args(argv)
    except ValueError as exc:
        log.error(f"Error: {exc}")
        return 1

    apply_log_level_fn(args.log_level, args.log_file)

    if args.list_fields:
        out.write(json.dumps(_describe_fields(), indent=args.indent))
        out.write("\n")
        return 0

    try:
        overrides = _build_overrides(args)
        if args.file:
            feed_text = Path(args.source).expanduser().read_bytes()
            podcast = feed.get_podcast_from_feed(feed_text, overrides)
        else:
            podcast = feed.get_podcast_from_url(_build_request(args), overrides)
    except (PodcastFeedError, ValueError, OSError) as exc:
        log.error(f"Error: {exc}")
        return 1

    result = podcast.to_dict()
    if args.max_episodes is not None:
        result["episodes"] = result["episodes"][: args.max_episodes]

    out.write(json.dumps(result, indent=args.indent, ensure_ascii=False))
    out.write("\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - script entry
    raise SystemExit(main())
