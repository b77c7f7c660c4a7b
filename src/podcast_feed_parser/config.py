"""Extraction options and fetch settings.

Options decide which fields are extracted for the feed (``meta``) and for each
episode, which of them must be present, and which are returned raw. Defaults
live in ``DEFAULT_OPTIONS``; callers override them per call through
``build_options()`` or an options file loaded with ``load_options_file()``.

All models are frozen, so per-call overrides can never leak into the
process-wide defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, ValidationError

from . import config_constants
from .exceptions import InvalidOptionsError

logger = logging.getLogger(__name__)

# Re-exported for convenience
DEFAULT_FIELDS_TOKEN = config_constants.DEFAULT_FIELDS_TOKEN
DEFAULT_LOG_LEVEL = config_constants.DEFAULT_LOG_LEVEL
DEFAULT_TIMEOUT_SECONDS = config_constants.DEFAULT_TIMEOUT_SECONDS
DEFAULT_USER_AGENT = config_constants.DEFAULT_USER_AGENT
MIN_TIMEOUT_SECONDS = config_constants.MIN_TIMEOUT_SECONDS
VALID_LOG_LEVELS = config_constants.VALID_LOG_LEVELS

OPTION_SECTIONS = ("fields", "required", "uncleaned")
OPTION_SCOPES = ("meta", "episodes")


class FieldLists(BaseModel):
    """A pair of field-name lists, one for the feed and one for episodes."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    meta: Tuple[str, ...] = ()
    episodes: Tuple[str, ...] = ()

    @field_validator("meta", "episodes")
    @classmethod
    def _names_not_blank(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in value:
            if not name.strip():
                raise ValueError("field names must be non-empty strings")
        return value


class Options(BaseModel):
    """Field selection for one extraction call.

    Attributes:
        fields: Ordered field names to extract. The order is kept in records.
        required: Field names that must appear in every record.
        uncleaned: Field names whose raw getter value is returned as-is.

    Example:
        >>> from podcast_feed_parser.config import build_options
        >>> opts = build_options({"fields": {"meta": ["default", "copyright"]}})
        >>> opts.fields.meta[-1]
        'copyright'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    fields: FieldLists = Field(
        default_factory=lambda: FieldLists(
            meta=config_constants.DEFAULT_META_FIELDS,
            episodes=config_constants.DEFAULT_EPISODE_FIELDS,
        )
    )
    required: FieldLists = Field(
        default_factory=lambda: FieldLists(
            meta=config_constants.DEFAULT_REQUIRED_META,
            episodes=config_constants.DEFAULT_REQUIRED_EPISODES,
        )
    )
    uncleaned: FieldLists = Field(
        default_factory=lambda: FieldLists(
            meta=config_constants.DEFAULT_UNCLEANED_META,
            episodes=config_constants.DEFAULT_UNCLEANED_EPISODES,
        )
    )


DEFAULT_OPTIONS = Options()


class FeedRequest(BaseModel):
    """Where and how to fetch a feed.

    ``timeout`` and ``user_agent`` default to the ``PODCAST_FEED_TIMEOUT`` and
    ``PODCAST_FEED_USER_AGENT`` environment variables when they are set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: int = Field(
        default_factory=config_constants.env_timeout_seconds,
        ge=MIN_TIMEOUT_SECONDS,
        description="Request timeout in seconds",
    )
    user_agent: str = Field(default_factory=config_constants.env_user_agent)

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"Feed URL must be http or https: {value}")
        if not parsed.netloc:
            raise ValueError(f"Feed URL must have a valid hostname: {value}")
        return value


def _expand_default_token(selected: Tuple[str, ...], defaults: Tuple[str, ...]) -> Tuple[str, ...]:
    """Replace the ``"default"`` token with the default list, deduplicated."""
    if DEFAULT_FIELDS_TOKEN not in selected:
        return selected
    merged = list(dict.fromkeys((*defaults, *selected)))
    merged.remove(DEFAULT_FIELDS_TOKEN)
    return tuple(merged)


def build_options(overrides: Union[None, Options, Mapping[str, Any]] = None) -> Options:
    """Merge caller overrides into the default options.

    Each section (``fields``, ``required``, ``uncleaned``) given by the caller
    replaces the default ``meta`` and/or ``episodes`` list it names; lists that
    are not given keep their defaults. A ``"default"`` entry in ``fields.meta``
    or ``fields.episodes`` expands to the default list followed by the
    caller's extra names.

    Args:
        overrides: None for the defaults, an ``Options`` instance (returned
            as-is), or a mapping shaped like ``Options``.

    Returns:
        Resolved, immutable Options.

    Raises:
        InvalidOptionsError: If the overrides are not shaped like Options.
    """
    if overrides is None:
        return DEFAULT_OPTIONS
    if isinstance(overrides, Options):
        return overrides
    if not isinstance(overrides, Mapping):
        raise InvalidOptionsError(f"expected a mapping, got {type(overrides).__name__}")

    unknown = sorted(str(key) for key in overrides if key not in OPTION_SECTIONS)
    if unknown:
        raise InvalidOptionsError(f"unknown option section(s): {', '.join(unknown)}")

    payload: Dict[str, Dict[str, Any]] = {}
    for section in OPTION_SECTIONS:
        defaults: FieldLists = getattr(DEFAULT_OPTIONS, section)
        merged: Dict[str, Any] = {scope: getattr(defaults, scope) for scope in OPTION_SCOPES}
        given = overrides.get(section)
        if given is not None:
            if not isinstance(given, Mapping):
                raise InvalidOptionsError(f"{section} must be a mapping of meta/episodes lists")
            merged.update(given)
        payload[section] = merged

    try:
        resolved = Options.model_validate(payload)
    except ValidationError as exc:
        raise InvalidOptionsError(str(exc)) from exc

    fields = FieldLists(
        meta=_expand_default_token(resolved.fields.meta, DEFAULT_OPTIONS.fields.meta),
        episodes=_expand_default_token(resolved.fields.episodes, DEFAULT_OPTIONS.fields.episodes),
    )
    options = Options(fields=fields, required=resolved.required, uncleaned=resolved.uncleaned)
    logger.debug(
        "Resolved options: %d meta fields, %d episode fields",
        len(options.fields.meta),
        len(options.fields.episodes),
    )
    return options


def build_feed_request(
    request: Union[str, FeedRequest, Mapping[str, Any]],
    timeout: Optional[int] = None,
) -> FeedRequest:
    """Coerce a URL string, mapping or FeedRequest into a validated FeedRequest.

    Raises:
        ValueError: If the request is malformed.
    """
    if isinstance(request, FeedRequest):
        return request
    payload: Dict[str, Any] = {"url": request} if isinstance(request, str) else dict(request)
    if timeout is not None:
        payload["timeout"] = timeout
    try:
        return FeedRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid feed request: {exc}") from exc


def load_options_file(path: str) -> Dict[str, Any]:
    """Load option overrides from a JSON or YAML file.

    The file format is detected from the extension (``.json``, ``.yaml`` or
    ``.yml``). The result can be passed to ``build_options()``.

    Args:
        path: Path to the options file. Supports tilde expansion.

    Returns:
        Dict[str, Any]: The overrides mapping read from the file.

    Raises:
        InvalidOptionsError: If the path is empty, the file is missing or
            unreadable, the format is unsupported, parsing fails, or the
            document is not a mapping.

    Example YAML:
        fields:
          meta: [default, copyright]
        required:
          episodes: [guid]
    """
    if not path:
        raise InvalidOptionsError("options path cannot be empty")

    options_path = Path(path).expanduser()
    try:
        resolved = options_path.resolve()
    except (OSError, RuntimeError) as exc:
        raise InvalidOptionsError(f"invalid options path: {path} ({exc})") from exc

    if not resolved.exists():
        raise InvalidOptionsError(f"options file not found: {resolved}")

    suffix = resolved.suffix.lower()
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidOptionsError(f"failed to read options file {resolved}: {exc}") from exc

    if suffix == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidOptionsError(f"invalid JSON options file {resolved}: {exc}") from exc
    elif suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:  # type: ignore[attr-defined]
            raise InvalidOptionsError(f"invalid YAML options file {resolved}: {exc}") from exc
    else:
        raise InvalidOptionsError(f"unsupported options file type: {resolved.suffix}")

    if not isinstance(data, dict):
        raise InvalidOptionsError("options file must contain a mapping at the top level")

    return data
