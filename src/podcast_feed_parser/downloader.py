"""HTTP session management and feed download for podcast_feed_parser.

Each thread reuses one ``requests.Session`` with retrying adapters; all of
them are closed at interpreter exit.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import cast, Dict, List, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from requests.utils import requote_uri
from urllib3.util.retry import Retry

from . import config_constants
from .exceptions import FeedAuthError, FeedFetchError

logger = logging.getLogger(__name__)

DEFAULT_HTTP_BACKOFF_FACTOR = 0.5
DEFAULT_HTTP_RETRY_TOTAL = 3
HTTP_RETRY_ALLOWED_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
HTTP_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
HTTP_UNAUTHORIZED = 401
FEED_ACCEPT_HEADER = "application/rss+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.5"


def normalize_url(url: str) -> str:
    """Percent-encode unsafe characters; already-encoded sequences are left alone."""
    normalized = requote_uri(url)
    if normalized != url:
        logger.debug("Normalized feed URL %s -> %s", url, normalized)
    return cast(str, normalized)


class _FeedRetry(Retry):
    """Retry policy that reports every retried feed request at warning level."""

    def increment(self, method=None, url=None, *args, **kwargs):  # type: ignore[override]
        retry = super().increment(method=method, url=url, *args, **kwargs)
        cause = kwargs.get("error") or kwargs.get("response")
        logger.warning(
            "Feed request %s %s failed (%s); retry %d, %s left",
            method or "",
            url or "",
            cause,
            len(retry.history),
            retry.total,
        )
        return retry


def _build_retry() -> Retry:
    return _FeedRetry(
        total=DEFAULT_HTTP_RETRY_TOTAL,
        read=DEFAULT_HTTP_RETRY_TOTAL,
        connect=DEFAULT_HTTP_RETRY_TOTAL,
        status=DEFAULT_HTTP_RETRY_TOTAL,
        backoff_factor=DEFAULT_HTTP_BACKOFF_FACTOR,
        status_forcelist=HTTP_RETRY_STATUS_CODES,
        allowed_methods=HTTP_RETRY_ALLOWED_METHODS,
        raise_on_status=False,
    )


def _configure_http_session(session: requests.Session) -> None:
    """Mount retrying adapters for both URL schemes."""
    adapter = HTTPAdapter(max_retries=_build_retry())
    for scheme in ("http://", "https://"):
        session.mount(scheme, adapter)


class _SessionPool:
    """One session per thread, tracked so they can all be closed together."""

    def __init__(self) -> None:
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._lock = threading.Lock()

    def get(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            _configure_http_session(session)
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
            logger.debug("Opened HTTP session for thread %s", threading.current_thread().name)
        return session

    def close_all(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            try:
                session.close()
            except Exception as exc:  # pragma: no cover
                logger.debug("Ignoring error while closing HTTP session: %s", exc)
        self._local = threading.local()


_SESSIONS = _SessionPool()
atexit.register(_SESSIONS.close_all)


def _get_thread_request_session() -> requests.Session:
    return _SESSIONS.get()


def _build_headers(headers: Optional[Mapping[str, str]], user_agent: str) -> Dict[str, str]:
    merged = {"User-Agent": user_agent, "Accept": FEED_ACCEPT_HEADER}
    if headers:
        merged.update(headers)
    return merged


def fetch_feed(
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = config_constants.DEFAULT_TIMEOUT_SECONDS,
    user_agent: str = config_constants.DEFAULT_USER_AGENT,
) -> bytes:
    """Download a feed body.

    Args:
        url: Feed URL.
        headers: Extra request headers; they override the defaults.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header unless ``headers`` sets one.

    Returns:
        The raw response body.

    Raises:
        FeedAuthError: If the server answers HTTP 401.
        FeedFetchError: On timeouts, connection failures and other error statuses.
    """
    normalized_url = normalize_url(url)
    session = _get_thread_request_session()
    logger.debug("Fetching feed %s (timeout=%s)", normalized_url, timeout)

    try:
        resp = session.get(
            normalized_url, headers=_build_headers(headers, user_agent), timeout=timeout
        )
    except requests.Timeout as exc:
        raise FeedFetchError(
            f"Timed out after {timeout}s fetching {url}",
            url=url,
            suggestion="Increase the timeout",
        ) from exc
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

    try:
        if resp.status_code == HTTP_UNAUTHORIZED:
            raise FeedAuthError(url=url)
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise FeedFetchError(
                f"Failed to fetch {url}: HTTP {resp.status_code}",
                url=url,
                status_code=resp.status_code,
            ) from exc
        logger.debug(
            "Fetched feed %s with status %s (%d bytes)",
            normalized_url,
            resp.status_code,
            len(resp.content),
        )
        return cast(bytes, resp.content)
    finally:
        resp.close()
