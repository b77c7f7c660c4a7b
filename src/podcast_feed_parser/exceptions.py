"""Custom exceptions for podcast_feed_parser.

Extraction of a single optional field never raises; these exceptions cover
failures that abort a whole call. Using typed exceptions improves:
- Error messages with actionable suggestions
- Test assertions on specific failure causes

Exception Hierarchy:
    PodcastFeedError (base)
    ├── RequiredFieldMissingError - A configured required field was not extracted
    ├── InvalidOptionsError - Caller options could not be merged or validated
    ├── FeedParseError - Feed body is not well-formed XML or not an RSS document
    └── FeedFetchError - Feed body could not be retrieved
        └── FeedAuthError - Server answered HTTP 401
"""

from typing import Iterable, Optional


class PodcastFeedError(Exception):
    """Base exception for all podcast_feed_parser errors.

    Attributes:
        message: Human-readable error message
        suggestion: Optional suggestion for resolving the error
    """

    def __init__(self, message: str, suggestion: Optional[str] = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message with the suggestion, if any."""
        parts = [self.message]
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " ".join(parts)


class RequiredFieldMissingError(PodcastFeedError):
    """Raised when one or more required values are missing from a feed.

    Example:
        >>> raise RequiredFieldMissingError(scope="episodes", missing=["guid"])
    """

    def __init__(
        self,
        scope: str = "meta",
        missing: Iterable[str] = (),
        suggestion: Optional[str] = None,
    ) -> None:
        self.scope = scope
        self.missing = tuple(missing)
        message = "One or more required values are missing from feed."
        if self.missing:
            message = f"{message} ({scope}: {', '.join(self.missing)})"
        if suggestion is None and self.missing:
            suggestion = "Add the required fields to the requested field list"
        super().__init__(message=message, suggestion=suggestion)


class InvalidOptionsError(PodcastFeedError):
    """Raised when caller options are malformed.

    Attributes:
        detail: What was wrong with the options, when known

    Example:
        >>> raise InvalidOptionsError("fields.meta must be a list of field names")
    """

    def __init__(self, detail: Optional[str] = None, suggestion: Optional[str] = None) -> None:
        self.detail = detail
        message = f"Invalid options: {detail}" if detail else "Invalid options."
        super().__init__(message=message, suggestion=suggestion)


class FeedParseError(PodcastFeedError):
    """Raised when a feed body cannot be turned into an RSS document tree."""


class FeedFetchError(PodcastFeedError):
    """Raised when a feed body cannot be retrieved.

    Attributes:
        url: URL that was requested
        status_code: HTTP status code, when the server answered
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message=message, suggestion=suggestion)


class FeedAuthError(FeedFetchError):
    """Raised when the feed server rejects the request with HTTP 401."""

    def __init__(self, url: Optional[str] = None, suggestion: Optional[str] = None) -> None:
        if suggestion is None:
            suggestion = "Pass credentials through the request headers"
        super().__init__(
            message=f"Feed request was not authorized (HTTP 401): {url}",
            url=url,
            status_code=401,
            suggestion=suggestion,
        )
