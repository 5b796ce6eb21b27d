from typing import Optional


class RestlineError(Exception):
    """Base class for every error raised by restline."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class BuildError(RestlineError):
    """Raised while materializing a request, before any network activity."""


class InvalidURLError(BuildError):
    """Raised when a URL cannot be parsed into scheme, host and path components."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class UrlConstructionError(BuildError):
    """Raised when merged URL components cannot be reassembled into a valid URL."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        message = f"Could not construct a valid URL from {url!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class EncodingError(BuildError):
    """Raised when request parameters cannot be serialized for the content type."""


class BaseUrlMissingError(BuildError):
    def __init__(
        self,
        message="No base URL configured. Set the RESTLINE_BASE_URL environment variable or override Endpoint.base_url.",
    ):
        super().__init__(message)


class DecodingError(RestlineError):
    """Raised when response bytes do not match the requested shape."""


class NoBodyError(RestlineError):
    """Raised when decoding is attempted against an empty response body."""

    def __init__(self, status_code: Optional[int] = None):
        self.status_code = status_code
        message = "Response has no body to decode"
        if status_code is not None:
            message = f"{message} (status {status_code})"
        super().__init__(message)


class HTTPStatusError(RestlineError):
    """Raised by ``Response.raise_for_status`` for 4xx and 5xx responses."""

    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code}: {message}")


class TransportError(RestlineError):
    """Wraps a failure reported by the underlying HTTP transport."""


class TransportTimeoutError(TransportError):
    """The transport gave up waiting for the remote server."""
