"""Fluent builder for HTTP REST requests with typed JSON decoding."""

from ._builder import RequestBuilder
from ._client import RestClient
from ._config import Config, get_config
from ._endpoint import Endpoint
from ._transport import HttpxTransport, Transport
from ._utils import setup_logging
from ._version import __version__
from .models import (
    BaseUrlMissingError,
    BuildError,
    ContentType,
    DecodingError,
    EncodingError,
    HTTPStatusError,
    HttpMethod,
    InvalidURLError,
    NoBodyError,
    Response,
    RestlineError,
    TransportError,
    TransportRequest,
    TransportTimeoutError,
    UrlConstructionError,
)

__all__ = [
    "BaseUrlMissingError",
    "BuildError",
    "Config",
    "ContentType",
    "DecodingError",
    "EncodingError",
    "Endpoint",
    "HTTPStatusError",
    "HttpMethod",
    "HttpxTransport",
    "InvalidURLError",
    "NoBodyError",
    "RequestBuilder",
    "Response",
    "RestClient",
    "RestlineError",
    "Transport",
    "TransportError",
    "TransportRequest",
    "TransportTimeoutError",
    "UrlConstructionError",
    "__version__",
    "get_config",
    "setup_logging",
]
