from .enums import ContentType, HttpMethod
from .errors import (
    BaseUrlMissingError,
    BuildError,
    DecodingError,
    EncodingError,
    HTTPStatusError,
    InvalidURLError,
    NoBodyError,
    RestlineError,
    TransportError,
    TransportTimeoutError,
    UrlConstructionError,
)
from .request import TransportRequest
from .response import Response

__all__ = [
    "BaseUrlMissingError",
    "BuildError",
    "ContentType",
    "DecodingError",
    "EncodingError",
    "HTTPStatusError",
    "HttpMethod",
    "InvalidURLError",
    "NoBodyError",
    "Response",
    "RestlineError",
    "TransportError",
    "TransportRequest",
    "TransportTimeoutError",
    "UrlConstructionError",
]
