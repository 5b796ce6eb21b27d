"""HTTP method and content type enumerations."""

from enum import Enum


class HttpMethod(str, Enum):
    """HTTP verbs supported by the request builder."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @property
    def carries_body(self) -> bool:
        """Whether parameters are sent in the body rather than the query string."""
        return self is not HttpMethod.GET


class ContentType(str, Enum):
    """Body formats used for content negotiation.

    The value of each member is the MIME string stamped on the
    ``Content-Type`` and ``Accept`` headers.
    """

    JSON = "application/json;charset=utf-8"
    FORM = "application/x-www-form-urlencoded;charset=utf-8"
    MULTIPART = "multipart/form-data"
    JPEG = "image/jpg"
    PDF = "application/pdf"

    @property
    def mime_type(self) -> str:
        """MIME type without parameters, e.g. ``application/json``."""
        return self.value.split(";", 1)[0]
