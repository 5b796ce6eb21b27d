from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from ._transport import HttpxTransport, Transport
from ._utils._params import encode_body
from ._utils._url import merge_query, validate_url
from ._utils.constants import HEADER_ACCEPT, HEADER_AUTHORIZATION, HEADER_CONTENT_TYPE
from .models.enums import ContentType, HttpMethod
from .models.errors import BuildError, EncodingError
from .models.request import TransportRequest
from .models.response import Response

T = TypeVar("T")

BodyEncoder = Callable[[Dict[str, Any]], bytes]


def _set_header(headers: Dict[str, str], name: str, value: Any) -> None:
    if value is None:
        raise TypeError(f"Header {name!r} has no value; pass a string")
    lowered = name.lower()
    for existing in [key for key in headers if key.lower() == lowered]:
        del headers[existing]
    headers[name] = str(value)


def _check_headers(headers: Mapping[str, str]) -> None:
    for name, value in headers.items():
        try:
            name.encode("ascii")
            value.encode("ascii")
        except UnicodeEncodeError as e:
            raise EncodingError(
                f"Header {name!r} must be ASCII, got {value!r}"
            ) from e


def _header_dict(headers: Mapping[str, Any]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for name, value in headers.items():
        _set_header(result, name, value)
    return result


@dataclass(frozen=True)
class RequestBuilder:
    """Immutable, chainable description of an HTTP request.

    Every ``with_*`` call returns a new builder and leaves the original
    untouched, so partially configured builders can be shared and extended
    freely. Nothing is encoded until ``build()`` is called.

    Example:
        ```python
        request = (
            RequestBuilder.post("https://api.example.com/orders")
            .with_content_type(ContentType.JSON)
            .with_auth("Bearer abc")
            .with_params({"item": "book", "quantity": 2})
        )
        response = await request.send_async()
        ```
    """

    url: str
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    content_type: ContentType = ContentType.JSON
    accept_type: ContentType = ContentType.JSON
    body_encoder: Optional[BodyEncoder] = field(default=None, compare=False)
    array_body: bool = False

    def __post_init__(self) -> None:
        method = self.method
        if not isinstance(method, HttpMethod):
            try:
                method = HttpMethod(str(method).upper())
            except ValueError as e:
                raise BuildError(f"Unsupported HTTP method: {method!r}") from e
        object.__setattr__(self, "method", method)
        object.__setattr__(
            self, "headers", MappingProxyType(_header_dict(self.headers))
        )
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def get(cls, url: str) -> "RequestBuilder":
        return cls(url, HttpMethod.GET)

    @classmethod
    def post(cls, url: str) -> "RequestBuilder":
        return cls(url, HttpMethod.POST)

    @classmethod
    def put(cls, url: str) -> "RequestBuilder":
        return cls(url, HttpMethod.PUT)

    @classmethod
    def delete(cls, url: str) -> "RequestBuilder":
        return cls(url, HttpMethod.DELETE)

    @classmethod
    def patch(cls, url: str) -> "RequestBuilder":
        return cls(url, HttpMethod.PATCH)

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None

    def with_url(self, url: str) -> "RequestBuilder":
        return replace(self, url=url)

    def with_header(self, name: str, value: Any) -> "RequestBuilder":
        """Set a header, replacing any value already set under the same name.

        Header names are compared case-insensitively; the spelling of the
        latest call is the one sent.
        """
        headers = dict(self.headers)
        _set_header(headers, name, value)
        return replace(self, headers=headers)

    def with_headers(self, headers: Mapping[str, Any]) -> "RequestBuilder":
        merged = dict(self.headers)
        for name, value in headers.items():
            _set_header(merged, name, value)
        return replace(self, headers=merged)

    def with_auth(
        self, value: str, header: str = HEADER_AUTHORIZATION
    ) -> "RequestBuilder":
        """Attach a static credential, e.g. ``with_auth("Bearer <token>")``."""
        return self.with_header(header, value)

    def with_params(self, params: Mapping[str, Any]) -> "RequestBuilder":
        """Merge ``params`` into the buffered parameters.

        Keys already present are overwritten; keys not mentioned in ``params``
        are kept. For GET requests parameters become query items, for every
        other method they are encoded into the body according to the content
        type.
        """
        return replace(self, params={**self.params, **params})

    def with_content_type(
        self, content_type: ContentType, header: str = HEADER_CONTENT_TYPE
    ) -> "RequestBuilder":
        return replace(self, content_type=content_type).with_header(
            header, content_type.value
        )

    def with_accept_type(
        self, accept_type: ContentType, header: str = HEADER_ACCEPT
    ) -> "RequestBuilder":
        return replace(self, accept_type=accept_type).with_header(
            header, accept_type.value
        )

    def with_body_encoder(self, encoder: Optional[BodyEncoder]) -> "RequestBuilder":
        """Encode the body with ``encoder`` instead of the content type's codec.

        ``encoder`` receives the parameter dict and must return bytes. Pass
        None to restore the default encoding.
        """
        return replace(self, body_encoder=encoder)

    def with_array_body(self, enabled: bool = True) -> "RequestBuilder":
        """Send JSON parameters wrapped in a one-element array, ``[{...}]``."""
        return replace(self, array_body=enabled)

    def build(self) -> TransportRequest:
        """Materialize the request.

        Pure and repeatable: the same builder always yields an equal
        ``TransportRequest``.

        Raises:
            InvalidURLError: The base URL is not an absolute URL.
            UrlConstructionError: Query parameters produced an invalid URL.
            EncodingError: The parameters cannot be encoded for the content type.
            EncodingError: A header is not ASCII.
        """
        url = validate_url(self.url)
        headers = dict(self.headers)
        _check_headers(headers)
        params = dict(self.params)

        if not self.method.carries_body:
            return TransportRequest(
                method=self.method,
                url=merge_query(url, params),
                headers=headers,
                body=None,
            )
        return TransportRequest(
            method=self.method,
            url=url,
            headers=headers,
            body=self._encode_body(params),
        )

    def send(self, transport: Optional[Transport] = None) -> Response:
        """Build and execute the request.

        Without ``transport`` a temporary ``HttpxTransport`` is opened for the
        duration of the call.
        """
        request = self.build()
        if transport is None:
            with HttpxTransport() as owned:
                return execute(owned, request)
        return execute(transport, request)

    async def send_async(self, transport: Optional[Transport] = None) -> Response:
        request = self.build()
        if transport is None:
            async with HttpxTransport() as owned:
                return await execute_async(owned, request)
        return await execute_async(transport, request)

    def send_as(self, type_: Type[T], transport: Optional[Transport] = None) -> T:
        return self.send(transport).decode(type_)

    async def send_as_async(
        self, type_: Type[T], transport: Optional[Transport] = None
    ) -> T:
        response = await self.send_async(transport)
        return response.decode(type_)

    def _encode_body(self, params: Dict[str, Any]) -> Optional[bytes]:
        if self.body_encoder is None:
            return encode_body(params, self.content_type, as_array=self.array_body)
        try:
            return bytes(self.body_encoder(params))
        except EncodingError:
            raise
        except Exception as e:
            raise EncodingError(f"Custom body encoder failed: {e}") from e


def execute(transport: Transport, request: TransportRequest) -> Response:
    status_code, headers, content = transport.execute(
        request.method.value, request.url, request.headers, request.body
    )
    return Response(content, status_code, headers)


async def execute_async(
    transport: Transport, request: TransportRequest
) -> Response:
    status_code, headers, content = await transport.execute_async(
        request.method.value, request.url, request.headers, request.body
    )
    return Response(content, status_code, headers)

