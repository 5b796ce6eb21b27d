from logging import getLogger
from typing import Mapping, Optional, Protocol, Tuple

import httpx

from ._config import Config, get_config
from ._utils._logs import mask_headers
from ._utils._ssl_context import get_httpx_client_kwargs
from ._utils.constants import LOGGER_NAME
from .models.errors import TransportError, TransportTimeoutError

RawResponse = Tuple[int, Mapping[str, str], bytes]


class Transport(Protocol):
    """The network capability a request is executed with.

    Implementations send ``method`` to ``url`` with the given headers and
    body and return ``(status_code, headers, content)``. Connectivity
    failures must be raised as ``TransportError`` and timeouts as
    ``TransportTimeoutError``.
    """

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> RawResponse: ...

    async def execute_async(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> RawResponse: ...


class HttpxTransport:
    """``Transport`` backed by ``httpx.Client`` and ``httpx.AsyncClient``.

    Clients passed in are used as-is and left open on ``close()``; clients
    created here are built lazily from the config and closed with the
    transport.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        client: Optional[httpx.Client] = None,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._config = config or get_config()
        self._client = client
        self._client_async = async_client
        self._owns_client = client is None
        self._owns_client_async = async_client is None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(**get_httpx_client_kwargs(self._config))
        return self._client

    @property
    def client_async(self) -> httpx.AsyncClient:
        if self._client_async is None:
            self._client_async = httpx.AsyncClient(
                **get_httpx_client_kwargs(self._config)
            )
        return self._client_async

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> RawResponse:
        self._logger.debug(f"Request: {method} {url}")
        self._logger.debug(f"HEADERS: {mask_headers(dict(headers))}")

        try:
            response = self.client.request(
                method, url, headers=dict(headers), content=body
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"Request timed out: {method} {url}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {method} {url}: {e}") from e

        self._logger.debug(f"Response: {response.status_code} for {method} {url}")
        return response.status_code, response.headers, response.content

    async def execute_async(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> RawResponse:
        self._logger.debug(f"Request: {method} {url}")
        self._logger.debug(f"HEADERS: {mask_headers(dict(headers))}")

        try:
            response = await self.client_async.request(
                method, url, headers=dict(headers), content=body
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(f"Request timed out: {method} {url}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {method} {url}: {e}") from e

        self._logger.debug(f"Response: {response.status_code} for {method} {url}")
        return response.status_code, response.headers, response.content

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        self.close()
        if self._owns_client_async and self._client_async is not None:
            await self._client_async.aclose()
            self._client_async = None

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
