from logging import getLogger
from typing import Any, Dict, Optional, Type, TypeVar

from ._builder import RequestBuilder, execute, execute_async
from ._config import Config, get_config
from ._transport import HttpxTransport, Transport
from ._utils._logs import setup_logging
from ._utils._user_agent import user_agent_value
from ._utils.constants import (
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_USER_AGENT,
    LOGGER_NAME,
)
from .models.response import Response

T = TypeVar("T")


class RestClient:
    """Executes request builders against a shared transport.

    Subclass it to group the calls of one API, typically next to an
    ``Endpoint`` enumeration:

        ```python
        class UsersClient(RestClient):
            async def list_users(self, page: int = 1) -> list[User]:
                request = Users.LIST.get.with_params({"page": page})
                return await self.send_as_async(request, list[User])
        ```

    Default headers (Accept, User-Agent, Authorization from
    ``RESTLINE_ACCESS_TOKEN`` and ``custom_headers``) are added to every
    request that does not set them itself.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self._logger = getLogger(LOGGER_NAME)
        self._config = config or get_config()
        if self._config.debug:
            setup_logging(debug=True)
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(self._config)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def default_headers(self) -> Dict[str, str]:
        return {
            HEADER_ACCEPT: "application/json",
            HEADER_USER_AGENT: user_agent_value(type(self).__name__),
            **self.auth_headers,
            **self.custom_headers,
        }

    @property
    def auth_headers(self) -> Dict[str, str]:
        if not self._config.access_token:
            return {}
        return {HEADER_AUTHORIZATION: f"Bearer {self._config.access_token}"}

    @property
    def custom_headers(self) -> Dict[str, str]:
        return {}

    def prepare(self, request: RequestBuilder) -> RequestBuilder:
        """Return ``request`` with the default headers it does not set itself."""
        missing = {
            name: value
            for name, value in self.default_headers.items()
            if request.header(name) is None
        }
        return request.with_headers(missing) if missing else request

    def response(self, request: RequestBuilder) -> Response:
        built = self.prepare(request).build()
        response = execute(self._transport, built)
        return self._check(response)

    async def response_async(self, request: RequestBuilder) -> Response:
        built = self.prepare(request).build()
        response = await execute_async(self._transport, built)
        return self._check(response)

    def send(self, request: RequestBuilder) -> Dict[str, Any]:
        """Execute ``request`` and return the response body as a JSON object."""
        return self.response(request).json

    async def send_async(self, request: RequestBuilder) -> Dict[str, Any]:
        response = await self.response_async(request)
        return response.json

    def send_as(self, request: RequestBuilder, type_: Type[T]) -> T:
        """Execute ``request`` and decode the body into ``type_``."""
        return self.response(request).decode(type_)

    async def send_as_async(self, request: RequestBuilder, type_: Type[T]) -> T:
        response = await self.response_async(request)
        return response.decode(type_)

    def close(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            self._transport.close()

    async def aclose(self) -> None:
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _check(self, response: Response) -> Response:
        if self._config.raise_for_status and response.status_code >= 400:
            self._logger.warning(
                f"Request failed with status {response.status_code}: {response.text[:200]}"
            )
            response.raise_for_status()
        return response
