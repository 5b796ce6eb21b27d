from typing import Any, Union

from ._builder import RequestBuilder
from ._config import get_config
from ._utils._service_url_overrides import get_service_override
from ._utils._url import join_url
from .models.enums import ContentType, HttpMethod
from .models.errors import BaseUrlMissingError


class Endpoint:
    """Mixin for enumerations of the routes of a REST API.

    Each member's value is its path, which may hold ``str.format`` style
    placeholders filled in by ``url_for``/``request``. The base URL comes
    from the ``RESTLINE_<SERVICE>_URL`` override if set, then from
    ``RESTLINE_BASE_URL``; subclasses usually override ``base_url``.

    Classes that are not enumerations must override the ``path`` property;
    the default reads the enum member value and raises
    ``NotImplementedError`` when there is none.

    Example:
        ```python
        class Users(Endpoint, Enum):
            LIST = "/users"
            DETAIL = "/users/{user_id}"

            @property
            def base_url(self) -> str:
                return "https://api.example.com/v1"

        Users.LIST.get.with_params({"page": 2})
        Users.DETAIL.request(HttpMethod.DELETE, user_id=7)
        ```
    """

    @property
    def service_name(self) -> str:
        return type(self).__name__

    @property
    def base_url(self) -> str:
        override = get_service_override(self.service_name)
        if override:
            return override

        base_url = get_config().base_url
        if not base_url:
            raise BaseUrlMissingError()
        return base_url

    @property
    def path(self) -> str:
        value = getattr(self, "value", None)
        if value is None:
            raise NotImplementedError(
                f"{type(self).__name__} must be an Enum or define a path property"
            )
        return str(value)

    @property
    def url(self) -> str:
        return self.url_for()

    def url_for(self, **path_params: Any) -> str:
        path = self.path.format(**path_params) if path_params else self.path
        return join_url(self.base_url, path)

    def request(
        self, method: Union[HttpMethod, str], **path_params: Any
    ) -> RequestBuilder:
        """A builder for this route, sending and accepting JSON by default."""
        return (
            RequestBuilder(self.url_for(**path_params), method)
            .with_content_type(ContentType.JSON)
            .with_accept_type(ContentType.JSON)
        )

    @property
    def get(self) -> RequestBuilder:
        return self.request(HttpMethod.GET)

    @property
    def post(self) -> RequestBuilder:
        return self.request(HttpMethod.POST)

    @property
    def put(self) -> RequestBuilder:
        return self.request(HttpMethod.PUT)

    @property
    def delete(self) -> RequestBuilder:
        return self.request(HttpMethod.DELETE)

    @property
    def patch(self) -> RequestBuilder:
        return self.request(HttpMethod.PATCH)
