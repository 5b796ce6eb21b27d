import json
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import DecodingError, HTTPStatusError, NoBodyError

T = TypeVar("T")


class Response:
    """Read-only view over the raw output of a transport call.

    A response owns its body bytes, status code and headers. The ``json``,
    ``json_value`` and ``decode`` views are computed from the bytes on each
    access and never modify the response.
    """

    __slots__ = ("_content", "_status_code", "_headers")

    def __init__(
        self,
        content: Optional[bytes],
        status_code: int,
        headers: Union[Mapping[str, str], httpx.Headers, None] = None,
    ) -> None:
        self._content = bytes(content) if content is not None else None
        self._status_code = status_code
        self._headers = httpx.Headers(headers or {})

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "Response":
        return cls(response.content, response.status_code, response.headers)

    @property
    def content(self) -> Optional[bytes]:
        return self._content

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def headers(self) -> httpx.Headers:
        return httpx.Headers(self._headers)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Look up a header value, ignoring the case of ``name``."""
        return self._headers.get(name, default)

    @property
    def text(self) -> str:
        if not self._content:
            return ""
        try:
            return self._content.decode(self._encoding, errors="replace")
        except LookupError:
            return self._content.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self._status_code < 300

    @property
    def json_value(self) -> Any:
        """Any JSON value parsed from the body, or ``None`` if it cannot be parsed."""
        if not self._content:
            return None
        try:
            return json.loads(self._content)
        except ValueError:
            return None

    @property
    def json(self) -> Dict[str, Any]:
        """Best-effort JSON object view of the body.

        Returns an empty dict when the body is absent, malformed, or holds a
        JSON value that is not an object. Use ``decode`` when these cases
        must be reported.
        """
        value = self.json_value
        if isinstance(value, dict):
            return value
        return {}

    def decode(self, type_: Type[T]) -> T:
        """Parse the body into ``type_``.

        Args:
            type_: Any type pydantic can validate: a ``BaseModel`` subclass, a
                dataclass, a ``TypedDict`` or a plain ``list[int]``-style hint.

        Raises:
            NoBodyError: The response has no body.
            DecodingError: The body is not valid JSON or does not match ``type_``.
        """
        if not self._content:
            raise NoBodyError(self._status_code)
        try:
            return TypeAdapter(type_).validate_json(self._content)
        except ValidationError as e:
            raise DecodingError(
                f"Could not decode response body as {getattr(type_, '__name__', type_)}: {e}"
            ) from e

    def raise_for_status(self) -> "Response":
        if self._status_code < 400:
            return self

        body = self.json_value
        message: Optional[str] = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or body.get("detail")
        raise HTTPStatusError(
            str(message) if message else self._reason_phrase,
            self._status_code,
            self.text or None,
        )

    @property
    def _encoding(self) -> str:
        content_type = self._headers.get("Content-Type", "")
        for part in content_type.split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"

    @property
    def _reason_phrase(self) -> str:
        return httpx.codes.get_reason_phrase(self._status_code) or "HTTP error"

    def __repr__(self) -> str:
        size = len(self._content) if self._content is not None else 0
        return f"<Response [{self._status_code}] {size} bytes>"
