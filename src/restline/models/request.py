from dataclasses import dataclass, field
from typing import Dict, Optional

from .enums import HttpMethod


@dataclass(frozen=True)
class TransportRequest:
    """A fully materialized request, ready to be handed to a transport.

    Instances are produced by ``RequestBuilder.build()``. The URL already
    contains the merged query string and the body, if any, is encoded.
    """

    method: HttpMethod
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @classmethod
    def empty(cls) -> "TransportRequest":
        return cls(method=HttpMethod.GET, url="")

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None
