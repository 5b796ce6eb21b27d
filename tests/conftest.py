import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import pytest

# Ensure local source package (src/restline) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from restline._config import Config, get_config  # noqa: E402
from restline._utils._service_url_overrides import clear_overrides_cache  # noqa: E402


class FakeTransport:
    """In-memory transport that records calls and replays a canned response."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.status_code = 200
        self.headers: Dict[str, str] = {"Content-Type": "application/json"}
        self.content = b"{}"

    def respond_with(
        self,
        status_code: int = 200,
        *,
        json_body: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        if json_body is not None:
            self.content = json.dumps(json_body).encode("utf-8")
        elif content is not None:
            self.content = content
        if headers is not None:
            self.headers = headers

    def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ):
        self.calls.append(
            {"method": method, "url": url, "headers": dict(headers), "body": body}
        )
        return self.status_code, self.headers, self.content

    async def execute_async(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ):
        return self.execute(method, url, headers, body)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables and cached settings before each test."""
    monkeypatch.delenv("RESTLINE_BASE_URL", raising=False)
    monkeypatch.delenv("RESTLINE_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("RESTLINE_DEBUG", raising=False)
    monkeypatch.delenv("RESTLINE_RAISE_FOR_STATUS", raising=False)
    get_config.cache_clear()
    clear_overrides_cache()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def base_url() -> str:
    return "https://api.example.com"


@pytest.fixture
def secret() -> str:
    return "secret_access_token"


@pytest.fixture
def config(base_url: str, secret: str) -> Config:
    return Config(base_url=base_url, access_token=secret)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
