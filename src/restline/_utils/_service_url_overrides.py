"""Base URL overrides for endpoint groups.

Lets a whole group of endpoints be pointed at another host (a local mock
server, a staging deployment) through environment variables of the form
``RESTLINE_<SERVICE>_URL``, without touching the code that declares them.
"""

import os
import re
from functools import lru_cache
from typing import Optional

from .constants import ENV_BASE_URL, ENV_PREFIX

_OVERRIDE_PATTERN = re.compile(rf"^{ENV_PREFIX}(?P<service>[A-Z0-9_]+)_URL$")


def service_env_name(service: str) -> str:
    """Environment variable consulted for ``service``.

    >>> service_env_name("UsersApi")
    'RESTLINE_USERSAPI_URL'
    """
    normalized = re.sub(r"[^A-Za-z0-9]+", "_", service).strip("_").upper()
    return f"{ENV_PREFIX}{normalized}_URL"


@lru_cache(maxsize=1)
def _load_service_overrides() -> dict[str, str]:
    """Scan environment for ``RESTLINE_{SERVICE}_URL`` variables.

    Returns:
        Mapping of environment variable name to override URL.
    """
    overrides: dict[str, str] = {}
    for key, value in os.environ.items():
        if key == ENV_BASE_URL or not value:
            continue
        if _OVERRIDE_PATTERN.match(key):
            overrides[key] = value.rstrip("/")
    return overrides


def get_service_override(service: str) -> Optional[str]:
    """Look up a base URL override for ``service``.

    Args:
        service: The service name, usually the endpoint class name.
            Lookup is case-insensitive.

    Returns:
        The override URL if configured, otherwise ``None``.
    """
    return _load_service_overrides().get(service_env_name(service))


def clear_overrides_cache() -> None:
    """Clear the cached overrides. Intended for tests."""
    _load_service_overrides.cache_clear()
