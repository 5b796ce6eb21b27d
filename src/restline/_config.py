from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._utils.constants import ENV_PREFIX


class Config(BaseSettings):
    """Runtime settings, read from ``RESTLINE_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        extra="ignore",
    )

    base_url: str = ""
    access_token: Optional[str] = None
    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    verify_ssl: bool = True
    raise_for_status: bool = True
    debug: bool = False

    def __repr__(self) -> str:
        token = "***" if self.access_token else None
        return (
            f"Config(base_url={self.base_url!r}, access_token={token!r}, "
            f"timeout={self.timeout!r})"
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    return Config()
