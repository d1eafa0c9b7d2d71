"""Settings loader for the Douban API client and resolvers.

Values come from, in order of precedence: explicit overrides (CLI options),
``OPENDOUBAN_*`` environment variables or a .env file, the persistent
config.toml, and finally the defaults below.

Keys:
- OPENDOUBAN_API_BASE_URL: base URL of the Douban API server
- OPENDOUBAN_POSTER_SIZE: poster size parameter sent with subject lookups
- OPENDOUBAN_NAME_PATTERN: regex of noise removed from names before searching
- OPENDOUBAN_TIMEOUT: HTTP timeout in seconds
- OPENDOUBAN_CACHE_TTL: response cache lifetime in seconds

Resolvers call load_settings() on every operation, so edits to the environment
or config file apply to the next call without a restart.
"""

import re
from typing import Any

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from opendouban.metadata.errors import OpenDoubanError
from opendouban.utils.config import read_config

DEFAULT_NAME_PATTERN = (
    r"(?i)(\[.*?\]|【.*?】|\(.*?\)|\{.*?\}"
    r"|\b(?:S\d{1,2}(?:E\d{1,3})?|E\d{1,3}|\d{3,4}p|4K|HDR|WEB-?DL|WEBRip"
    r"|BluRay|BDRip|HDTV|x26[45]|H\.?26[45]|HEVC|AAC|DTS|mkv|mp4)\b)"
)


class InvalidSettingError(OpenDoubanError):
    """Raised when a setting has a value that cannot be used."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize the error with the offending key and the reason."""
        super().__init__(f"Invalid setting {key}: {reason}")
        self.key = key


class Settings(BaseSettings):
    """Runtime settings for OpenDouban."""

    api_base_url: str = "http://localhost:5000"
    poster_size: str = "m"
    name_pattern: str = DEFAULT_NAME_PATTERN
    timeout: float = 10.0
    cache_ttl: int = 86400

    model_config = ConfigDict(  # type: ignore[typeddict-unknown-key]
        env_prefix="OPENDOUBAN_", env_file=".env", extra="ignore"
    )

    @field_validator("name_pattern")
    @classmethod
    def _check_pattern(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise InvalidSettingError("name_pattern", str(exc)) from exc
        return value

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


def load_settings(**overrides: Any) -> Settings:
    """Build Settings from overrides, environment, config file and defaults.

    Args:
        **overrides: Setting values taking precedence over everything else.
            ``None`` values are ignored so Typer options can be passed as-is.

    Returns:
        A validated Settings instance.

    Raises:
        InvalidSettingError: If a resolved value is unusable.
    """
    values: dict[str, Any] = {
        key: value
        for key, value in read_config().items()
        if key in Settings.model_fields
    }
    from_env = Settings()
    values.update(from_env.model_dump(include=from_env.model_fields_set))
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**values)
