"""Settings: environment (and .env), then an optional YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .errors import MissingTokenError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "repostale.yml"
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GH_TOKEN")

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_REGISTRY_URL = "https://api.nuget.org/v3"
DEFAULT_USER_AGENT = "repostale"
DEFAULT_PER_PAGE = 1000  # single page only; the API caps it server-side
DEFAULT_MARKER = "csproj"
DEFAULT_EXTENSION = ".csproj"


@dataclass
class Settings:
    """Runtime settings for one run."""

    token: str = ""
    api_url: str = DEFAULT_API_URL
    registry_url: str = DEFAULT_REGISTRY_URL
    user_agent: str = DEFAULT_USER_AGENT
    per_page: int = DEFAULT_PER_PAGE
    marker: str = DEFAULT_MARKER  # repository gate: name contains
    extension: str = DEFAULT_EXTENSION  # extraction: name ends with
    timeout: float | None = None  # None = transport default
    repos: list[str] = field(default_factory=list)  # full_name filter, empty = all


def _load_file(config_path: Path | None) -> dict[str, Any]:
    """Load the YAML config file. Missing file is fine; a broken one is logged and ignored."""
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
    if not config_path.exists():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except (yaml.YAMLError, OSError) as e:
        logger.warning("Ignoring config file %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a mapping", config_path)
        return {}
    return data


def _number(data: dict[str, Any], key: str, default: Any, cast: Any) -> Any:
    """Read a numeric setting; a bad value is logged and the default kept."""
    value = data.get(key, default)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring config value %s=%r: not a number", key, value)
        return default


def _token_from_env() -> str:
    for var in TOKEN_ENV_VARS:
        value = os.getenv(var)
        if value:
            return value.strip()
    return ""


def load_settings(config_path: Path | None = None) -> Settings:
    """Build Settings from .env, environment and config file. Environment token wins."""
    load_dotenv()
    data = _load_file(config_path)
    settings = Settings(
        token=_token_from_env() or str(data.get("token") or "").strip(),
        api_url=str(data.get("api_url", DEFAULT_API_URL)).rstrip("/"),
        registry_url=str(data.get("registry_url", DEFAULT_REGISTRY_URL)).rstrip("/"),
        user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
        per_page=_number(data, "per_page", DEFAULT_PER_PAGE, int),
        marker=str(data.get("marker", DEFAULT_MARKER)),
        extension=str(data.get("extension", DEFAULT_EXTENSION)),
        timeout=_number(data, "timeout", None, float),
        repos=[str(r) for r in data.get("repos") or []],
    )
    logger.debug("Settings: api=%s registry=%s per_page=%d", settings.api_url, settings.registry_url, settings.per_page)
    return settings


def require_token(settings: Settings) -> str:
    """Return the token or raise MissingTokenError."""
    if not settings.token:
        raise MissingTokenError(
            "GitHub token is missing. Set GITHUB_TOKEN (or GH_TOKEN) in the environment or a .env file."
        )
    return settings.token
