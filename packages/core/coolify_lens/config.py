"""Connection settings: config file, then environment, then explicit arguments."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

from coolify_lens.urls import get_instance_url, normalize_base_url

CONFIG_FILENAME = ".coolify-lens.yaml"
USER_CONFIG_PATH = Path("~/.config/coolify-lens/config.yaml")

ENV_API_URL = "COOLIFY_API_URL"
ENV_API_TOKEN = "COOLIFY_API_TOKEN"


class LensConfig(BaseModel):
    api_url: str = ""
    api_token: str = ""
    timeout: int = 30

    @field_validator("api_url", "api_token", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return str(v).strip() if v is not None else ""

    @property
    def base_url(self) -> str:
        return normalize_base_url(self.api_url)

    @property
    def instance_url(self) -> str:
        return get_instance_url(self.base_url)


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for .coolify-lens.yaml, then the user config."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    user_config = USER_CONFIG_PATH.expanduser()
    if user_config.is_file():
        return user_config
    return None


def _read_config_file(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def load_config(
    path: str | Path | None = None,
    api_url: str | None = None,
    api_token: str | None = None,
) -> LensConfig:
    """Resolve settings. Later layers override earlier ones.

    1. ``path`` if given, else the nearest .coolify-lens.yaml or the user config
    2. COOLIFY_API_URL / COOLIFY_API_TOKEN
    3. ``api_url`` / ``api_token`` arguments
    """
    values: dict[str, Any] = {}

    config_path = Path(path) if path else find_config_file()
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        values.update(_read_config_file(config_path))

    if os.environ.get(ENV_API_URL):
        values["api_url"] = os.environ[ENV_API_URL]
    if os.environ.get(ENV_API_TOKEN):
        values["api_token"] = os.environ[ENV_API_TOKEN]

    if api_url:
        values["api_url"] = api_url
    if api_token:
        values["api_token"] = api_token

    return LensConfig.model_validate(values)
