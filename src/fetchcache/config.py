"""Configuration resolution for fetchcache.

Builds the :class:`~fetchcache.models.FetchConfig` a fetcher owns from
layered sources. Precedence, high to low:

1. Explicit keyword overrides (CLI flags, or arguments from calling code).
2. Environment variables (:data:`ENV_VARS`).
3. The project config file: ``$FETCHCACHE_CONFIG`` if set, else
   ``./fetchcache.json``.
4. :class:`~fetchcache.models.FetchConfig` defaults.

A project config file is a JSON object using the ``FetchConfig`` field
names::

    {
        "default_cache_policy": "cache-first",
        "default_success_data_handler": "json",
        "timeout": 10
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from fetchcache.exceptions import ConfigError
from fetchcache.models import CachePolicy, FetchConfig, SuccessDataHandler

_PROJECT_CONFIG_FILENAME = "fetchcache.json"
_CONFIG_PATH_ENV = "FETCHCACHE_CONFIG"

ENV_VARS: dict[str, str] = {
    "FETCHCACHE_CACHE_POLICY": "default_cache_policy",
    "FETCHCACHE_SUCCESS_DATA_HANDLER": "default_success_data_handler",
    "FETCHCACHE_TIMEOUT": "timeout",
    "FETCHCACHE_VERIFY_SSL": "verify_ssl",
    "FETCHCACHE_FOLLOW_REDIRECTS": "follow_redirects",
}
"""Environment variable name -> :class:`~fetchcache.models.FetchConfig` field."""


# --- Project config ---


def get_project_config_path() -> Path:
    """Return the project config path: ``$FETCHCACHE_CONFIG`` or ``./fetchcache.json``."""
    explicit = os.environ.get(_CONFIG_PATH_ENV)
    if explicit:
        return Path(explicit)
    return Path.cwd() / _PROJECT_CONFIG_FILENAME


def load_project_config(path: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load the project config file.

    Args:
        path: File to read. Defaults to :func:`get_project_config_path`.

    Returns:
        The parsed JSON object, or ``None`` when the default
        ``./fetchcache.json`` does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or not a JSON object, or
            if a path given explicitly (argument or ``$FETCHCACHE_CONFIG``)
            does not exist.
    """
    explicit = path is not None or bool(os.environ.get(_CONFIG_PATH_ENV))
    if path is None:
        path = get_project_config_path()

    if not path.is_file():
        if explicit:
            raise ConfigError(f"Config file not found: {path}")
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


# --- Environment ---


def load_env_config() -> dict[str, str]:
    """Collect the :data:`ENV_VARS` that are set, keyed by config field name."""
    values: dict[str, str] = {}
    for env_name, field in ENV_VARS.items():
        value = os.environ.get(env_name)
        if value:
            values[field] = value
    return values


# --- Precedence resolution ---


def resolve_config(
    cache_policy: Optional[CachePolicy | str] = None,
    success_data_handler: Optional[SuccessDataHandler | str] = None,
    timeout: Optional[float] = None,
    verify_ssl: Optional[bool] = None,
    config_path: Optional[Path] = None,
) -> FetchConfig:
    """Resolve a :class:`~fetchcache.models.FetchConfig` through the precedence chain.

    Args:
        cache_policy: Override for ``default_cache_policy``.
        success_data_handler: Override for ``default_success_data_handler``.
        timeout: Override for ``timeout``.
        verify_ssl: Override for ``verify_ssl``.
        config_path: Explicit project config file to read.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If any layer is unreadable or the merged values fail
            validation (e.g. ``FETCHCACHE_CACHE_POLICY=sometimes``).
    """
    # 4. Defaults come from the model itself.
    merged: dict[str, Any] = {}

    # 3. Project config file
    project = load_project_config(config_path)
    if project is not None:
        merged.update(project)

    # 2. Environment variables
    merged.update(load_env_config())

    # 1. Explicit overrides
    overrides = {
        "default_cache_policy": cache_policy,
        "default_success_data_handler": success_data_handler,
        "timeout": timeout,
        "verify_ssl": verify_ssl,
    }
    merged.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return FetchConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
