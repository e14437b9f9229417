"""Configuration loading for the incident intake client.

Settings come from ``config/intake_config.json`` merged over built-in
defaults, so a partial file (or no file at all) still yields a complete
config dict. The API base URL can be overridden per environment with
``INTAKE_API_BASE_URL``. The bearer token is never stored in the file; the
config only names the environment variable that holds it.

Example config::

    {
      "api": {
        "base_url": "https://lgu.example.gov.ph/api",
        "submit_path": "/incidents/with-families",
        "key_env_var": "INTAKE_API_TOKEN",
        "request_timeout": null
      }
    }
"""

import copy
import json
import logging
import os
from pathlib import Path

from intake.paths import INTAKE_CONFIG_PATH

logger = logging.getLogger(__name__)

BASE_URL_ENV_VAR = "INTAKE_API_BASE_URL"

DEFAULT_CONFIG: dict = {
    "api": {
        "base_url": "http://localhost:8000/api",
        "submit_path": "/incidents/with-families",
        "key_env_var": "INTAKE_API_TOKEN",
        # No total timeout: an in-flight submission waits for the server
        "request_timeout": None,
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Path | None = None) -> dict:
    """Load the intake configuration.

    Args:
        path: Config file to read. Defaults to ``INTAKE_CONFIG_PATH``.
              A missing file is not an error.

    Returns:
        Complete config dict (defaults filled in).

    Raises:
        json.JSONDecodeError: If the file exists but is not valid JSON.
    """
    path = path or INTAKE_CONFIG_PATH
    file_config: dict = {}
    if path.exists():
        with open(path, encoding="utf-8") as f:
            file_config = json.load(f)
        logger.debug("Loaded intake config from %s", path)
    else:
        logger.debug("No config at %s, using defaults", path)

    config = _merge(DEFAULT_CONFIG, file_config)

    env_base_url = os.environ.get(BASE_URL_ENV_VAR)
    if env_base_url:
        config["api"]["base_url"] = env_base_url
    return config


def resolve_token(config: dict) -> str | None:
    """Read the bearer token from the env var named in the config."""
    key_env = config.get("api", {}).get("key_env_var", "INTAKE_API_TOKEN")
    return os.environ.get(key_env) or None
