"""Configuration Loader - JSON config file with env var support.

This module loads an EventfulConfig for one deployment:
1. Reads `eventful.json` (or the file named by EVENTFUL_CONFIG)
2. Falls back to an empty configuration (every kind disabled) if missing
3. Applies environment variable overrides

No module-level config is kept: the loaded object is handed to the
module that owns it.

Usage:
    from eventful.config_loader import load_config

    config = load_config()
    config = load_config(Path("/etc/ejabberd/eventful.json"))

Environment Variable Overrides:
- EVENTFUL_AUTH_USER -> config.user
- EVENTFUL_AUTH_PASSWORD -> config.password
- EVENTFUL_URL_MESSAGE -> config.urls[message_hook]
- EVENTFUL_URL_PRESENCE_SET -> config.urls[set_presence_hook]
- EVENTFUL_URL_PRESENCE_UNSET -> config.urls[unset_presence_hook]
- EVENTFUL_URL_ONLINE -> config.urls[online_hook]
- EVENTFUL_URL_OFFLINE -> config.urls[offline_hook]
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .config import EventfulConfig
from .events import EventKind
from .exceptions import ConfigError

# =============================================================================
# Constants
# =============================================================================

CONFIG_FILE_NAME = "eventful.json"
CONFIG_PATH_ENV_VAR = "EVENTFUL_CONFIG"

# Format: (env_var_name, key in the module options, event kind for url entries)
ENV_VAR_MAPPINGS: list[tuple[str, str, EventKind | None]] = [
    ("EVENTFUL_AUTH_USER", "user", None),
    ("EVENTFUL_AUTH_PASSWORD", "password", None),
    *[(f"EVENTFUL_URL_{kind.short_name.upper()}", "url", kind) for kind in EventKind],
]


# =============================================================================
# Path Utilities
# =============================================================================


def get_config_file_path(working_dir: Path | None = None) -> Path:
    """Get the configuration file path.

    EVENTFUL_CONFIG wins when set; otherwise `eventful.json` in working_dir
    (default: cwd).
    """
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    if working_dir is None:
        working_dir = Path.cwd()
    return working_dir / CONFIG_FILE_NAME


def config_file_exists(working_dir: Path | None = None) -> bool:
    return get_config_file_path(working_dir).exists()


# =============================================================================
# File Operations
# =============================================================================


def read_module_opts(config_path: Path) -> dict[str, Any]:
    """Read the raw module options from a JSON file.

    Raises:
        ConfigError: If the file can't be read or isn't a JSON object.
    """
    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e.strerror}", config_path) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e.msg} at line {e.lineno}", config_path) from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object", config_path)
    return data


def load_config_from_file(config_path: Path) -> EventfulConfig:
    """Load configuration from a JSON file, without env overrides.

    Raises:
        ConfigError: If the file is missing, not valid JSON or fails validation.
    """
    return build_config(read_module_opts(config_path), config_path)


def build_config(opts: dict[str, Any], config_path: Path | None = None) -> EventfulConfig:
    """Validate module options into an EventfulConfig.

    Raises:
        ConfigError: If validation fails.
    """
    try:
        return EventfulConfig.from_module_opts(opts)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {errors}", config_path) from e


def generate_default_config_json(indent: int = 2) -> str:
    """Return a template config with every kind listed and left disabled."""
    template = {
        "url": {kind.value: "" for kind in EventKind},
        "user": None,
        "password": None,
    }
    return json.dumps(template, indent=indent)


def generate_default_config_file(
    config_path: Path | None = None,
    overwrite: bool = False,
) -> Path:
    """Write the template configuration file.

    Raises:
        FileExistsError: If the file exists and overwrite is False.
    """
    if config_path is None:
        config_path = get_config_file_path()

    if config_path.exists() and not overwrite:
        raise FileExistsError(f"Config file already exists: {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        f.write(generate_default_config_json(indent=2))
        f.write("\n")

    return config_path


# =============================================================================
# Environment Variable Override
# =============================================================================


def apply_env_overrides(opts: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of the module options with env var overrides applied.

    Only non-empty environment variables are applied.
    """
    result = dict(opts)
    urls: dict[str, Any] = {}
    for key in ("urls", "url"):
        value = result.pop(key, None)
        if isinstance(value, dict):
            urls.update(value)
        elif value:
            # Left for validation to report
            result[key] = value
            return result

    for env_var, key, kind in ENV_VAR_MAPPINGS:
        env_value = os.environ.get(env_var)
        if not env_value:
            continue
        if kind is None:
            result[key] = env_value
        else:
            # File keys may be spelled either way; drop the other spelling
            urls.pop(kind.short_name, None)
            urls[kind.value] = env_value

    result["url"] = urls
    return result


def get_env_overrides() -> dict[str, str]:
    """Get all environment variable overrides that are currently set."""
    overrides = {}
    for env_var, _key, _kind in ENV_VAR_MAPPINGS:
        value = os.environ.get(env_var)
        if value:
            overrides[env_var] = value
    return overrides


# =============================================================================
# Public API
# =============================================================================


def load_config(config_path: Path | None = None) -> EventfulConfig:
    """Load the configuration for one deployment.

    Reads the file if it exists (an empty configuration otherwise), then
    applies environment variable overrides.

    Raises:
        ConfigError: If the file or the resulting options are invalid.
    """
    if config_path is None:
        config_path = get_config_file_path()

    opts = read_module_opts(config_path) if config_path.exists() else {}
    return build_config(apply_env_overrides(opts), config_path)


__all__ = [
    "CONFIG_FILE_NAME",
    "CONFIG_PATH_ENV_VAR",
    "ENV_VAR_MAPPINGS",
    "apply_env_overrides",
    "build_config",
    "config_file_exists",
    "generate_default_config_file",
    "generate_default_config_json",
    "get_config_file_path",
    "get_env_overrides",
    "load_config",
    "load_config_from_file",
    "read_module_opts",
]
