"""Configuration persistence — load and save user preferences."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from movie_house.models import (
    CONFIG_APP_NAME,
    OMDB_DEMO_API_KEY,
    REQUEST_TIMEOUT_MAX,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_DEBOUNCE_DELAY,
    SEARCH_DEBOUNCE_MAX,
    UserConfig,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract — _dict_to_config() guarantees valid output for any input:
#
#   Field                    Rule                     Handler
#   ───────────────────────  ───────────────────────  ─────────────────────────
#   request_timeout_seconds  1 ≤ x ≤ 60               _coerce_request_timeout
#   debounce_seconds         0.0 ≤ x ≤ 5.0            _coerce_debounce_seconds
#   scalar fields            type-checked             _safe_get
#
# Search state (query, filters, results) is never persisted.
#
CONFIG_FILENAME = "config.json"
API_KEY_ENV_VAR = "OMDB_API_KEY"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/movie-house/config.json
    - macOS: ~/Library/Application Support/movie-house/config.json
    - Windows: %APPDATA%/movie-house/config.json
    """
    config_dir = Path(user_config_dir(CONFIG_APP_NAME))
    return config_dir / CONFIG_FILENAME


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type) or (
        expected_type is not bool and isinstance(value, bool)
    ):
        return default
    return value


def _coerce_request_timeout(value: Any) -> int:
    """Validate and clamp the per-request timeout in seconds."""
    if not isinstance(value, int) or isinstance(value, bool):
        return REQUEST_TIMEOUT_SECONDS
    return max(1, min(value, REQUEST_TIMEOUT_MAX))


def _coerce_debounce_seconds(value: Any) -> float:
    """Validate and clamp the search debounce delay."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return SEARCH_DEBOUNCE_DELAY
    return max(0.0, min(float(value), SEARCH_DEBOUNCE_MAX))


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "api_key": config.api_key,
        "request_timeout_seconds": _coerce_request_timeout(config.request_timeout_seconds),
        "debounce_seconds": _coerce_debounce_seconds(config.debounce_seconds),
        "ascii_icons": config.ascii_icons,
    }


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    return UserConfig(
        api_key=_safe_get(data, "api_key", "", str).strip(),
        request_timeout_seconds=_coerce_request_timeout(
            data.get("request_timeout_seconds", REQUEST_TIMEOUT_SECONDS)
        ),
        debounce_seconds=_coerce_debounce_seconds(
            data.get("debounce_seconds", SEARCH_DEBOUNCE_DELAY)
        ),
        ascii_icons=_safe_get(data, "ascii_icons", False, bool),
        version=_safe_get(data, "version", 1, int),
    )


def resolve_api_key(
    config: UserConfig,
    cli_value: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the OMDb key: CLI flag, then environment, then config, then demo key."""
    if cli_value and cli_value.strip():
        return cli_value.strip()
    env = os.environ if environ is None else environ
    env_value = env.get(API_KEY_ENV_VAR, "").strip()
    if env_value:
        return env_value
    if config.api_key:
        return config.api_key
    return OMDB_DEMO_API_KEY


def _backup_corrupt_config(config_path: Path) -> None:
    """Move a corrupt config aside so the next save does not destroy it."""
    backup_path = config_path.with_suffix(".json.bak")
    try:
        os.replace(config_path, backup_path)
        logger.warning("Backed up corrupt config to %s", backup_path)
    except OSError as e:
        logger.warning("Could not back up corrupt config: %s", e)


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return UserConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise TypeError("top-level JSON value is not an object")
        return _dict_to_config(data)
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        _backup_corrupt_config(config_path)
        return UserConfig(config_defaulted=True)
    except (KeyError, TypeError) as e:
        logger.warning("Config file has invalid structure, using defaults: %s", e)
        _backup_corrupt_config(config_path)
        return UserConfig(config_defaulted=True)
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return UserConfig()


def save_config(config: UserConfig) -> bool:
    """Write the config as JSON, replacing the old file in one step.

    The payload goes to a sibling temp file first so an interrupted write
    never leaves a truncated config behind. Returns False if the directory
    or file cannot be written.
    """
    config_path = get_config_path()
    payload = json.dumps(_config_to_dict(config), indent=2, ensure_ascii=False) + "\n"
    staged: Path | None = None

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=config_path.parent,
            prefix=f".{CONFIG_APP_NAME}-",
            suffix=".json.tmp",
            delete=False,
        ) as handle:
            staged = Path(handle.name)
            handle.write(payload)
        os.replace(staged, config_path)
    except OSError as e:
        logger.error("Could not save config to %s: %s", config_path, e)
        if staged is not None:
            staged.unlink(missing_ok=True)
        return False

    logger.debug("Saved config to %s", config_path)
    return True


__all__ = [
    "API_KEY_ENV_VAR",
    "CONFIG_FILENAME",
    "get_config_path",
    "load_config",
    "resolve_api_key",
    "save_config",
]
