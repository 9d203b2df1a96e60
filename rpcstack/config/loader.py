"""Settings loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from rpcstack.config.schema import EngineSettings

SETTINGS_PATH_ENV = "RPCSTACK_CONFIG"


def get_settings_path() -> Path | None:
    """Get the settings file path from the environment, if one is configured."""
    raw = os.getenv(SETTINGS_PATH_ENV, "").strip()
    return Path(raw).expanduser() if raw else None


def load_settings(settings_path: Path | None = None) -> EngineSettings:
    """
    Load settings from a JSON file, falling back to environment/defaults.

    Args:
        settings_path: Optional path to a JSON settings file. Uses
            $RPCSTACK_CONFIG if not provided.

    Returns:
        Loaded settings object.
    """
    path = settings_path or get_settings_path()

    if path is not None and path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return EngineSettings.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(
                f"Failed to load settings from {path}: {e}. "
                "Fix the file or remove it to use defaults."
            ) from e

    return EngineSettings()


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)
