"""Configuration module for rpcstack."""

from rpcstack.config.loader import load_settings, get_settings_path
from rpcstack.config.schema import EngineSettings
from rpcstack.config.access import get_settings, clear_settings_cache

__all__ = ["EngineSettings", "load_settings", "get_settings_path", "get_settings", "clear_settings_cache"]
