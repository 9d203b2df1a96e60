"""Engine settings schema using Pydantic."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Behaviour switches shared by every JsonRpcEngine in the process."""
    include_error_stack: bool = False  # Add formatted tracebacks to serialized errors
    sanitize_error_messages: bool = True  # Redact secrets from wrapped exception messages
    jsonrpc_version: str = Field(default="2.0", min_length=1)  # Used when the request carries none

    model_config = SettingsConfigDict(
        env_prefix="RPCSTACK_",
        env_nested_delimiter="__",
    )
