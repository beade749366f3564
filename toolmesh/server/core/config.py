"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Per-capability configuration lives in a separate JSON file (see
``load_tools_config``) because its blobs are opaque to the server and are
decoded by each capability's own config model.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# =====================================================================
# LLM Provider Configuration Models
# =====================================================================


class OpenAIConfig(BaseModel):
    """OpenAI-compatible chat model configuration."""

    api_key: Optional[SecretStr] = Field(
        default=None, alias="OPENAI_API_KEY", description="API key for the chat completions endpoint"
    )
    model: str = Field(default="gpt-4o", alias="OPENAI_MODEL", description="Chat model used for planning")
    base_url: Optional[str] = Field(
        default=None, alias="OPENAI_BASE_URL", description="Custom OpenAI-compatible API base URL (optional)"
    )
    temperature: float = Field(default=0.0, alias="OPENAI_TEMPERATURE", description="Sampling temperature")
    max_tokens: int = Field(default=1024, alias="OPENAI_MAX_TOKENS", description="Upper bound for reply tokens")

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


class ToolsConfig(BaseModel):
    """Contents of the tool configuration file.

    ``tools`` maps a capability name to its opaque configuration blob.
    """

    server_port: Optional[Union[str, int]] = None
    tools: Dict[str, Any] = Field(default_factory=dict)


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # toolmesh Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="toolmesh server host address to bind to",
        alias="TOOLMESH_SERVER_HOST",
    )
    server_port: int = Field(
        default=8080,
        description="toolmesh server port number",
        alias="TOOLMESH_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="toolmesh logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="TOOLMESH_LOG_LEVEL",
    )

    # =====================================================================
    # Capability Configuration
    # =====================================================================
    tools_config: str = Field(
        default="config.json",
        description="Path to the JSON tool configuration file",
        alias="TOOLMESH_TOOLS_CONFIG",
    )
    enabled_tools: list[str] = Field(
        default_factory=list,
        description="Capabilities to construct at startup (JSON list); empty constructs none",
        alias="TOOLMESH_ENABLED_TOOLS",
    )
    search_limit: int = Field(
        default=5,
        ge=1,
        description="Result count requested by the chained pipeline's search stage",
        alias="TOOLMESH_SEARCH_LIMIT",
    )
    search_endpoint: Optional[str] = Field(
        default=None,
        description="Base URL of a JSON search endpoint (SearxNG dialect) backing web_search",
        alias="TOOLMESH_SEARCH_ENDPOINT",
    )

    # =====================================================================
    # LLM Provider Configuration
    # =====================================================================
    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(default=None, alias="OPENAI_BASE_URL")
    openai_temperature: float = Field(default=0.0, alias="OPENAI_TEMPERATURE")
    openai_max_tokens: int = Field(default=1024, alias="OPENAI_MAX_TOKENS")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig()


def load_tools_config(path: Union[str, Path]) -> ToolsConfig:
    """
    Load the tool configuration file.

    Args:
        path: Location of a JSON document ``{"server_port": ..., "tools": {name: blob}}``.

    Returns:
        ToolsConfig: The parsed document. A missing file yields an empty configuration.

    Raises:
        ValueError: If the file exists but is not valid JSON of the expected shape.
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Tool configuration file not found: {config_path}; no capability configuration loaded")
        return ToolsConfig()

    with config_path.open("r", encoding="utf-8") as fh:
        try:
            raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid tool configuration file {config_path}: {exc}") from exc
    logger.debug(f"Loaded tool configuration from {config_path}")
    return ToolsConfig.model_validate(raw)


settings = Settings()
