"""
Configuration module for oura-cli.

This module uses Pydantic Settings to handle loading environment variables,
an optional ``.env`` file and application configuration with proper typing
and validation.
"""
import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oura_cli import __version__
from oura_cli.utils.paths import get_config_path, get_home_dir


class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AuthSettings(BaseModel):
    """OAuth2 settings for the Oura cloud API."""
    authorize_url: str = Field(
        default="https://cloud.ouraring.com/oauth/authorize",
        description="Authorization endpoint opened in the browser",
    )
    token_url: str = Field(
        default="https://api.ouraring.com/oauth/token",
        description="Token endpoint for code and refresh exchanges",
    )
    redirect_host: str = Field(
        default="localhost",
        description="Host of the local callback listener",
    )
    redirect_port: int = Field(
        default=8080,
        description="Port of the local callback listener",
        ge=1,
        le=65535,
    )
    redirect_path: str = Field(
        default="/callback",
        description="Path of the local callback listener",
    )
    scopes: List[str] = Field(
        default=[
            "email",
            "personal",
            "daily",
            "heartrate",
            "workout",
            "tag",
            "session",
            "spo2",
            "stress",
            "ring_configuration",
            "cardiovascular",
            "heart_health",
        ],
        description="OAuth scopes requested up front (full access)",
    )
    callback_timeout_seconds: float = Field(
        default=300.0,
        description="How long to wait for the browser redirect",
        gt=0,
    )
    expiry_skew_seconds: int = Field(
        default=300,
        description="Seconds before expiry at which a token counts as stale",
        ge=0,
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        description="Total timeout for token endpoint requests",
        gt=0,
    )

    @field_validator("redirect_path")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        """Callback paths are absolute."""
        return v if v.startswith("/") else f"/{v}"

    @property
    def redirect_uri(self) -> str:
        """Redirect URI registered with the provider; must match exactly."""
        return f"http://{self.redirect_host}:{self.redirect_port}{self.redirect_path}"


class AppSettings(BaseModel):
    """Main application settings."""
    app_name: str = Field(
        default="Oura CLI",
        description="Name of the application",
    )
    version: str = Field(
        default=__version__,
        description="Application version",
    )
    log_level: LogLevel = Field(
        default=LogLevel.WARNING,
        description="Logging level",
    )
    home_dir: Optional[Path] = Field(
        default=None,
        description="Configuration root (defaults to the user's home directory)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """Root settings class combining all application settings."""
    model_config = SettingsConfigDict(
        env_prefix="OURA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    client_id: Optional[str] = Field(
        default=None,
        description="OAuth client ID (OURA_CLIENT_ID)",
    )
    client_secret: Optional[SecretStr] = Field(
        default=None,
        description="OAuth client secret (OURA_CLIENT_SECRET)",
    )

    @property
    def config_path(self) -> Path:
        """Credential file location for the configured home directory."""
        return get_config_path(get_home_dir(self.app.home_dir))

    @classmethod
    def from_json(cls, file_path: Union[str, Path]) -> "Settings":
        """Load settings from a JSON file."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, "r") as f:
            config_data = json.load(f)

        return cls(**config_data)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, initializing if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(file_path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from a file or environment variables."""
    global _settings

    if file_path:
        _settings = Settings.from_json(file_path)
    else:
        _settings = Settings()

    return _settings
