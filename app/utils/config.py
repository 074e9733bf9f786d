import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields in .env file
    )

    # Server Configuration
    service_name: str = Field(
        default="stream-dashboard",
        description="Service name reported by /healthz and tracing",
    )
    host: str = Field(
        default="0.0.0.0",
        description="Bind address",
    )
    port: int = Field(
        default=10000,
        description="Bind port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API, comma-separated or a JSON list",
    )
    static_dir: str = Field(
        default="dist",
        description="Directory holding the built dashboard SPA",
    )

    # Defaults applied to client-supplied data
    anonymous_worker_name: str = Field(
        default="Anonymous Worker",
        description="Name given to workers that register without one",
    )
    unknown_worker_id: str = Field(
        default="Unknown",
        description="workerId stored on comments submitted without one",
    )

    # Tracing Configuration
    otel_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing of HTTP requests",
    )
    otel_exporter_endpoint: str = Field(
        default="http://otel-collector:4317",
        description="OTLP gRPC collector endpoint",
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


# Create global settings instance
settings = Settings()

# Exported as module-level variables for the bootstrap code
HOST = settings.host
PORT = settings.port
LOG_LEVEL = settings.log_level
SERVICE_NAME = settings.service_name
