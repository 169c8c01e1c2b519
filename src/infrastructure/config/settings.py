"""Application configuration using Pydantic Settings.

Centralized configuration management following Clean Architecture principles.
All environment variables should be accessed through this module; components
receive the values they need through their constructors.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, populate_by_name=True
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./data.db",
        alias="DATABASE_URL",
        description="SQLAlchemy async connection URL (SQLite or PostgreSQL)",
    )
    pool_size: int = Field(
        default=20,
        description="Connection pool size (ignored for SQLite)",
    )
    max_overflow: int = Field(
        default=10,
        description="Maximum number of connections to create above pool_size",
    )
    echo: bool = Field(
        default=False,
        description="Enable SQL query logging (development only)",
    )


class APISettings(BaseSettings):
    """API server configuration settings."""

    model_config = SettingsConfigDict(env_prefix="API_", case_sensitive=False)

    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server",
    )
    port: int = Field(
        default=8080,
        description="Port to bind the API server",
    )
    auth_user: str = Field(
        default="admin",
        description="Username for HTTP Basic authentication",
    )
    auth_pass: SecretStr = Field(
        default=SecretStr(""),
        description="Password for HTTP Basic authentication",
    )


class PrometheusSettings(BaseSettings):
    """Prometheus-compatible metrics backend configuration."""

    model_config = SettingsConfigDict(env_prefix="PROMETHEUS_", case_sensitive=False)

    url: str = Field(
        default="http://localhost:9090",
        description="Prometheus server URL",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Query timeout in seconds",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra request headers as JSON, e.g. {\"X-Scope-OrgID\": \"tenant\"}",
    )


class LieutenantSettings(BaseSettings):
    """Lieutenant (Kubernetes API) configuration for cluster fact lookup."""

    model_config = SettingsConfigDict(env_prefix="LIEUTENANT_", case_sensitive=False)

    url: str = Field(
        default="https://localhost:6443",
        description="Kubernetes API server hosting the Lieutenant Cluster objects",
    )
    token: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token used to authenticate against the Kubernetes API",
    )
    namespace: str = Field(
        default="lieutenant",
        description="Namespace containing the Cluster objects",
    )
    timeout_seconds: float = Field(
        default=10.0,
        description="Request timeout in seconds",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify the API server's TLS certificate",
    )


class ObservabilitySettings(BaseSettings):
    """Observability configuration settings (OpenTelemetry, logging, metrics)."""

    model_config = SettingsConfigDict(env_prefix="OTEL_", case_sensitive=False)

    # OpenTelemetry Tracing
    tracing_enabled: bool = Field(
        default=False,
        description="Export traces via OTLP",
    )
    exporter_otlp_endpoint: str = Field(
        default="http://localhost:4318",
        description="OTLP exporter endpoint (HTTP)",
    )
    service_name: str = Field(
        default="sli-reporting",
        description="Service name for traces and metrics",
    )
    trace_sample_rate: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Trace sampling rate (0.0 to 1.0)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json_format: bool = Field(
        default=True,
        description="Enable JSON structured logging",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration modules and provides a single settings object.
    Load from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: APISettings = Field(default_factory=APISettings)
    prometheus: PrometheusSettings = Field(default_factory=PrometheusSettings)
    lieutenant: LieutenantSettings = Field(default_factory=LieutenantSettings)
    observability: ObservabilitySettings = Field(
        default_factory=ObservabilitySettings
    )


# Global settings instance (singleton)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton pattern).

    Returns:
        Settings instance loaded from environment
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
