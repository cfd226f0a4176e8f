"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field, model_validator


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite+aiosqlite:///./database.db",
        description="Async SQLAlchemy database URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    create_tables_on_startup: bool = Field(
        default=True, description="Create missing tables when the app starts"
    )
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the password from the URL, or from ``password_env_var``."""
        import os

        from sqlalchemy.engine import make_url

        url_obj = make_url(self.url)
        if url_obj.password:
            return url_obj.password
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(
                    f"Environment variable {self.password_env_var} not set"
                )
            return password
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with password if provided."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if base_url.password or not self.password:
            return self.url

        # render_as_string keeps the password; str() would mask it
        return base_url.set(password=self.password).render_as_string(
            hide_password=False
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class ProductsConfig(BaseModel):
    """Product resource configuration."""

    default_limit: int = Field(
        default=10, gt=0, description="Page size used when the client sends none"
    )
    max_limit: int = Field(default=100, gt=0, description="Largest page size accepted")
    translate_all_errors: bool = Field(
        default=False,
        description=(
            "Route create and list failures through the not-found/internal "
            "translation as well as update and delete"
        ),
    )

    @model_validator(mode="after")
    def _check_limits(self) -> ProductsConfig:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit cannot exceed max_limit")
        return self


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    products: ProductsConfig = Field(
        default_factory=ProductsConfig, description="Product resource configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )

    @model_validator(mode="after")
    def _warn_sqlite_in_production(self) -> ConfigData:
        if self.app.environment == "production" and self.database.is_sqlite:
            logger.warning(
                "SQLite is not recommended for production use. "
                "Consider PostgreSQL for better performance and reliability."
            )
        return self
