"""Configuration module for the product catalog API.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Environment variables (optionally from a .env file) override individual values.
Fails fast with clear error messages if configuration is missing or invalid.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from src/catalog/config/ up to project root
    return Path(__file__).parent.parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.level)


@dataclass(frozen=True)
class ApiConfig:
    """HTTP API configuration."""
    title: str
    cors_origins: List[str]


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    database: DatabaseConfig
    logging: LoggingConfig
    api: ApiConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the YAML config file for settings and .env for overrides.
    Fails fast if configuration is invalid.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # Build Database config
    db_section = yaml_config.get("database", {})

    database_config = DatabaseConfig(
        path=_get_optional_env("PRODUCTS_DB_PATH", db_section.get("path", "products.db")),
    )
    if not database_config.path:
        raise ConfigurationError("database.path must not be empty.")

    # Build Logging config
    logging_section = yaml_config.get("logging", {})
    level = str(_get_optional_env("LOG_LEVEL", logging_section.get("level", "INFO"))).upper()
    if level not in _VALID_LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid logging.level '{level}'. Expected one of: {', '.join(_VALID_LOG_LEVELS)}."
        )

    logging_config = LoggingConfig(level=level)

    # Build API config
    api_section = yaml_config.get("api", {})
    cors_origins = api_section.get("cors_origins", ["*"])
    if isinstance(cors_origins, str):
        cors_origins = [cors_origins]

    api_config = ApiConfig(
        title=api_section.get("title", "Product Catalog API"),
        cors_origins=list(cors_origins),
    )

    return AppConfig(
        database=database_config,
        logging=logging_config,
        api=api_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
