import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by AUTH0_STRATEGY_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("AUTH0_STRATEGY_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """Auth0 tenant and client configuration."""

    domain: str = ""  # Tenant domain, e.g. example.eu.auth0.com
    client_id: str = ""
    client_secret: str = ""
    callback_url: str = ""  # Full callback URL (e.g., https://myapp.org/auth/auth0/callback)
    scope: str = "openid profile email"
    state: bool = True

    @property
    def configured(self) -> bool:
        return bool(self.domain and self.client_id)

    def to_options(self) -> dict[str, Any]:
        """Options mapping for Auth0Strategy."""
        return {
            "domain": self.domain,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "callback_url": self.callback_url,
            "scope": self.scope,
            "state": self.state,
        }


class SessionConfig(BaseModel):
    """Session cookie configuration (holds the OAuth2 state between redirects)."""

    secret: str = ""  # Must be set when provider.state is enabled
    cookie_name: str = "auth0_strategy_session"
    max_age: int = 600  # Only needs to outlive one login round-trip


class RoutesConfig(BaseModel):
    """Auth route configuration."""

    failure_redirect: str | None = None  # Redirect here with ?error=... instead of 401


# =============================================================================
# Application Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from AUTH0_STRATEGY_LOG_FILE env var."""
        return os.environ.get("AUTH0_STRATEGY_LOG_FILE")


class TracingConfig(BaseModel):
    """Logfire tracing of HTTP requests (off by default)."""

    enabled: bool = False
    service_name: str = "auth0-strategy"


class Config(BaseSettings):
    provider: ProviderConfig = ProviderConfig()
    session: SessionConfig = SessionConfig()
    routes: RoutesConfig = RoutesConfig()
    logging: LoggingConfig = LoggingConfig()
    tracing: TracingConfig = TracingConfig()

    model_config = {
        "env_prefix": "AUTH0_STRATEGY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows AUTH0_STRATEGY_PROVIDER__DOMAIN override
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - AUTH0_STRATEGY_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all loggers
    pick up the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
