"""Auth0 OAuth2 authorization-code strategy."""

from auth0_strategy.domain.error import (
    Auth0StrategyError,
    ConfigurationError,
    ExternalServiceError,
    ProviderAuthorizationError,
)
from auth0_strategy.domain.model import AuthOutcome, Failure, Profile, Redirect, Success
from auth0_strategy.domain.options import OAuth2Options, StrategyOptions, normalize_options
from auth0_strategy.domain.params import map_authorization_params
from auth0_strategy.infrastructure.auth0 import Auth0Strategy
from auth0_strategy.infrastructure.oauth2 import OAuth2Strategy
from auth0_strategy.version import __version__

__all__ = [
    "Auth0Strategy",
    "Auth0StrategyError",
    "AuthOutcome",
    "ConfigurationError",
    "ExternalServiceError",
    "Failure",
    "OAuth2Options",
    "OAuth2Strategy",
    "Profile",
    "ProviderAuthorizationError",
    "Redirect",
    "StrategyOptions",
    "Success",
    "__version__",
    "map_authorization_params",
    "normalize_options",
]
