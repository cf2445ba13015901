"""Error hierarchy for auth0-strategy.

Error layers:
- Auth0StrategyError: Base class for all errors raised by this package
- DomainError: Authentication-level failures reported by the provider
- InfrastructureError: Misconfiguration and upstream (network/IdP) failures

Provider callback errors handled by Auth0Strategy are not raised at all; they are
returned as a Failure outcome.
"""


class Auth0StrategyError(Exception):
    """Base class for all auth0-strategy errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(Auth0StrategyError):
    """Base class for authentication errors."""


class ProviderAuthorizationError(DomainError):
    """Identity provider rejected the authorization request."""

    def __init__(
        self,
        message: str,
        code: str,
        error_uri: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.error_uri = error_uri


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(Auth0StrategyError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """Identity provider is unavailable or returned an unusable response."""


class ConfigurationError(InfrastructureError):
    """Strategy or application misconfiguration detected."""
