"""Authentication outcomes and identity data."""

from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True)
class Profile:
    """User profile returned by the identity provider's userinfo endpoint."""

    provider: str  # e.g., "auth0"
    raw_data: dict[str, Any]  # Decoded userinfo response, passed through as-is


@dataclass(frozen=True)
class Redirect:
    """Send the user agent to ``url`` (authorization request)."""

    url: str
    status: int = 302


@dataclass(frozen=True)
class Success:
    """Authentication succeeded; ``user`` is whatever the verify callback returned."""

    user: Any
    info: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Failure:
    """Authentication failed.

    ``challenge`` carries the reason, e.g. the provider's error code.
    """

    challenge: str | None = None
    status: int | None = None


AuthOutcome: TypeAlias = Redirect | Success | Failure
