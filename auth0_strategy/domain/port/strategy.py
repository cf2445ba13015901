"""Authentication strategy port."""

from abc import abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeAlias

from starlette.requests import Request

from auth0_strategy.domain.model import AuthOutcome, Profile

# (access_token, id_token, profile) -> user, or a falsy value to reject.
# May be a plain function or a coroutine function.
VerifyCallback: TypeAlias = Callable[[str, str | None, Profile | None], Any]


class AuthStrategy(Protocol):
    """Port for pluggable authentication strategies.

    Implementations live in infrastructure/ (e.g., Auth0Strategy).
    """

    name: str

    @abstractmethod
    async def authenticate(
        self,
        request: Request,
        options: Mapping[str, Any] | None = None,
    ) -> AuthOutcome:
        """Run one step of the authentication flow for ``request``.

        Args:
            request: Incoming request (login or provider callback)
            options: Per-request options, e.g. extra authorization parameters

        Returns:
            Redirect to the IdP, Success with the verified user, or Failure
        """
        ...
