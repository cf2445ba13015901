"""Auth0 authentication strategy."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from starlette.requests import Request

from auth0_strategy.domain.error import ExternalServiceError
from auth0_strategy.domain.model import AuthOutcome, Profile
from auth0_strategy.domain.options import StrategyOptions, normalize_options
from auth0_strategy.domain.params import map_authorization_params
from auth0_strategy.domain.port.strategy import VerifyCallback
from auth0_strategy.infrastructure.oauth2 import OAuth2Strategy

logger = logging.getLogger(__name__)


class Auth0Strategy(OAuth2Strategy):
    """OAuth2Strategy configured for an Auth0 tenant.

    Example:
        strategy = Auth0Strategy(
            {
                "domain": "example.auth0.com",
                "clientID": "...",
                "clientSecret": "...",
                "callbackURL": "https://app.example.com/auth/auth0/callback",
            },
            verify=lambda access_token, id_token, profile: profile,
        )
    """

    name = "auth0"

    options: StrategyOptions

    def __init__(
        self,
        options: Mapping[str, Any] | StrategyOptions,
        verify: VerifyCallback,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(normalize_options(options), verify, http_client)

    def authorization_params(self, options: Mapping[str, Any] | None) -> dict[str, str]:
        return map_authorization_params(options)

    async def authenticate(
        self,
        request: Request,
        options: Mapping[str, Any] | None = None,
    ) -> AuthOutcome:
        # Any error on the callback (e.g. domain_mismatch) fails the attempt as-is
        error = request.query_params.get("error")
        if error:
            return self.fail(error)
        return await super().authenticate(request, options)

    async def user_profile(self, access_token: str) -> Profile:
        """Fetch the user's profile from the tenant's /userinfo endpoint."""
        try:
            response = await self._http.get(
                self.options.user_info_url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/json",
                    **self.options.custom_headers,
                },
            )
        except httpx.RequestError as e:
            logger.exception("Auth0 userinfo request failed: %s", e)
            raise ExternalServiceError(
                "Failed to connect to Auth0",
                code="idp_unavailable",
            ) from e

        if response.status_code != 200:
            logger.error("Auth0 userinfo failed: status=%d", response.status_code)
            raise ExternalServiceError(
                f"Auth0 userinfo failed: {response.status_code}",
                code="profile_fetch_failed",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                "Auth0 userinfo returned invalid JSON",
                code="profile_fetch_failed",
            ) from e

        return Profile(provider=self.name, raw_data=data)
