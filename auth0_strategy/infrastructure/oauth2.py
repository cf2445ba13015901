"""Generic OAuth2 authorization-code strategy."""

import inspect
import logging
import secrets
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
from starlette.requests import Request

from auth0_strategy.domain.error import (
    ConfigurationError,
    ExternalServiceError,
    ProviderAuthorizationError,
)
from auth0_strategy.domain.model import AuthOutcome, Failure, Profile, Redirect, Success
from auth0_strategy.domain.options import OAuth2Options
from auth0_strategy.domain.port.strategy import AuthStrategy, VerifyCallback

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = httpx.Timeout(
    connect=5.0,
    read=10.0,
    write=5.0,
    pool=5.0,
)


class OAuth2Strategy(AuthStrategy):
    """OAuth2 authorization-code flow against a configured provider.

    A request without ``code`` starts the flow by redirecting to
    ``authorization_url``. The provider callback (with ``code``) is exchanged
    at ``token_url`` and the result handed to ``verify``.

    Subclasses customize the flow through ``authorization_params`` and
    ``user_profile``.
    """

    name = "oauth2"

    def __init__(
        self,
        options: OAuth2Options,
        verify: VerifyCallback,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.options = options
        self._verify = verify
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT)

    @property
    def _state_key(self) -> str:
        return f"oauth2:{self.name}:state"

    async def aclose(self) -> None:
        """Close the HTTP client if this strategy created it."""
        if self._owns_http:
            await self._http.aclose()

    def authorization_params(self, options: Mapping[str, Any] | None) -> dict[str, str]:
        """Extra query parameters for the authorization request."""
        return {}

    async def user_profile(self, access_token: str) -> Profile | None:
        """Load the user's profile. The generic strategy has none."""
        return None

    def fail(self, challenge: str | None = None, status: int | None = None) -> Failure:
        return Failure(challenge=challenge, status=status)

    async def authenticate(
        self,
        request: Request,
        options: Mapping[str, Any] | None = None,
    ) -> AuthOutcome:
        options = options or {}
        query = request.query_params

        error = query.get("error")
        if error:
            description = query.get("error_description")
            if error == "access_denied":
                return self.fail(description or error)
            raise ProviderAuthorizationError(
                description or error,
                code=error,
                error_uri=query.get("error_uri"),
            )

        callback_url = (
            options.get("callback_url") or options.get("callbackURL") or self.options.callback_url
        )

        code = query.get("code")
        if code:
            if self.options.state and not self._verify_state(request):
                return self.fail("Unable to verify authorization request state.", 403)
            return await self._complete(code, callback_url)

        return self._start(request, options, callback_url)

    def _start(
        self,
        request: Request,
        options: Mapping[str, Any],
        callback_url: str,
    ) -> Redirect:
        params: dict[str, str] = {
            "response_type": "code",
            "client_id": self.options.client_id,
            "redirect_uri": callback_url,
        }

        scope = options.get("scope", self.options.scope)
        if isinstance(scope, (list, tuple)):
            scope = self.options.scope_separator.join(scope)
        if scope:
            params["scope"] = scope

        if self.options.state:
            state = secrets.token_urlsafe(24)
            self._session(request)[self._state_key] = state
            params["state"] = state

        params.update(self.authorization_params(options))

        base = self.options.authorization_url
        separator = "&" if "?" in base else "?"
        logger.debug("Redirecting to %s authorization endpoint", self.name)
        return Redirect(url=f"{base}{separator}{urlencode(params)}")

    async def _complete(self, code: str, callback_url: str) -> AuthOutcome:
        token_data = await self._exchange_code(code, callback_url)

        access_token = token_data.get("access_token")
        if not access_token:
            raise ExternalServiceError(
                f"{self.name} token response missing access_token",
                code="token_exchange_failed",
            )

        profile = None
        if not self.options.skip_user_profile:
            profile = await self.user_profile(access_token)

        user = self._verify(access_token, token_data.get("id_token"), profile)
        if inspect.isawaitable(user):
            user = await user

        if not user:
            logger.info("%s login rejected by verify callback", self.name)
            return self.fail()

        return Success(user=user)

    async def _exchange_code(self, code: str, callback_url: str) -> dict[str, Any]:
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.options.client_id,
            "client_secret": self.options.client_secret,
            "redirect_uri": callback_url,
        }

        try:
            response = await self._http.post(
                self.options.token_url,
                data=data,
                headers={"Accept": "application/json", **self.options.custom_headers},
            )
        except httpx.RequestError as e:
            logger.exception("%s token request failed: %s", self.name, e)
            raise ExternalServiceError(
                f"Failed to connect to {self.name} token endpoint",
                code="idp_unavailable",
            ) from e

        if response.status_code != 200:
            logger.error(
                "%s token exchange failed: status=%d, body=%s",
                self.name,
                response.status_code,
                response.text,
            )
            raise ExternalServiceError(
                f"{self.name} token exchange failed: {response.status_code}",
                code="token_exchange_failed",
            )

        try:
            token_data = response.json()
        except ValueError as e:
            logger.error("%s token response is not valid JSON", self.name)
            raise ExternalServiceError(
                f"{self.name} token response is not valid JSON",
                code="token_exchange_failed",
            ) from e

        if not isinstance(token_data, dict):
            raise ExternalServiceError(
                f"{self.name} token response is not a JSON object",
                code="token_exchange_failed",
            )

        return token_data

    def _verify_state(self, request: Request) -> bool:
        expected = self._session(request).pop(self._state_key, None)
        received = request.query_params.get("state")
        if not expected or not received:
            logger.warning("OAuth state missing for %s callback", self.name)
            return False
        return secrets.compare_digest(expected.encode(), received.encode())

    def _session(self, request: Request) -> dict[str, Any]:
        if "session" not in request.scope:
            raise ConfigurationError(
                "OAuth2 state requires SessionMiddleware to be installed",
                code="session_unavailable",
            )
        return request.session
