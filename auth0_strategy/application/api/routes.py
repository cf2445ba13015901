"""Authentication routes for the OAuth login flow."""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

from auth0_strategy.config import Config
from auth0_strategy.domain.error import ProviderAuthorizationError
from auth0_strategy.domain.model import AuthOutcome, Failure, Redirect
from auth0_strategy.domain.params import map_authorization_params
from auth0_strategy.domain.port.registry import StrategyRegistry
from auth0_strategy.domain.port.strategy import AuthStrategy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"], route_class=DishkaRoute)


def _resolve_strategy(registry: StrategyRegistry, name: str) -> AuthStrategy:
    strategy = registry.get(name)
    if strategy is None:
        available = registry.available_strategies()
        raise HTTPException(
            status_code=400,
            detail={
                "code": "unknown_strategy",
                "message": f"Unknown strategy: {name}. Available: {', '.join(available) or 'none'}",
            },
        )
    return strategy


def _to_response(outcome: AuthOutcome, config: Config) -> Response:
    if isinstance(outcome, Redirect):
        return RedirectResponse(url=outcome.url, status_code=outcome.status)

    if isinstance(outcome, Failure):
        challenge = outcome.challenge or "unauthorized"
        logger.warning("Authentication failed: %s", challenge)
        failure_redirect = config.routes.failure_redirect
        if failure_redirect:
            separator = "&" if "?" in failure_redirect else "?"
            error_params = urlencode({"error": challenge})
            return RedirectResponse(url=f"{failure_redirect}{separator}{error_params}", status_code=302)
        raise HTTPException(status_code=outcome.status or 401, detail={"code": challenge})

    return JSONResponse({"user": jsonable_encoder(outcome.user)})


@router.get("/{name}/login")
async def login(
    name: str,
    request: Request,
    registry: FromDishka[StrategyRegistry],
    config: FromDishka[Config],
) -> Response:
    """Start a login; allow-listed query parameters are forwarded to the IdP.

    e.g. ``/auth/auth0/login?connection=github&prompt=login``. Anything else,
    such as ``callback_url`` or ``scope``, stays as configured.
    """
    strategy = _resolve_strategy(registry, name)
    outcome = await strategy.authenticate(request, map_authorization_params(request.query_params))
    return _to_response(outcome, config)


@router.get("/{name}/callback")
async def callback(
    name: str,
    request: Request,
    registry: FromDishka[StrategyRegistry],
    config: FromDishka[Config],
) -> Response:
    """Handle the identity provider's redirect back to the application."""
    strategy = _resolve_strategy(registry, name)
    try:
        outcome = await strategy.authenticate(request)
    except ProviderAuthorizationError as e:
        outcome = Failure(challenge=e.code)
    return _to_response(outcome, config)
