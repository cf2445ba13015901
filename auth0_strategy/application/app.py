import logging
from contextlib import asynccontextmanager

import logfire
from dishka import make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from auth0_strategy.application.api.routes import router as auth_router
from auth0_strategy.config import Config, configure_logging
from auth0_strategy.domain.error import ConfigurationError, InfrastructureError
from auth0_strategy.domain.model import Profile
from auth0_strategy.domain.port.strategy import VerifyCallback
from auth0_strategy.infrastructure.di import StrategyProvider
from auth0_strategy.version import __version__

logger = logging.getLogger(__name__)


def profile_as_user(access_token: str, id_token: str | None, profile: Profile | None) -> dict:
    """Default verify callback: the userinfo claims are the user."""
    return profile.raw_data if profile else {}


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.dishka_container.close()


def create_app(config: Config | None = None, verify: VerifyCallback | None = None) -> FastAPI:
    """Create FastAPI application exposing the /auth routes.

    Args:
        config: Settings; loaded from env/.env/YAML when omitted
        verify: Maps (access_token, id_token, profile) to the application's user
    """
    config = config or Config()

    # Configure logging early
    configure_logging(config.logging)
    logger.info("Starting auth0-strategy v%s", __version__)

    if config.provider.state and not config.session.secret:
        raise ConfigurationError(
            "session.secret must be set when provider.state is enabled",
            code="session_unavailable",
        )

    app_instance = FastAPI(title="auth0-strategy", version=__version__, lifespan=lifespan)

    if config.tracing.enabled:
        logfire.configure(service_name=config.tracing.service_name, send_to_logfire="if-token-present")
        logfire.instrument_httpx()
        logfire.instrument_fastapi(app_instance)

    if config.session.secret:
        app_instance.add_middleware(
            SessionMiddleware,
            secret_key=config.session.secret,
            session_cookie=config.session.cookie_name,
            max_age=config.session.max_age,
        )

    container = make_async_container(
        StrategyProvider(verify or profile_as_user),
        FastapiProvider(),
        context={Config: config},
    )
    setup_dishka(container, app_instance)

    app_instance.include_router(auth_router)

    @app_instance.exception_handler(InfrastructureError)
    async def infrastructure_error_handler(request: Request, exc: InfrastructureError):
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=503,
            content={"code": exc.code, "message": exc.message},
        )

    return app_instance
