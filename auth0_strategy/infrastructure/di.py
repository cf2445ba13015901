"""DI provider for auth strategies."""

import logging
from collections.abc import AsyncIterator

import httpx
from dishka import Provider, Scope, from_context, provide

from auth0_strategy.config import Config
from auth0_strategy.domain.port.registry import StrategyRegistry
from auth0_strategy.domain.port.strategy import AuthStrategy, VerifyCallback
from auth0_strategy.infrastructure.auth0 import Auth0Strategy
from auth0_strategy.infrastructure.oauth2 import HTTP_TIMEOUT
from auth0_strategy.infrastructure.registry import InMemoryStrategyRegistry

logger = logging.getLogger(__name__)


class StrategyProvider(Provider):
    """DI provider for the HTTP client and configured strategies."""

    config = from_context(provides=Config, scope=Scope.APP)

    def __init__(self, verify: VerifyCallback) -> None:
        super().__init__()
        self._verify = verify

    @provide(scope=Scope.APP)
    async def get_http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Shared HTTP client for IdP requests (connection pooling)."""
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_strategy_registry(
        self, config: Config, http_client: httpx.AsyncClient
    ) -> StrategyRegistry:
        """Provide StrategyRegistry with configured strategies."""
        strategies: dict[str, AuthStrategy] = {}

        # Register Auth0 if configured
        if config.provider.configured:
            strategy = Auth0Strategy(
                config.provider.to_options(),
                verify=self._verify,
                http_client=http_client,
            )
            strategies[strategy.name] = strategy
            logger.info("Registered auth0 strategy for domain=%s", config.provider.domain)

        return InMemoryStrategyRegistry(strategies)
