"""Strategy registry implementation."""

from auth0_strategy.domain.port.registry import StrategyRegistry
from auth0_strategy.domain.port.strategy import AuthStrategy


class InMemoryStrategyRegistry(StrategyRegistry):
    """In-memory strategy registry.

    Stores a mapping of strategy names to their implementations.
    Strategies are registered at application startup via DI.
    """

    def __init__(self, strategies: dict[str, AuthStrategy] | None = None) -> None:
        self._strategies: dict[str, AuthStrategy] = dict(strategies or {})

    def get(self, name: str) -> AuthStrategy | None:
        return self._strategies.get(name)

    def available_strategies(self) -> list[str]:
        return list(self._strategies.keys())

    def register(self, name: str, strategy: AuthStrategy) -> None:
        """Register a strategy under ``name``, replacing any previous one."""
        self._strategies[name] = strategy
