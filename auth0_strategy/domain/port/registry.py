"""Strategy registry port."""

from abc import abstractmethod
from typing import Protocol

from auth0_strategy.domain.port.strategy import AuthStrategy


class StrategyRegistry(Protocol):
    """Registry of available authentication strategies.

    Allows looking up strategies by name and checking which
    strategies are configured/available.
    """

    @abstractmethod
    def get(self, name: str) -> AuthStrategy | None:
        """Get a strategy by name.

        Args:
            name: The strategy name (e.g., "auth0")

        Returns:
            The strategy if registered, None otherwise
        """
        ...

    @abstractmethod
    def available_strategies(self) -> list[str]:
        """Get list of registered strategy names."""
        ...

    def is_available(self, name: str) -> bool:
        """Check if a strategy is registered."""
        return name in self.available_strategies()
