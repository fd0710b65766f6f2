"""
Strategy registry.

Read-only name -> strategy lookup, assembled once at startup.

Usage:
    registry = StrategyRegistry([SimpleStrategy(), PercentageStrategy(), ...])

    strategy = registry.get(config["strategy"])
    if strategy is not None:
        strategy.is_enabled(config, context)
"""

from typing import Iterable, Iterator

from .interfaces import Strategy


class UnknownStrategyError(LookupError):
    """Raised by StrategyRegistry.require() for an unregistered name."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown strategy: '{name}'. Available: {available}")


class StrategyRegistry:
    """
    Immutable mapping of strategy names to instances.

    Later strategies with the same name replace earlier ones during
    construction. Nothing can be added afterwards.
    """

    def __init__(self, strategies: Iterable[Strategy]):
        self._strategies: dict[str, Strategy] = {}
        for strategy in strategies:
            self._strategies[strategy.name] = strategy

    def get(self, name: str) -> Strategy | None:
        """Get a strategy by name, or None."""
        if not isinstance(name, str):
            return None
        return self._strategies.get(name)

    def require(self, name: str) -> Strategy:
        """
        Get a strategy by name.

        Raises:
            UnknownStrategyError: If no strategy has that name
        """
        strategy = self.get(name)
        if strategy is None:
            raise UnknownStrategyError(name, self.names())
        return strategy

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def names(self) -> list[str]:
        """Registered strategy names, in registration order."""
        return list(self._strategies.keys())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._strategies

    def __iter__(self) -> Iterator[Strategy]:
        return iter(self._strategies.values())

    def __len__(self) -> int:
        return len(self._strategies)
