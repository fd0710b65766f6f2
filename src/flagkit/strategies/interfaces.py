"""
Strategy interfaces - Core abstractions.

These define the contracts every activation strategy follows.
Callers depend ONLY on Strategy.is_enabled(config, context), never on a
concrete implementation.

A strategy is a pure predicate over two plain dicts:
- config: the flag configuration ({"strategy": "percentage", "percentage": 25, ...})
- context: runtime facts ({"user_id": "42", "country": "US", ...})
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Protocol

# Bucket space for percentage rollouts: 0.001% granularity.
BUCKET_COUNT = 100_000


class FlagStrategy(str, Enum):
    """Names of the built-in strategies (the "strategy"/"type" config value)."""

    SIMPLE = "simple"
    PERCENTAGE = "percentage"
    USER_ID = "user_id"
    DATE_RANGE = "date_range"
    COMPOSITE = "composite"
    SEGMENT = "segment"
    CUSTOM_ATTRIBUTE = "custom_attribute"
    PROGRESSIVE_ROLLOUT = "progressive_rollout"
    IP = "ip"
    GEO = "geo"


class HashAlgorithm(str, Enum):
    """
    Hash algorithms for percentage bucketing.

    - CRC32: fast, good distribution, default
    - MD5: more uniform distribution
    - SHA256: cryptographic hash, slowest
    """

    CRC32 = "crc32"
    MD5 = "md5"
    SHA256 = "sha256"

    @classmethod
    def resolve(cls, value: Any) -> "HashAlgorithm":
        """Resolve a config value, falling back to CRC32 for anything unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.CRC32

    @classmethod
    def values(cls) -> list[str]:
        return [algorithm.value for algorithm in cls]


class StrategyLogger(Protocol):
    """
    Optional logging sink accepted by strategies.

    Any structlog logger satisfies this protocol.
    """

    def debug(self, event: str, **fields: Any) -> Any: ...

    def warning(self, event: str, **fields: Any) -> Any: ...

    def error(self, event: str, **fields: Any) -> Any: ...


class Strategy(ABC):
    """
    Abstract activation strategy.

    Implementations are stateless after construction and safe to share
    between threads. is_enabled must never raise for malformed config or
    context: bad input degrades to a deterministic boolean.
    """

    name: str = ""

    def __init__(self, logger: StrategyLogger | None = None):
        self.logger = logger

    @abstractmethod
    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        """
        Decide if the feature is on.

        Args:
            config: Flag configuration
            context: Runtime context (None is treated as empty)

        Returns:
            True if the feature is enabled for this context
        """
        pass

    def _log(self, level: str, event: str, **fields: Any) -> None:
        """Send an event to the logger, if one was provided."""
        if self.logger is None:
            return
        getattr(self.logger, level)(event, strategy=self.name, **fields)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
