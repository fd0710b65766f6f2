"""
Percentage rollout strategy.

Enables a feature for a fixed share of identifiers using consistent hash
bucketing. The same identifier always lands in the same bucket, so a user
never flickers between on and off, and raising the percentage only ever
adds users.

Example configuration:
    {
        "strategy": "percentage",
        "percentage": 25,                       # 0-100, decimals allowed
        "stickiness": ["user_id", "session_id"],# optional fallback chain
        "hash_algorithm": "crc32",              # optional: crc32, md5, sha256
        "hash_seed": "checkout-2025",           # optional
    }
"""

from decimal import Decimal
from typing import Any, Sequence

from .hashing import HashCalculator
from .interfaces import BUCKET_COUNT, FlagStrategy, HashAlgorithm, Strategy, StrategyLogger
from .operators import to_number

MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100
DEFAULT_PERCENTAGE = 100
DEFAULT_STICKINESS = ("user_id", "session_id")


class PercentageStrategy(Strategy):
    """
    Consistent-hash percentage rollout.

    Logic:
    1. percentage >= 100 -> enabled for everyone, even without an identifier
    2. percentage <= 0 -> disabled for everyone
    3. Resolve the identifier from the stickiness chain (none -> disabled)
    4. Enabled if bucket < percentage / 100 * 100,000
    """

    name = FlagStrategy.PERCENTAGE.value

    def __init__(
        self,
        hash_calculator: HashCalculator | None = None,
        default_stickiness: Sequence[str] = DEFAULT_STICKINESS,
        logger: StrategyLogger | None = None,
    ):
        super().__init__(logger)
        self.hash_calculator = hash_calculator or HashCalculator()
        self.default_stickiness = tuple(default_stickiness)

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}

        percentage = to_number(config.get("percentage", DEFAULT_PERCENTAGE))
        if percentage is None:
            self._log("warning", "Non-numeric percentage", percentage=config.get("percentage"))
            return False

        if percentage >= MAX_PERCENTAGE:
            return True

        if percentage <= MIN_PERCENTAGE:
            return False

        identifier = self.resolve_identifier(config, context)
        if identifier is None:
            self._log("debug", "No identifier for percentage rollout", stickiness=self._stickiness(config))
            return False

        seed = config.get("hash_seed") or ""
        bucket = self.hash_calculator.calculate_bucket(
            identifier,
            HashAlgorithm.resolve(config.get("hash_algorithm")),
            seed=str(seed),
            buckets=BUCKET_COUNT,
        )

        return bucket < _threshold(percentage)

    def resolve_identifier(self, config: dict[str, Any], context: dict[str, Any]) -> str | None:
        """
        First non-empty context value named by the stickiness chain.

        Returns None when no attribute resolves.
        """
        for attribute in self._stickiness(config):
            value = context.get(attribute)
            if value is None or value == "":
                continue
            return str(value)
        return None

    def _stickiness(self, config: dict[str, Any]) -> tuple[str, ...]:
        stickiness = config.get("stickiness")
        if isinstance(stickiness, str) and stickiness:
            return (stickiness,)
        if isinstance(stickiness, (list, tuple)) and stickiness:
            return tuple(str(attribute) for attribute in stickiness)
        return self.default_stickiness


def _threshold(percentage: float) -> Decimal:
    """Bucket threshold, computed exactly so 0.001% maps to one bucket."""
    return Decimal(str(percentage)) * BUCKET_COUNT / MAX_PERCENTAGE
