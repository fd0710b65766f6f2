"""
Flag Evaluator - Main evaluation entry point.

Resolves a flag configuration to its strategy and evaluates it:
1. Explicit "enabled": false -> off (kill switch, checked first)
2. Missing "strategy" -> simple
3. Unknown strategy -> off, logged
4. Otherwise the strategy decides
"""

from dataclasses import dataclass
from typing import Any, Mapping

from .strategies.interfaces import FlagStrategy, StrategyLogger
from .strategies.registry import StrategyRegistry


@dataclass(frozen=True)
class EvaluationResult:
    """
    Result of flag evaluation.

    Includes the decision and reason for debugging/logging.
    """
    enabled: bool
    reason: str
    strategy: str | None = None

    @classmethod
    def yes(cls, reason: str, strategy: str | None = None) -> "EvaluationResult":
        return cls(enabled=True, reason=reason, strategy=strategy)

    @classmethod
    def no(cls, reason: str, strategy: str | None = None) -> "EvaluationResult":
        return cls(enabled=False, reason=reason, strategy=strategy)

    def __bool__(self) -> bool:
        return self.enabled


class FlagEvaluator:
    """
    Feature flag evaluation service.

    Usage:
        evaluator = FlagEvaluator(registry, logger=get_logger())

        if evaluator.is_enabled({"strategy": "percentage", "percentage": 25}, {"user_id": "42"}):
            ...

        result = evaluator.evaluate(config, context)
        print(result.reason)
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        logger: StrategyLogger | None = None,
    ):
        self.registry = registry
        self.logger = logger

    # ============================================================
    # MAIN EVALUATION
    # ============================================================

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        """Check if a flag is enabled for this context."""
        return self.evaluate(config, context).enabled

    def evaluate(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> EvaluationResult:
        """
        Evaluate a flag configuration with detailed result.

        Returns EvaluationResult with reason for debugging.
        """
        if not isinstance(config, dict):
            return EvaluationResult.no("Invalid flag configuration")

        if config.get("enabled") is False:
            return EvaluationResult.no("Flag disabled")

        strategy_name = config.get("strategy") or FlagStrategy.SIMPLE.value
        strategy = self.registry.get(strategy_name)
        if strategy is None:
            if self.logger is not None:
                self.logger.warning(
                    "Unknown strategy",
                    strategy=strategy_name,
                    available_strategies=self.registry.names(),
                )
            return EvaluationResult.no(f"Unknown strategy: {strategy_name}", strategy_name)

        if strategy.is_enabled(config, context or {}):
            return EvaluationResult.yes("Strategy matched", strategy_name)
        return EvaluationResult.no("Strategy did not match", strategy_name)

    def evaluate_all(
        self,
        flags: Mapping[str, dict[str, Any]],
        context: dict[str, Any] | None = None,
    ) -> dict[str, bool]:
        """
        Evaluate every flag for one context.

        Useful for sending to frontend.
        """
        return {name: self.is_enabled(config, context) for name, config in flags.items()}
