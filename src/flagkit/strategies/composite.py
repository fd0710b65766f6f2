"""
Composite strategy.

Combines other strategies with AND/OR logic, optionally nested:

    {
        "strategy": "composite",
        "operator": "AND",
        "strategies": [
            {"type": "date_range", "start_date": "2025-01-01"},
            {
                "type": "composite",
                "operator": "OR",
                "strategies": [
                    {"type": "user_id", "whitelist": ["42"]},
                    {"type": "percentage", "percentage": 10},
                ],
            },
        ],
    }
"""

from typing import Any

from .interfaces import FlagStrategy, Strategy, StrategyLogger

AND = "AND"
OR = "OR"
DEFAULT_MAX_DEPTH = 5


class CompositeStrategy(Strategy):
    """
    Recursive AND/OR combination of named strategies.

    Logic:
    - Empty "strategies" list -> enabled (vacuous truth, any operator)
    - AND: stops at the first disabled sub-strategy
    - OR: stops at the first enabled sub-strategy
    - Entries without a "type", or with an unregistered one, are skipped
    - Nesting deeper than max_depth -> disabled

    Sub-strategies receive the parent's context unchanged.
    The composition root registers the other strategies with
    add_strategy() before the first evaluation; the map is read-only after.
    """

    name = FlagStrategy.COMPOSITE.value

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger: StrategyLogger | None = None,
    ):
        super().__init__(logger)
        self.max_depth = max_depth
        self._strategies: dict[str, Strategy] = {}

    def add_strategy(self, strategy: Strategy) -> None:
        """Register a strategy usable as a sub-strategy type."""
        if strategy is self:
            return
        self._strategies[strategy.name] = strategy

    @property
    def available_strategies(self) -> list[str]:
        return [*self._strategies.keys(), self.name]

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        return self._evaluate(config, context or {}, depth=0)

    def _evaluate(self, config: dict[str, Any], context: dict[str, Any], depth: int) -> bool:
        if depth > self.max_depth:
            self._log("error", "Maximum composite nesting depth exceeded", max_depth=self.max_depth)
            return False

        strategies = config.get("strategies")
        if not strategies:
            return True

        if not isinstance(strategies, (list, tuple)):
            self._log("warning", "Composite \"strategies\" must be a list")
            return False

        operator = str(config.get("operator") or AND).upper()
        if operator not in (AND, OR):
            self._log("warning", "Unknown composite operator", operator=config.get("operator"))
            return False

        for index, sub_config in enumerate(strategies):
            result = self._evaluate_entry(sub_config, context, depth, index)
            if result is None:
                continue

            if operator == OR and result:
                return True

            if operator == AND and not result:
                return False

        return operator == AND

    def _evaluate_entry(
        self,
        sub_config: Any,
        context: dict[str, Any],
        depth: int,
        index: int,
    ) -> bool | None:
        """Evaluate one entry. None means the entry was skipped."""
        strategy_name = sub_config.get("type") if isinstance(sub_config, dict) else None
        if not strategy_name:
            self._log("warning", "Composite entry missing \"type\" field", index=index)
            return None

        if strategy_name == self.name:
            return self._evaluate(sub_config, context, depth + 1)

        strategy = self._strategies.get(strategy_name) if isinstance(strategy_name, str) else None
        if strategy is None:
            self._log(
                "error",
                "Unknown strategy in composite configuration",
                type=strategy_name,
                index=index,
                available_strategies=self.available_strategies,
            )
            return None

        return strategy.is_enabled(sub_config, context)
