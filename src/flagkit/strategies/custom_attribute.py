"""Custom attribute rule strategy."""

from typing import Any

from .interfaces import FlagStrategy, Strategy, StrategyLogger
from .operators import OperatorSet


class CustomAttributeStrategy(Strategy):
    """
    Enable when context attributes satisfy every rule (AND).

    Usage:
        {
            "strategy": "custom_attribute",
            "rules": [
                {"attribute": "tier", "operator": "in", "values": ["premium", "enterprise"]},
                {"attribute": "age", "operator": "greater_than", "value": 30},
            ],
        }

    A rule fails when its attribute is absent from the context, its operator
    is unknown, or the rule is malformed. No rules means disabled.
    """

    name = FlagStrategy.CUSTOM_ATTRIBUTE.value

    def __init__(
        self,
        operators: OperatorSet | None = None,
        logger: StrategyLogger | None = None,
    ):
        super().__init__(logger)
        self.operators = operators or OperatorSet.default()

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        rules = config.get("rules")
        if not rules or not isinstance(rules, (list, tuple)):
            return False

        for index, rule in enumerate(rules):
            if not self._evaluate_rule(rule, context, index):
                return False

        return True

    def _evaluate_rule(self, rule: Any, context: dict[str, Any], index: int) -> bool:
        if not isinstance(rule, dict):
            return False

        attribute = rule.get("attribute")
        operator_name = rule.get("operator")
        if not attribute or not operator_name:
            return False

        if not isinstance(attribute, str) or attribute not in context:
            return False

        operator = self.operators.get(operator_name)
        if operator is None:
            self._log("warning", "Unknown rule operator", operator=operator_name, index=index)
            return False

        # "values" for list operators, "value" for everything else
        expected = rule.get("values")
        if expected is None:
            expected = rule.get("value")

        return operator.evaluate(context[attribute], expected)
