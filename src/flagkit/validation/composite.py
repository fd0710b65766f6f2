"""
Composite strategy validator.

Walks a composite configuration recursively:
- Empty "strategies" lists are rejected
- Unknown types are rejected, "simple" (always on) is rejected as incompatible
- Nesting is capped; going deeper yields one error and stops descending
- percentage, user_id and date_range entries get structural checks
- Other known types are delegated to their own validator
- Nested composite errors are prefixed with their index
"""

from typing import Any, Mapping

from ..strategies.dates import parse_datetime
from ..strategies.interfaces import FlagStrategy
from ..strategies.operators import to_number
from ..strategies.percentage import DEFAULT_STICKINESS, MAX_PERCENTAGE, MIN_PERCENTAGE
from ..strategies.composite import AND, OR, DEFAULT_MAX_DEPTH
from .interfaces import StrategyValidator
from .result import ValidationResult

INCOMPATIBLE_STRATEGIES = (FlagStrategy.SIMPLE.value,)

VALID_STRATEGIES = tuple(
    strategy.value for strategy in FlagStrategy
    if strategy.value not in INCOMPATIBLE_STRATEGIES
)

# Context keys each nested strategy reads. percentage accepts either key.
REQUIRED_CONTEXT: dict[str, tuple[str, ...]] = {
    FlagStrategy.PERCENTAGE.value: DEFAULT_STICKINESS,
    FlagStrategy.PROGRESSIVE_ROLLOUT.value: DEFAULT_STICKINESS,
    FlagStrategy.USER_ID.value: ("user_id",),
    FlagStrategy.SEGMENT.value: ("user_id",),
    FlagStrategy.IP.value: ("ip_address",),
    FlagStrategy.DATE_RANGE.value: (),
}

_GEO_CONTEXT = {"countries": "country", "regions": "region", "cities": "city"}


class CompositeStrategyValidator(StrategyValidator):
    """
    Recursive validator for composite configurations.

    Usage:
        validator = CompositeStrategyValidator(validators={"geo": GeoStrategyValidator()})
        result = validator.validate(config)
        keys = validator.get_required_context(config)
    """

    strategy_name = FlagStrategy.COMPOSITE.value

    def __init__(
        self,
        validators: Mapping[str, StrategyValidator] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.validators = dict(validators or {})
        self.max_depth = max_depth

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        return self._validate(config, depth=0)

    def _validate(self, config: dict[str, Any], depth: int) -> ValidationResult:
        result = ValidationResult()

        if depth > self.max_depth:
            return result.add_error(f"Maximum nesting depth of {self.max_depth} exceeded")

        if "strategies" not in config or config["strategies"] is None:
            return result.add_error('Composite strategy must have a "strategies" field')

        strategies = config["strategies"]
        if not isinstance(strategies, list):
            return result.add_error('The "strategies" field must be a list')

        if not strategies:
            return result.add_error("Composite strategy requires at least one sub-strategy")

        operator = config.get("operator")
        if operator is not None and (not isinstance(operator, str) or operator.upper() not in (AND, OR)):
            result.add_error(f'Invalid operator "{operator}". Valid options: {AND}, {OR}')

        for index, entry in enumerate(strategies):
            if not isinstance(entry, dict):
                result.add_error(f"Strategy at index {index} must be a dict")
                continue
            result.merge(self._validate_entry(entry, depth + 1, index))

        return result

    def _validate_entry(self, config: dict[str, Any], depth: int, index: int) -> ValidationResult:
        result = ValidationResult()

        if config.get("type") is None:
            return result.add_error(f'Strategy at index {index} is missing "type" field')

        strategy_type = config["type"]

        if strategy_type in INCOMPATIBLE_STRATEGIES:
            return result.add_error(
                f'Strategy type "{strategy_type}" at index {index} '
                "is incompatible with composite strategies"
            )

        if strategy_type not in VALID_STRATEGIES:
            return result.add_error(
                f'Unknown strategy type "{strategy_type}" at index {index}. '
                f"Valid types: {', '.join(VALID_STRATEGIES)}"
            )

        if strategy_type == FlagStrategy.COMPOSITE.value:
            nested = self._validate(config, depth)
            for error in nested.errors:
                result.add_error(f"Nested composite at index {index}: {error}")
            for warning in nested.warnings:
                result.add_warning(f"Nested composite at index {index}: {warning}")
        elif strategy_type == FlagStrategy.PERCENTAGE.value:
            self._check_percentage(config, index, result)
        elif strategy_type == FlagStrategy.USER_ID.value:
            self._check_user_id(config, index, result)
        elif strategy_type == FlagStrategy.DATE_RANGE.value:
            self._check_date_range(config, index, result)
        elif strategy_type in self.validators:
            delegated = self.validators[strategy_type].validate(config)
            for error in delegated.errors:
                result.add_error(f'Strategy "{strategy_type}" at index {index}: {error}')
            for warning in delegated.warnings:
                result.add_warning(f'Strategy "{strategy_type}" at index {index}: {warning}')

        return result

    # ============================================================
    # STRUCTURAL CHECKS
    # ============================================================

    def _check_percentage(self, config: dict[str, Any], index: int, result: ValidationResult) -> None:
        if config.get("percentage") is None:
            result.add_error(f'Percentage strategy at index {index} is missing "percentage" field')
            return

        percentage = to_number(config["percentage"])
        if percentage is None:
            result.add_error(f"Percentage strategy at index {index} has non-numeric percentage value")
            return

        if percentage < MIN_PERCENTAGE or percentage > MAX_PERCENTAGE:
            result.add_error(
                f"Percentage strategy at index {index} has invalid percentage value "
                f"{percentage:.2f} (must be between {MIN_PERCENTAGE} and {MAX_PERCENTAGE})"
            )

    def _check_user_id(self, config: dict[str, Any], index: int, result: ValidationResult) -> None:
        lists = [name for name in ("whitelist", "blacklist") if config.get(name) is not None]
        if not lists:
            result.add_error(
                f'User ID strategy at index {index} must have either "whitelist" or "blacklist"'
            )
            return

        for name in lists:
            if not isinstance(config[name], list):
                result.add_error(f"User ID strategy at index {index} has non-list {name}")
            elif not config[name]:
                result.add_error(f"User ID strategy at index {index} has empty {name}")

    def _check_date_range(self, config: dict[str, Any], index: int, result: ValidationResult) -> None:
        bounds = [name for name in ("start_date", "end_date") if config.get(name)]
        if not bounds:
            result.add_error(
                f'Date range strategy at index {index} must have at least "start_date" or "end_date"'
            )
            return

        parsed = {}
        for name in bounds:
            parsed[name] = parse_datetime(config[name])
            if parsed[name] is None:
                result.add_error(
                    f'Date range strategy at index {index} has invalid {name}: "{config[name]}"'
                )

        start, end = parsed.get("start_date"), parsed.get("end_date")
        if start is not None and end is not None and start > end:
            result.add_error(f"Date range strategy at index {index} has start_date after end_date")

    # ============================================================
    # CONTEXT ANALYSIS
    # ============================================================

    def get_required_context(self, config: dict[str, Any]) -> list[str]:
        """
        Context keys the nested strategies read, in first-seen order.

        Useful for checking a context before evaluation. Keys for
        strategies that accept alternatives (percentage stickiness) are
        all listed.
        """
        keys: list[str] = []
        self._collect_context(config, keys, depth=0)
        return keys

    def _collect_context(self, config: dict[str, Any], keys: list[str], depth: int) -> None:
        strategies = config.get("strategies")
        if depth > self.max_depth or not isinstance(strategies, list):
            return

        for entry in strategies:
            if not isinstance(entry, dict) or entry.get("type") is None:
                continue

            strategy_type = entry["type"]
            if strategy_type == FlagStrategy.COMPOSITE.value:
                self._collect_context(entry, keys, depth + 1)
                continue

            for key in _context_keys(strategy_type, entry):
                if key not in keys:
                    keys.append(key)


def _context_keys(strategy_type: Any, config: dict[str, Any]) -> list[str]:
    if strategy_type in (FlagStrategy.PERCENTAGE.value, FlagStrategy.PROGRESSIVE_ROLLOUT.value):
        stickiness = config.get("stickiness")
        if isinstance(stickiness, str):
            return [stickiness]
        if isinstance(stickiness, list) and stickiness:
            return [key for key in stickiness if isinstance(key, str)]

    if strategy_type == FlagStrategy.GEO.value:
        return [key for category, key in _GEO_CONTEXT.items() if config.get(category)]

    if strategy_type == FlagStrategy.CUSTOM_ATTRIBUTE.value:
        rules = config.get("rules")
        if not isinstance(rules, list):
            return []
        return [
            rule["attribute"] for rule in rules
            if isinstance(rule, dict) and isinstance(rule.get("attribute"), str)
        ]

    if not isinstance(strategy_type, str):
        return []
    return list(REQUIRED_CONTEXT.get(strategy_type, ()))
