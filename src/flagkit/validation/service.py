"""
Validation Service - single entry point for flag validation.

Dispatches on config["strategy"] to the validator registered for it.
"""

from typing import Any, Iterable

from .interfaces import StrategyValidator
from .result import FlagValidationError, ValidationResult


class ValidationService:
    """
    Validates flag configurations before they go live.

    Usage:
        service = ValidationService([SimpleStrategyValidator(), PercentageStrategyValidator()])

        result = service.validate({"strategy": "percentage", "percentage": 25})
        if not result.is_valid():
            print(result.errors)

        # Or fail loudly:
        service.validate_or_raise(config)
    """

    def __init__(self, validators: Iterable[StrategyValidator]):
        self._validators: dict[str, StrategyValidator] = {}
        for validator in validators:
            self._validators[validator.strategy_name] = validator

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        """Validate a flag configuration. Never raises."""
        result = ValidationResult()

        if not isinstance(config, dict) or config.get("strategy") is None:
            return result.add_error('Flag configuration missing required field "strategy"')

        strategy = config["strategy"]
        if not isinstance(strategy, str):
            return result.add_error("Strategy must be a string")

        validator = self._validators.get(strategy)
        if validator is None:
            return result.add_error(
                f'Unknown strategy "{strategy}". '
                f"Available strategies: {', '.join(self._validators.keys())}"
            )

        return result.merge(validator.validate(config))

    def validate_or_raise(self, config: dict[str, Any]) -> ValidationResult:
        """
        Validate a flag configuration.

        Returns the result (which may carry warnings) when valid.

        Raises:
            FlagValidationError: If there are any errors
        """
        result = self.validate(config)
        if not result.is_valid():
            raise FlagValidationError(result)
        return result

    def has_validator(self, strategy_name: str) -> bool:
        return strategy_name in self._validators

    def available_strategies(self) -> list[str]:
        return list(self._validators.keys())

    def get_validator(self, strategy_name: str) -> StrategyValidator | None:
        return self._validators.get(strategy_name)
