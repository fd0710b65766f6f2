"""
Validator interface.

A validator checks one strategy's configuration before it goes live and
reports every problem it finds instead of stopping at the first.
"""

from abc import ABC, abstractmethod
from typing import Any

from .result import ValidationResult


class StrategyValidator(ABC):
    """
    Abstract configuration validator for a single strategy.

    Implementations:
    - SimpleStrategyValidator, PercentageStrategyValidator, ...
    - CompositeStrategyValidator: recursive, delegates to the others
    """

    strategy_name: str = ""

    @abstractmethod
    def validate(self, config: dict[str, Any]) -> ValidationResult:
        """
        Validate a flag configuration.

        Never raises for malformed input; every problem becomes an
        error or a warning on the returned result.
        """
        pass
