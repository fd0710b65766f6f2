"""
Flag configuration validation.

Validators check a configuration before it is stored or deployed and
collect every problem as an error (blocking) or a warning (advisory).
Evaluation never depends on validation having run.
"""

from .result import FlagValidationError, ValidationResult
from .interfaces import StrategyValidator
from .validators import (
    SimpleStrategyValidator,
    PercentageStrategyValidator,
    UserIdStrategyValidator,
    DateRangeStrategyValidator,
    GeoStrategyValidator,
    IpStrategyValidator,
    CustomAttributeStrategyValidator,
    SegmentStrategyValidator,
    ProgressiveRolloutStrategyValidator,
)
from .composite import CompositeStrategyValidator
from .service import ValidationService

__all__ = [
    "FlagValidationError",
    "ValidationResult",
    "StrategyValidator",
    "SimpleStrategyValidator",
    "PercentageStrategyValidator",
    "UserIdStrategyValidator",
    "DateRangeStrategyValidator",
    "GeoStrategyValidator",
    "IpStrategyValidator",
    "CustomAttributeStrategyValidator",
    "SegmentStrategyValidator",
    "ProgressiveRolloutStrategyValidator",
    "CompositeStrategyValidator",
    "ValidationService",
]
