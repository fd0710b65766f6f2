"""
Composition root.
Builds the strategy registry, validation service and evaluator once.
"""

from dataclasses import dataclass, field
from typing import Any

from .config import FlagSettings, get_settings
from .logging_config import get_logger
from .segments import SegmentProvider, SegmentRepository
from .service import FlagEvaluator
from .strategies import (
    CompositeStrategy,
    CustomAttributeStrategy,
    DateRangeStrategy,
    GeoStrategy,
    IpStrategy,
    PercentageStrategy,
    ProgressiveRolloutStrategy,
    SegmentStrategy,
    SimpleStrategy,
    StrategyLogger,
    StrategyRegistry,
    UserIdStrategy,
)
from .validation import (
    CompositeStrategyValidator,
    CustomAttributeStrategyValidator,
    DateRangeStrategyValidator,
    GeoStrategyValidator,
    IpStrategyValidator,
    PercentageStrategyValidator,
    ProgressiveRolloutStrategyValidator,
    SegmentStrategyValidator,
    SimpleStrategyValidator,
    UserIdStrategyValidator,
    ValidationService,
)


def build_registry(
    segments: SegmentProvider,
    logger: StrategyLogger | None = None,
    settings: FlagSettings | None = None,
) -> StrategyRegistry:
    """
    Wire every built-in strategy.

    The composite strategy gets a reference to each of the others, so
    any of them can appear as a composite sub-strategy.
    """
    settings = settings or get_settings()

    percentage = PercentageStrategy(
        default_stickiness=settings.default_stickiness,
        logger=logger,
    )
    strategies = [
        SimpleStrategy(logger=logger),
        percentage,
        UserIdStrategy(logger=logger),
        DateRangeStrategy(logger=logger),
        GeoStrategy(logger=logger),
        IpStrategy(logger=logger),
        CustomAttributeStrategy(logger=logger),
        SegmentStrategy(segments, logger=logger),
        ProgressiveRolloutStrategy(percentage, logger=logger),
    ]

    composite = CompositeStrategy(max_depth=settings.max_composite_depth, logger=logger)
    for strategy in strategies:
        composite.add_strategy(strategy)

    return StrategyRegistry([*strategies, composite])


def build_validation_service(
    segments: SegmentProvider,
    settings: FlagSettings | None = None,
) -> ValidationService:
    """Wire every built-in validator, composite included."""
    settings = settings or get_settings()

    validators = [
        SimpleStrategyValidator(),
        PercentageStrategyValidator(),
        UserIdStrategyValidator(large_list_threshold=settings.large_list_threshold),
        DateRangeStrategyValidator(),
        GeoStrategyValidator(),
        IpStrategyValidator(),
        CustomAttributeStrategyValidator(),
        SegmentStrategyValidator(segments),
        ProgressiveRolloutStrategyValidator(),
    ]
    composite = CompositeStrategyValidator(
        validators={validator.strategy_name: validator for validator in validators},
        max_depth=settings.max_composite_depth,
    )

    return ValidationService([*validators, composite])


@dataclass
class FlagContainer:
    """
    Holds the engine's services and builds them on first access.

    Example:
    ```python
    from flagkit import FlagContainer

    flags = FlagContainer()
    flags.segments.load_from_config({"staff": {"user_ids": ["1", "2"]}})

    flags.validation.validate_or_raise(config)
    flags.evaluator.is_enabled(config, {"user_id": "1"})
    ```
    """

    settings: FlagSettings = field(default_factory=get_settings)
    logger: Any = None
    _instances: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = get_logger()

    @property
    def segments(self) -> SegmentProvider:
        """Segment provider (in-memory repository unless one was set)."""
        if "segments" not in self._instances:
            self._instances["segments"] = SegmentRepository()
        return self._instances["segments"]

    @property
    def registry(self) -> StrategyRegistry:
        """Strategy registry."""
        if "registry" not in self._instances:
            self._instances["registry"] = build_registry(self.segments, self.logger, self.settings)
        return self._instances["registry"]

    @property
    def validation(self) -> ValidationService:
        """Validation service."""
        if "validation" not in self._instances:
            self._instances["validation"] = build_validation_service(self.segments, self.settings)
        return self._instances["validation"]

    @property
    def evaluator(self) -> FlagEvaluator:
        """Flag evaluator."""
        if "evaluator" not in self._instances:
            self._instances["evaluator"] = FlagEvaluator(self.registry, logger=self.logger)
        return self._instances["evaluator"]

    def set(self, name: str, instance: Any) -> None:
        """Set a custom instance (e.g. a different segment provider)."""
        self._instances[name] = instance

    def clear(self) -> None:
        """Clear all instances (for testing)."""
        self._instances.clear()
