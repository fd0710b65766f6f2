"""
flagkit - Feature flag strategy evaluation.

Deterministic activation strategies with:
- Percentage rollouts (consistent hashing)
- User, segment, geo, IP and attribute targeting
- Date windows and scheduled progressive rollouts
- AND/OR composition
- Configuration validation

Usage Levels:

Level 1 - Evaluate a flag:
    from flagkit import FlagContainer

    flags = FlagContainer()
    flags.evaluator.is_enabled({"strategy": "percentage", "percentage": 25}, {"user_id": "42"})

Level 2 - Typed context:
    from flagkit import GeoContext, UserContext, merge_contexts

    context = merge_contexts(UserContext(user_id="42"), GeoContext(country="US"))
    flags.evaluator.is_enabled({"strategy": "geo", "countries": ["US", "CA"]}, context)

Level 3 - Segments:
    flags.segments.load_from_config({
        "beta_testers": {"type": "static", "user_ids": ["1", "2", "3"]},
    })
    flags.evaluator.is_enabled({"strategy": "segment", "segments": ["beta_testers"]}, {"user_id": "2"})

Level 4 - Composition:
    # {
    #     "strategy": "composite",
    #     "operator": "AND",
    #     "strategies": [
    #         {"type": "date_range", "start_date": "2025-01-01"},
    #         {"type": "percentage", "percentage": 10}
    #     ]
    # }

Level 5 - Validation before deploy:
    flags.validation.validate_or_raise(config)  # raises FlagValidationError
"""

from .config import FlagSettings, get_settings
from .container import FlagContainer, build_registry, build_validation_service
from .context import (
    CustomAttributeContext,
    DateRangeContext,
    FlagContext,
    GeoContext,
    IpContext,
    SegmentContext,
    UserContext,
    merge_contexts,
)
from .logging_config import configure_logging, get_logger
from .service import EvaluationResult, FlagEvaluator
from .strategies import FlagStrategy, Strategy, StrategyRegistry, UnknownStrategyError
from .validation import FlagValidationError, ValidationResult, ValidationService

__all__ = [
    "FlagSettings",
    "get_settings",
    "FlagContainer",
    "build_registry",
    "build_validation_service",
    "FlagContext",
    "UserContext",
    "GeoContext",
    "IpContext",
    "DateRangeContext",
    "CustomAttributeContext",
    "SegmentContext",
    "merge_contexts",
    "configure_logging",
    "get_logger",
    "EvaluationResult",
    "FlagEvaluator",
    "FlagStrategy",
    "Strategy",
    "StrategyRegistry",
    "UnknownStrategyError",
    "FlagValidationError",
    "ValidationResult",
    "ValidationService",
]
