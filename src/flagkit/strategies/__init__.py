"""
Activation strategies.

Each strategy is a pure predicate: is_enabled(config, context) -> bool.

Built-in strategies:
- simple: always on
- percentage: consistent-hash rollout
- user_id: whitelist / blacklist
- date_range: time window
- geo: country / region / city targeting
- ip: exact IPs and CIDR ranges
- custom_attribute: rule-based attribute targeting
- segment: user segment membership
- progressive_rollout: time-scheduled percentage ramp
- composite: AND/OR combination of the above
"""

from .interfaces import BUCKET_COUNT, FlagStrategy, HashAlgorithm, Strategy, StrategyLogger
from .hashing import HashCalculator
from .operators import AttributeOperator, AttributeOperatorEvaluator, OperatorSet
from .simple import SimpleStrategy
from .user_id import UserIdStrategy
from .percentage import PercentageStrategy
from .date_range import DateRangeStrategy
from .geo import GeoStrategy
from .ip import IpStrategy
from .custom_attribute import CustomAttributeStrategy
from .segment import SegmentStrategy
from .progressive_rollout import ProgressiveRolloutStrategy
from .composite import CompositeStrategy
from .registry import StrategyRegistry, UnknownStrategyError

__all__ = [
    "BUCKET_COUNT",
    "FlagStrategy",
    "HashAlgorithm",
    "Strategy",
    "StrategyLogger",
    "HashCalculator",
    "AttributeOperator",
    "AttributeOperatorEvaluator",
    "OperatorSet",
    "SimpleStrategy",
    "UserIdStrategy",
    "PercentageStrategy",
    "DateRangeStrategy",
    "GeoStrategy",
    "IpStrategy",
    "CustomAttributeStrategy",
    "SegmentStrategy",
    "ProgressiveRolloutStrategy",
    "CompositeStrategy",
    "StrategyRegistry",
    "UnknownStrategyError",
]
