"""
Tests for the strategy registry.
"""

import pytest

from flagkit.strategies import (
    FlagStrategy,
    SimpleStrategy,
    StrategyRegistry,
    UnknownStrategyError,
    UserIdStrategy,
)


def test_registry_has_every_built_in_strategy(registry):
    """build_registry wires every strategy type."""
    assert sorted(registry.names()) == sorted(strategy.value for strategy in FlagStrategy)
    assert len(registry) == len(FlagStrategy)


def test_lookup():
    """Lookup by name, membership and has()."""
    registry = StrategyRegistry([SimpleStrategy(), UserIdStrategy()])
    assert isinstance(registry.get("simple"), SimpleStrategy)
    assert registry.get("percentage") is None
    assert registry.get(None) is None
    assert "user_id" in registry
    assert "percentage" not in registry
    assert registry.has("simple")


def test_require_unknown_lists_available():
    """require() raises with the available names."""
    registry = StrategyRegistry([SimpleStrategy()])
    with pytest.raises(UnknownStrategyError) as exc_info:
        registry.require("telepathy")

    assert "Unknown strategy: 'telepathy'" in str(exc_info.value)
    assert exc_info.value.available == ["simple"]


def test_later_strategy_with_same_name_wins():
    """Registering a name twice keeps the last one."""
    first, second = SimpleStrategy(), SimpleStrategy()
    registry = StrategyRegistry([first, second])
    assert registry.require("simple") is second
    assert list(registry) == [second]


# ============ Determinism ============


CONTEXT = {
    "user_id": "42",
    "session_id": "abc",
    "email": "ana@example.com",
    "country": "US",
    "ip_address": "10.1.2.3",
    "plan": "pro",
    "current_date": "2025-06-15T12:00:00Z",
}

CONFIGS = {
    "simple": {"enabled": True},
    "percentage": {"percentage": 50, "hash_seed": "checkout"},
    "user_id": {"whitelist": ["42"]},
    "date_range": {"start_date": "2025-06-01", "end_date": "2025-06-30"},
    "geo": {"countries": ["US", "CA"]},
    "ip": {"ip_ranges": ["10.0.0.0/8"]},
    "custom_attribute": {"rules": [{"attribute": "plan", "operator": "equals", "value": "pro"}]},
    "segment": {"segments": ["staff"]},
    "progressive_rollout": {
        "schedule": [
            {"percentage": 10, "start_date": "2025-06-01"},
            {"percentage": 50, "start_date": "2025-06-10"},
        ],
    },
    "composite": {
        "operator": "OR",
        "strategies": [
            {"type": "geo", "countries": ["FR"]},
            {"type": "percentage", "percentage": 30},
        ],
    },
}


@pytest.mark.parametrize("name", sorted(CONFIGS))
def test_repeated_evaluation_is_stable(registry, name):
    """Same config and context always give the same answer."""
    strategy = registry.require(name)
    first = strategy.is_enabled(CONFIGS[name], dict(CONTEXT))
    assert all(strategy.is_enabled(CONFIGS[name], dict(CONTEXT)) == first for _ in range(20))


def test_every_strategy_covered_by_stability_check(registry):
    """The stability check runs against every registered strategy."""
    assert sorted(CONFIGS) == sorted(registry.names())
