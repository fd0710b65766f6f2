"""
Tests for scheduled progressive rollouts.
"""

from typing import Any

import pytest

from flagkit.strategies import PercentageStrategy, ProgressiveRolloutStrategy
from flagkit.strategies.dates import parse_datetime

SCHEDULE = [
    {"percentage": 10, "start_date": "2020-01-01"},
    {"percentage": 50, "start_date": "2020-01-03"},
    {"percentage": 100, "start_date": "2020-01-05"},
]


class SpyPercentageStrategy(PercentageStrategy):
    """Percentage strategy that records the configs it receives."""

    def __init__(self):
        super().__init__()
        self.calls: list[dict[str, Any]] = []

    def is_enabled(self, config, context=None):
        self.calls.append(config)
        return super().is_enabled(config, context)


@pytest.fixture
def spy() -> SpyPercentageStrategy:
    return SpyPercentageStrategy()


@pytest.fixture
def strategy(spy, logger) -> ProgressiveRolloutStrategy:
    return ProgressiveRolloutStrategy(spy, logger=logger)


def test_active_stage_is_last_started(strategy):
    """The latest stage that has started is active."""
    now = parse_datetime("2020-01-04")
    assert strategy.current_percentage(SCHEDULE, now) == 50.0
    assert strategy.current_percentage(SCHEDULE, parse_datetime("2020-01-01")) == 10.0
    assert strategy.current_percentage(SCHEDULE, parse_datetime("2021-01-01")) == 100.0
    assert strategy.current_percentage(SCHEDULE, parse_datetime("2019-12-31")) is None


def test_delegates_active_percentage(strategy, spy):
    """The active stage's percentage is delegated."""
    config = {"strategy": "progressive_rollout", "schedule": SCHEDULE, "hash_seed": "ramp"}
    strategy.is_enabled(config, {"user_id": "1", "current_date": "2020-01-04"})

    assert spy.calls == [{"strategy": "percentage", "percentage": 50.0, "hash_seed": "ramp"}]


def test_before_first_stage_is_disabled_without_delegating(strategy, spy):
    """Before the first stage nothing is evaluated."""
    config = {"schedule": SCHEDULE}
    assert not strategy.is_enabled(config, {"user_id": "1", "current_date": "2019-06-01"})
    assert spy.calls == []


def test_full_rollout_enables_everyone(strategy):
    """A 100% stage enables everyone."""
    config = {"schedule": SCHEDULE}
    assert strategy.is_enabled(config, {"current_date": "2020-02-01"})


def test_users_stay_enabled_as_rollout_grows(strategy):
    """Users enabled early stay enabled in later stages."""
    config = {"schedule": SCHEDULE}
    for i in range(300):
        context = {"user_id": f"user-{i}"}
        early = strategy.is_enabled(config, {**context, "current_date": "2020-01-02"})
        later = strategy.is_enabled(config, {**context, "current_date": "2020-01-04"})
        assert later or not early


def test_empty_schedule_is_disabled(strategy):
    """An empty schedule is off."""
    assert not strategy.is_enabled({"schedule": []}, {"user_id": "1"})
    assert not strategy.is_enabled({}, {"user_id": "1"})


def test_malformed_stages_are_skipped(strategy, logger):
    """Malformed stages are skipped with a warning."""
    schedule = [
        {"percentage": 100, "start_date": "2020-01-01"},
        {"percentage": "lots", "start_date": "2020-01-02"},
        {"start_date": "2020-01-03"},
        "stage four",
    ]
    assert strategy.current_percentage(schedule, parse_datetime("2020-02-01")) == 100.0
    assert len(logger.events("warning")) == 3


def test_timezone_shifts_stage_start(strategy):
    """Stage dates are read in the configured timezone."""
    schedule = [{"percentage": 100, "start_date": "2020-01-05"}]
    config = {"schedule": schedule, "timezone": "Asia/Tokyo"}
    # 2020-01-05 00:00 in Tokyo is 2020-01-04 15:00 UTC
    assert strategy.is_enabled(config, {"current_date": "2020-01-04T16:00:00Z"})
    assert not strategy.is_enabled({"schedule": schedule}, {"current_date": "2020-01-04T16:00:00Z"})


def test_invalid_current_date_is_disabled(strategy):
    """An unparsable current_date is off."""
    assert not strategy.is_enabled({"schedule": SCHEDULE}, {"current_date": "soon"})
