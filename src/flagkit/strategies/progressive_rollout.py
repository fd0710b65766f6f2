"""
Progressive rollout strategy.

Ramps a percentage rollout up over time according to a schedule:

    {
        "strategy": "progressive_rollout",
        "timezone": "America/New_York",
        "schedule": [
            {"percentage": 1, "start_date": "2025-03-01"},
            {"percentage": 10, "start_date": "2025-03-08"},
            {"percentage": 100, "start_date": "2025-03-15"},
        ],
        "stickiness": "user_id",
    }

The active stage is the last one whose start_date has passed. Its
percentage, plus stickiness/hash_algorithm/hash_seed, is handed to the
percentage strategy, so users enabled at 1% stay enabled at 10%.
"""

from datetime import datetime
from typing import Any

from .dates import parse_datetime, resolve_now, resolve_timezone
from .interfaces import FlagStrategy, Strategy, StrategyLogger
from .operators import to_number
from .percentage import PercentageStrategy

PASS_THROUGH_KEYS = ("stickiness", "hash_algorithm", "hash_seed")


class ProgressiveRolloutStrategy(Strategy):
    """
    Time-scheduled percentage rollout.

    Logic:
    1. Empty schedule -> disabled
    2. No stage started yet -> disabled (percentage strategy not consulted)
    3. Otherwise delegate to PercentageStrategy with the active percentage

    Malformed stages are skipped with a warning; the others still apply.
    "Now" is context["current_date"] when set, otherwise the clock.
    """

    name = FlagStrategy.PROGRESSIVE_ROLLOUT.value

    def __init__(
        self,
        percentage_strategy: PercentageStrategy | None = None,
        logger: StrategyLogger | None = None,
    ):
        super().__init__(logger)
        self.percentage_strategy = percentage_strategy or PercentageStrategy(logger=logger)

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        schedule = config.get("schedule")
        if not schedule or not isinstance(schedule, (list, tuple)):
            return False

        tz = resolve_timezone(config.get("timezone"))
        if config.get("timezone") and tz is None:
            self._log("warning", "Invalid timezone, using UTC", timezone=config.get("timezone"))

        now = resolve_now(context, tz)
        if now is None:
            self._log("warning", "Unparsable current_date", current_date=context.get("current_date"))
            return False

        percentage = self.current_percentage(schedule, now, tz)
        if percentage is None:
            return False

        percentage_config: dict[str, Any] = {
            "strategy": FlagStrategy.PERCENTAGE.value,
            "percentage": percentage,
        }
        for key in PASS_THROUGH_KEYS:
            if config.get(key) is not None:
                percentage_config[key] = config[key]

        return self.percentage_strategy.is_enabled(percentage_config, context)

    def current_percentage(
        self,
        schedule: list[Any],
        now: datetime,
        tz: Any = None,
    ) -> float | None:
        """
        Percentage of the last stage that has started.

        Returns None if no valid stage has started.
        """
        current = None

        for index, stage in enumerate(schedule):
            if not isinstance(stage, dict) or "percentage" not in stage or "start_date" not in stage:
                self._log("warning", "Skipping malformed rollout stage", index=index)
                continue

            percentage = to_number(stage["percentage"])
            start = parse_datetime(stage["start_date"], tz)
            if percentage is None or start is None:
                self._log(
                    "warning",
                    "Skipping invalid rollout stage",
                    index=index,
                    percentage=stage["percentage"],
                    start_date=stage["start_date"],
                )
                continue

            if now >= start:
                current = float(percentage)

        return current
