"""Date range strategy."""

from typing import Any

from .dates import end_of_day, parse_datetime, resolve_now, resolve_timezone, start_of_day
from .interfaces import FlagStrategy, Strategy


class DateRangeStrategy(Strategy):
    """
    Enable between two dates, inclusive.

    Usage:
        {
            "strategy": "date_range",
            "start_date": "2025-06-01",     # optional, from 00:00:00
            "end_date": "2025-06-30",       # optional, until 23:59:59
            "timezone": "Europe/Paris",     # optional, for naive dates
        }

    The current instant comes from context["current_date"] when set,
    otherwise the clock. Any unparsable date disables the flag.
    """

    name = FlagStrategy.DATE_RANGE.value

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        tz = resolve_timezone(config.get("timezone"))
        if config.get("timezone") and tz is None:
            self._log("warning", "Invalid timezone, using UTC", timezone=config.get("timezone"))

        current = resolve_now(context, tz)
        if current is None:
            self._log("warning", "Unparsable current_date", current_date=context.get("current_date"))
            return False

        if config.get("start_date"):
            start = parse_datetime(config["start_date"], tz)
            if start is None:
                self._log("warning", "Unparsable start_date", start_date=config["start_date"])
                return False
            if current < start_of_day(start):
                return False

        if config.get("end_date"):
            end = parse_datetime(config["end_date"], tz)
            if end is None:
                self._log("warning", "Unparsable end_date", end_date=config["end_date"])
                return False
            if current > end_of_day(end):
                return False

        return True
