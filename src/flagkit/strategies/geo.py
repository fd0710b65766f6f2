"""Geographic targeting strategy."""

from typing import Any

from .interfaces import FlagStrategy, Strategy

# Config key -> context key
GEO_CATEGORIES = {
    "countries": "country",
    "regions": "region",
    "cities": "city",
}


class GeoStrategy(Strategy):
    """
    Enable by country, region and/or city.

    Usage:
        {"strategy": "geo", "countries": ["US", "CA"], "regions": ["CA", "NY"]}

    Each configured category must match (AND), any value within a category
    matches (OR). Comparison is case-insensitive. No configured category
    means disabled.
    """

    name = FlagStrategy.GEO.value

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}

        configured = {
            key: config.get(key)
            for key in GEO_CATEGORIES
            if config.get(key)
        }
        if not configured:
            return False

        for key, allowed in configured.items():
            if not _matches(allowed, context.get(GEO_CATEGORIES[key])):
                return False

        return True


def _matches(allowed: Any, actual: Any) -> bool:
    if actual is None:
        return False
    if isinstance(allowed, str):
        allowed = [allowed]
    if not isinstance(allowed, (list, tuple, set)):
        return False
    needle = str(actual).casefold()
    return any(str(value).casefold() == needle for value in allowed)
