"""Simple on/off strategy."""

from typing import Any

from .interfaces import FlagStrategy, Strategy


class SimpleStrategy(Strategy):
    """
    Always enabled.

    The flag-level "enabled" switch decides whether a simple flag is on;
    once evaluation reaches the strategy, the answer is yes.
    """

    name = FlagStrategy.SIMPLE.value

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        return True
