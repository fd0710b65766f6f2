"""Segment membership strategy."""

from typing import Any

from ..segments.interfaces import SegmentProvider
from .interfaces import FlagStrategy, Strategy, StrategyLogger


class SegmentStrategy(Strategy):
    """
    Enable for members of any listed segment (OR).

    Usage:
        {"strategy": "segment", "segments": ["beta_testers", "staff"]}

    Requires context["user_id"]. Unknown segment names are skipped and
    logged, not treated as errors.
    """

    name = FlagStrategy.SEGMENT.value

    def __init__(
        self,
        segments: SegmentProvider,
        logger: StrategyLogger | None = None,
    ):
        super().__init__(logger)
        self.segments = segments

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        user_id = context.get("user_id")
        if user_id is None:
            self._log("warning", "Segment strategy requires user_id in context")
            return False

        segment_names = config.get("segments")
        if not segment_names or not isinstance(segment_names, (list, tuple)):
            self._log("warning", "Segment strategy has no segments configured")
            return False

        for segment_name in segment_names:
            segment = self.segments.get(segment_name) if isinstance(segment_name, str) else None
            if segment is None:
                self._log(
                    "error",
                    "Segment not found",
                    segment=segment_name,
                    available_segments=self.segments.get_names(),
                )
                continue

            if segment.contains(user_id, context):
                self._log(
                    "debug",
                    "User found in segment",
                    user_id=user_id,
                    segment=segment_name,
                    segment_type=segment.segment_type,
                )
                return True

        return False
