"""
In-memory segment repository.

For applications that define segments in configuration, and for testing.
"""

from typing import Any, Mapping

from .dynamic import DynamicSegment
from .interfaces import Segment, SegmentProvider
from .static import StaticSegment


class SegmentRepository(SegmentProvider):
    """
    In-memory segment storage.

    Usage:
        segments = SegmentRepository()
        segments.load_from_config({
            "beta_testers": {"type": "static", "user_ids": ["1", "2", "3"]},
            "staff": {"type": "dynamic", "condition": "email_domain", "value": "example.com"},
        })

    Populate it during startup; evaluation only reads from it.
    """

    def __init__(self, segments: list[Segment] | None = None):
        self._segments: dict[str, Segment] = {}
        for segment in segments or []:
            self.add(segment)

    # ============================================================
    # LOOKUP
    # ============================================================

    def get(self, name: str) -> Segment | None:
        """Get a segment by name."""
        return self._segments.get(name)

    def has(self, name: str) -> bool:
        """Check if a segment exists."""
        return name in self._segments

    def get_names(self) -> list[str]:
        """List all segment names."""
        return list(self._segments.keys())

    def all(self) -> dict[str, Segment]:
        """All segments by name."""
        return dict(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    # ============================================================
    # MANAGEMENT
    # ============================================================

    def add(self, segment: Segment) -> None:
        """Add or replace a segment."""
        self._segments[segment.name] = segment

    def remove(self, name: str) -> bool:
        """Remove a segment. Returns False if it didn't exist."""
        return self._segments.pop(name, None) is not None

    def clear(self) -> None:
        """Remove all segments."""
        self._segments.clear()

    def load_from_config(self, config: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Load segments from a name -> definition mapping.

        Definitions:
            {"type": "static", "user_ids": [...]}                 (default type)
            {"type": "dynamic", "condition": "...", "value": ...}

        Unknown types and dynamic definitions without a string condition
        are skipped.
        """
        for name, definition in config.items():
            segment_type = definition.get("type", "static")

            if segment_type == "static":
                self.add(StaticSegment(name, definition.get("user_ids", [])))
            elif segment_type == "dynamic" and isinstance(definition.get("condition"), str):
                self.add(DynamicSegment(
                    name,
                    definition["condition"],
                    definition.get("value"),
                ))
