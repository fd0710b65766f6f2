"""
Segment interfaces - Core abstractions.

A segment is a named set of users, either listed explicitly (static) or
derived from context attributes (dynamic). The segment strategy only talks
to a SegmentProvider, so segments can live in memory, a database or a
remote service.
"""

from abc import ABC, abstractmethod
from typing import Any


class Segment(ABC):
    """
    A named group of users.

    Implementations:
    - StaticSegment: explicit list of user IDs
    - DynamicSegment: attribute condition on the evaluation context
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique segment name (e.g., "beta_testers")."""
        pass

    @property
    @abstractmethod
    def segment_type(self) -> str:
        """Segment kind, e.g. "static" or "dynamic"."""
        pass

    @abstractmethod
    def contains(self, user_id: str | int, context: dict[str, Any] | None = None) -> bool:
        """Check if the user belongs to this segment."""
        pass


class SegmentProvider(ABC):
    """
    Read-only segment lookup used by the segment strategy and validator.

    Implementations must be side-effect free from the caller's point of view.
    Thread-safety of lookups is the provider's responsibility.
    """

    @abstractmethod
    def get(self, name: str) -> Segment | None:
        """Get a segment by name."""
        pass

    @abstractmethod
    def has(self, name: str) -> bool:
        """Check if a segment exists."""
        pass

    @abstractmethod
    def get_names(self) -> list[str]:
        """List all segment names."""
        pass
