"""
User segments for the segment strategy.

Built-in segments:
- StaticSegment: explicit user ID list
- DynamicSegment: attribute condition (email domain, plan, role, ...)

SegmentRepository is the in-memory SegmentProvider. Plug in any other
provider by implementing SegmentProvider.
"""

from .interfaces import Segment, SegmentProvider
from .static import StaticSegment
from .dynamic import DynamicSegment
from .repository import SegmentRepository

__all__ = [
    "Segment",
    "SegmentProvider",
    "StaticSegment",
    "DynamicSegment",
    "SegmentRepository",
]
