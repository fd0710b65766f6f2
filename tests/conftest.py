"""
Pytest fixtures for testing.

Provides:
- Strategy registry wired like production
- In-memory segment repository with sample segments
- Recording logger for asserting log events
- Mock implementations for interfaces
"""

from typing import Any

import pytest

from flagkit.config import FlagSettings
from flagkit.container import build_registry, build_validation_service
from flagkit.segments import Segment, SegmentProvider, SegmentRepository, StaticSegment


# ============ Mock Implementations ============


class RecordingLogger:
    """Logger that keeps every event for assertions."""

    def __init__(self):
        self.records: list[dict[str, Any]] = []

    def _record(self, level: str, event: str, **fields: Any) -> None:
        self.records.append({"level": level, "event": event, **fields})

    def debug(self, event: str, **fields: Any) -> None:
        self._record("debug", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._record("warning", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self._record("error", event, **fields)

    def events(self, level: str | None = None) -> list[str]:
        return [r["event"] for r in self.records if level is None or r["level"] == level]

    def clear(self) -> None:
        self.records.clear()


class MockSegmentProvider(SegmentProvider):
    """Segment provider backed by a plain dict, counting lookups."""

    def __init__(self, segments: dict[str, Segment] | None = None):
        self.segments = segments or {}
        self.lookups: list[str] = []

    def get(self, name: str) -> Segment | None:
        self.lookups.append(name)
        return self.segments.get(name)

    def has(self, name: str) -> bool:
        return name in self.segments

    def get_names(self) -> list[str]:
        return list(self.segments.keys())


# ============ Fixtures ============


@pytest.fixture
def settings() -> FlagSettings:
    """Default settings, independent of the environment."""
    return FlagSettings(_env_file=None)


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def segments() -> SegmentRepository:
    """Repository with one static and one dynamic segment."""
    repository = SegmentRepository()
    repository.load_from_config({
        "beta_testers": {"type": "static", "user_ids": ["1", "2", "3"]},
        "staff": {"type": "dynamic", "condition": "email_domain", "value": "example.com"},
    })
    return repository


@pytest.fixture
def segment_provider() -> MockSegmentProvider:
    return MockSegmentProvider({"vip": StaticSegment("vip", ["42"])})


@pytest.fixture
def registry(segments, logger, settings):
    """Registry with every built-in strategy."""
    return build_registry(segments, logger, settings)


@pytest.fixture
def validation(segments, settings):
    """Validation service with every built-in validator."""
    return build_validation_service(segments, settings)
