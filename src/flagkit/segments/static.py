"""Static (explicit list) segments."""

from typing import Any, Iterable

from .interfaces import Segment


class StaticSegment(Segment):
    """
    Segment defined by an explicit list of user IDs.

    IDs are stored as strings, so 42 and "42" are the same member.
    """

    def __init__(self, name: str, user_ids: Iterable[str | int]):
        self._name = name
        self._user_ids = {str(user_id) for user_id in user_ids}

    @property
    def name(self) -> str:
        return self._name

    @property
    def segment_type(self) -> str:
        return "static"

    @property
    def user_ids(self) -> list[str]:
        return sorted(self._user_ids)

    def __len__(self) -> int:
        return len(self._user_ids)

    def contains(self, user_id: str | int, context: dict[str, Any] | None = None) -> bool:
        return str(user_id) in self._user_ids

    def __repr__(self) -> str:
        return f"<StaticSegment {self._name} ({len(self._user_ids)} users)>"
