"""
Typed evaluation context builders.

Strategies read plain dicts. These models build those dicts from typed,
validated input and can be combined:

    context = merge_contexts(
        UserContext(user_id="42", session_id="abc"),
        GeoContext(country="US", region="CA"),
        {"plan": "premium"},
    )
    # {"user_id": "42", "session_id": "abc", "country": "US", "region": "CA", "plan": "premium"}
"""

import ipaddress
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FlagContext(BaseModel):
    """Base class for context builders."""

    model_config = ConfigDict(frozen=True)

    def to_context(self) -> dict[str, Any]:
        """Context dict for evaluation. Unset fields are omitted."""
        return self.model_dump(exclude_none=True)


class UserContext(FlagContext):
    """Identity facts used by user_id, percentage and segment strategies."""

    user_id: str = Field(..., min_length=1)
    session_id: Optional[str] = None
    company_id: Optional[str] = None


class GeoContext(FlagContext):
    """Location facts used by the geo strategy."""

    country: str = Field(..., min_length=1)
    region: Optional[str] = None
    city: Optional[str] = None


class IpContext(FlagContext):
    """Client address used by the ip strategy."""

    ip_address: str

    @field_validator("ip_address")
    @classmethod
    def validate_ip_address(cls, v: str) -> str:
        try:
            ipaddress.ip_address(v)
        except ValueError:
            raise ValueError(f"Invalid IP address: {v}")
        return v


class DateRangeContext(FlagContext):
    """Pins "now" for date_range and progressive_rollout evaluation."""

    current_date: datetime


class CustomAttributeContext(FlagContext):
    """Arbitrary attributes for custom_attribute rules."""

    attributes: dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.attributes

    def to_context(self) -> dict[str, Any]:
        return dict(self.attributes)


class SegmentContext(FlagContext):
    """User plus the attributes dynamic segments match on (email, plan, ...)."""

    user_id: str = Field(..., min_length=1)
    attributes: dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.attributes

    def to_context(self) -> dict[str, Any]:
        return {"user_id": self.user_id, **self.attributes}


def merge_contexts(*contexts: Union[FlagContext, Mapping[str, Any], None]) -> dict[str, Any]:
    """
    Merge context builders and plain mappings left to right.

    Later values win on key collisions. None entries are ignored.
    """
    merged: dict[str, Any] = {}
    for context in contexts:
        if context is None:
            continue
        if isinstance(context, FlagContext):
            merged.update(context.to_context())
        else:
            merged.update(context)
    return merged
