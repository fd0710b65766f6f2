"""Dynamic (attribute-derived) segments."""

from typing import Any

from ..strategies.operators import strict_contains, strict_equals
from .interfaces import Segment

EMAIL_DOMAIN = "email_domain"


class DynamicSegment(Segment):
    """
    Segment defined by a condition on the evaluation context.

    Usage:
        DynamicSegment("staff", "email_domain", "example.com")
        DynamicSegment("paying", "plan", ["pro", "enterprise"])
        DynamicSegment("admins", "role", "admin")

    Conditions:
    - email_domain: domain of context["email"], case-insensitive
    - any other name: context[condition] equals value, or is in value
      when value is a list (strict comparison)
    """

    def __init__(self, name: str, condition: str, value: Any):
        self._name = name
        self.condition = condition
        self.value = value

    @property
    def name(self) -> str:
        return self._name

    @property
    def segment_type(self) -> str:
        return "dynamic"

    def contains(self, user_id: str | int, context: dict[str, Any] | None = None) -> bool:
        context = context or {}
        if not isinstance(self.condition, str):
            return False

        if self.condition == EMAIL_DOMAIN and isinstance(context.get("email"), str):
            return _email_domain_matches(context["email"], self.value)

        if context.get(self.condition) is None:
            return False

        actual = context[self.condition]
        if isinstance(self.value, (list, tuple)):
            return strict_contains(self.value, actual)
        return strict_equals(actual, self.value)

    def __repr__(self) -> str:
        return f"<DynamicSegment {self._name} {self.condition}={self.value!r}>"


def _email_domain_matches(email: str, domain: Any) -> bool:
    if "@" not in email or not isinstance(domain, str):
        return False
    return email.rsplit("@", 1)[1].casefold() == domain.casefold()
