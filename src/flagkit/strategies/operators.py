"""
Attribute operators for custom attribute rules.

Each operator compares a context value (actual) with a configured value
(expected). Operators never raise: a type mismatch is simply a non-match.

Usage:
    rules=[
        {"attribute": "tier", "operator": "in", "values": ["premium", "enterprise"]},
        {"attribute": "email", "operator": "ends_with", "value": ".edu"},
    ]

Add custom operators by subclassing AttributeOperatorEvaluator and
decorating the class with @register_operator(...).
"""

import math
import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable, Type


class AttributeOperator(str, Enum):
    """Operators available to custom attribute rules."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    IN = "in"
    NOT_IN = "not_in"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUALS = "greater_than_or_equals"
    LESS_THAN_OR_EQUALS = "less_than_or_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    REGEX = "regex"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"

    @classmethod
    def values(cls) -> list[str]:
        return [operator.value for operator in cls]


# ============================================================
# VALUE HELPERS
# ============================================================

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")

# Delimiters accepted around a regex, e.g. "/^abc/i" or "#^abc#".
_DELIMITERS = {"/", "#", "~", "@", "%", "!"}
_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,
}


def strict_equals(actual: Any, expected: Any) -> bool:
    """Type and value equality: 1 != 1.0, "1" != 1, True != 1."""
    return type(actual) is type(expected) and actual == expected


def strict_contains(values: Iterable[Any], actual: Any) -> bool:
    """Membership using strict_equals."""
    return any(strict_equals(actual, value) for value in values)


def to_number(value: Any) -> float | int | None:
    """
    Coerce a numeric value.

    Accepts ints, floats and numeric strings ("42", "-1.5", "1e3").
    Booleans, NaN/infinity and everything else return None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _NUMERIC_RE.match(value):
        value = float(value)
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def compile_pattern(pattern: str) -> re.Pattern | None:
    """
    Compile a rule regex.

    Supports bare patterns ("^\\+1") and delimited patterns with trailing
    flags ("/^abc/i"). Returns None if the pattern doesn't compile.
    """
    body, flags = _split_delimited(pattern)
    try:
        return re.compile(body, flags)
    except re.error:
        return None


def _split_delimited(pattern: str) -> tuple[str, int]:
    if len(pattern) < 2:
        return pattern, 0

    delimiter = pattern[0]
    if delimiter not in _DELIMITERS:
        return pattern, 0

    end = pattern.rfind(delimiter)
    if end <= 0:
        return pattern, 0

    modifiers = pattern[end + 1:]
    if any(modifier not in _REGEX_FLAGS for modifier in modifiers):
        return pattern, 0

    flags = 0
    for modifier in modifiers:
        flags |= _REGEX_FLAGS[modifier]
    return pattern[1:end], flags


# ============================================================
# OPERATOR BASE + REGISTRY
# ============================================================

class AttributeOperatorEvaluator(ABC):
    """Base class for a single rule operator."""

    operator: AttributeOperator

    @abstractmethod
    def evaluate(self, actual: Any, expected: Any) -> bool:
        """Compare actual (from context) with expected (from config)."""
        pass


_registered: dict[str, Type[AttributeOperatorEvaluator]] = {}


def register_operator(
    operator: AttributeOperator,
) -> Callable[[Type[AttributeOperatorEvaluator]], Type[AttributeOperatorEvaluator]]:
    """
    Decorator to register an operator implementation.

    Usage:
        @register_operator(AttributeOperator.EQUALS)
        class EqualsOperator(AttributeOperatorEvaluator):
            ...
    """
    def decorator(operator_class: Type[AttributeOperatorEvaluator]) -> Type[AttributeOperatorEvaluator]:
        operator_class.operator = operator
        _registered[operator.value] = operator_class
        return operator_class
    return decorator


class OperatorSet:
    """
    Name -> operator lookup used by CustomAttributeStrategy.

    Built once; read-only afterwards.
    """

    def __init__(self, operators: Iterable[AttributeOperatorEvaluator]):
        self._operators = {op.operator.value: op for op in operators}

    @classmethod
    def default(cls) -> "OperatorSet":
        """All registered operators."""
        return cls(operator_class() for operator_class in _registered.values())

    def get(self, name: Any) -> AttributeOperatorEvaluator | None:
        if not isinstance(name, str):
            return None
        return self._operators.get(name)

    def has(self, name: str) -> bool:
        return name in self._operators

    def names(self) -> list[str]:
        return list(self._operators.keys())


# ============================================================
# EQUALITY / MEMBERSHIP
# ============================================================

@register_operator(AttributeOperator.EQUALS)
class EqualsOperator(AttributeOperatorEvaluator):
    """Strict equality. Example: subscription_tier equals "premium"."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        return strict_equals(actual, expected)


@register_operator(AttributeOperator.NOT_EQUALS)
class NotEqualsOperator(AttributeOperatorEvaluator):
    """Strict inequality. Example: subscription_tier not_equals "free"."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        return not strict_equals(actual, expected)


@register_operator(AttributeOperator.IN)
class InOperator(AttributeOperatorEvaluator):
    """Value in list. Example: country in ["US", "CA", "GB"]."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        if not isinstance(expected, (list, tuple)):
            return False
        return strict_contains(expected, actual)


@register_operator(AttributeOperator.NOT_IN)
class NotInOperator(AttributeOperatorEvaluator):
    """Value not in list. A non-list expected value excludes nothing."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        if not isinstance(expected, (list, tuple)):
            return True
        return not strict_contains(expected, actual)


# ============================================================
# NUMERIC COMPARISON
# ============================================================

class _NumericOperator(AttributeOperatorEvaluator):
    """Both operands must be numeric, otherwise no match."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        left = to_number(actual)
        right = to_number(expected)
        if left is None or right is None:
            return False
        return self.compare(left, right)

    @abstractmethod
    def compare(self, left: float, right: float) -> bool:
        pass


@register_operator(AttributeOperator.GREATER_THAN)
class GreaterThanOperator(_NumericOperator):
    """Example: account_age_days greater_than 30."""

    def compare(self, left: float, right: float) -> bool:
        return left > right


@register_operator(AttributeOperator.GREATER_THAN_OR_EQUALS)
class GreaterThanOrEqualsOperator(_NumericOperator):
    """Example: subscription_price greater_than_or_equals 99.99."""

    def compare(self, left: float, right: float) -> bool:
        return left >= right


@register_operator(AttributeOperator.LESS_THAN)
class LessThanOperator(_NumericOperator):
    """Example: login_count less_than 5."""

    def compare(self, left: float, right: float) -> bool:
        return left < right


@register_operator(AttributeOperator.LESS_THAN_OR_EQUALS)
class LessThanOrEqualsOperator(_NumericOperator):
    """Example: age less_than_or_equals 65."""

    def compare(self, left: float, right: float) -> bool:
        return left <= right


# ============================================================
# STRING MATCHING
# ============================================================

class _StringOperator(AttributeOperatorEvaluator):
    """Both operands must be strings, otherwise no match."""

    def evaluate(self, actual: Any, expected: Any) -> bool:
        if not isinstance(actual, str) or not isinstance(expected, str):
            return False
        return self.match(actual, expected)

    @abstractmethod
    def match(self, actual: str, expected: str) -> bool:
        pass


@register_operator(AttributeOperator.CONTAINS)
class ContainsOperator(_StringOperator):
    """Example: email contains "@company.com"."""

    def match(self, actual: str, expected: str) -> bool:
        return expected in actual


@register_operator(AttributeOperator.NOT_CONTAINS)
class NotContainsOperator(_StringOperator):
    """Example: email not_contains "@competitor.com"."""

    def match(self, actual: str, expected: str) -> bool:
        return expected not in actual


@register_operator(AttributeOperator.STARTS_WITH)
class StartsWithOperator(_StringOperator):
    """Example: user_agent starts_with "Mozilla"."""

    def match(self, actual: str, expected: str) -> bool:
        return actual.startswith(expected)


@register_operator(AttributeOperator.ENDS_WITH)
class EndsWithOperator(_StringOperator):
    """Example: email ends_with ".edu"."""

    def match(self, actual: str, expected: str) -> bool:
        return actual.endswith(expected)


@register_operator(AttributeOperator.REGEX)
class RegexOperator(_StringOperator):
    """Example: phone_number regex "/^\\+1/". Malformed patterns never match."""

    def match(self, actual: str, expected: str) -> bool:
        pattern = compile_pattern(expected)
        if pattern is None:
            return False
        return pattern.search(actual) is not None
