"""
Validation results and the exception raised for invalid flags.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """
    Outcome of validating one flag configuration.

    Errors block the configuration, warnings are advisory.
    Both keep insertion order.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> "ValidationResult":
        self.errors.append(message)
        return self

    def add_warning(self, message: str) -> "ValidationResult":
        self.warnings.append(message)
        return self

    def is_valid(self) -> bool:
        return not self.errors

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Append the other result's errors and warnings to this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.is_valid(),
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


class FlagValidationError(Exception):
    """Raised when a flag configuration fails validation."""

    def __init__(self, result: ValidationResult, message: str = "Flag configuration validation failed"):
        self.result = result
        super().__init__(message)

    @property
    def errors(self) -> list[str]:
        return self.result.errors

    @property
    def warnings(self) -> list[str]:
        return self.result.warnings

    def __str__(self) -> str:
        return f"{self.args[0]}: {'; '.join(self.result.errors)}"
