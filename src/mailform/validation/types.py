"""Core types for the mailform validation system."""

from dataclasses import dataclass, field
from typing import Any, Hashable, Protocol


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure.

    Attributes:
        message: Human-readable message
        code: Machine-readable error code (e.g., "BLANK")
        field: Field name this error relates to, or None for form-level errors
    """

    message: str
    code: str = "INVALID"
    field: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "field": self.field,
        }


class Validator(Protocol):
    """Protocol that all validators must implement.

    ``key`` identifies the rule slot the validator occupies; registering a
    second validator with the same key replaces the first.
    """

    key: Hashable

    def validate(self, form: Any) -> list[ValidationError]:
        """Validate the form. An empty list means valid."""
        ...


@dataclass
class ValidationResult:
    """Result of validating a form.

    Attributes:
        valid: True if no errors
        errors: Every error reported, in validator order
    """

    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors))

    def for_field(self, name: str) -> list[ValidationError]:
        return [e for e in self.errors if e.field == name]

    def messages(self) -> dict[str, list[str]]:
        """Messages keyed by field name ("base" for form-level errors)."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field or "base", []).append(error.message)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
        }
