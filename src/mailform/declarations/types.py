"""Declaration types for mailform.

Defines the data written by the declaration verbs at class-definition time:
- FieldRole / FieldDeclaration: one declared field and what it is used for
- Validation specs: the tagged variant a declaration may carry
- Computed values: literal, method reference or computation, resolved lazily
"""

import dataclasses
import inspect
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from mailform.errors import DeclarationError


class FieldRole(Enum):
    """What a declared field is used for when the mail is built."""

    PLAIN = "plain"
    ATTACHMENT = "attachment"
    HONEYPOT = "honeypot"


# =============================================================================
# Validation Specs
# =============================================================================


@dataclass(frozen=True)
class RequirePresence:
    """The field must not be blank."""


@dataclass(frozen=True)
class Pattern:
    """The field must match a regular expression (blank passes)."""

    regex: re.Pattern

    def __post_init__(self) -> None:
        if isinstance(self.regex, str):
            object.__setattr__(self, "regex", re.compile(self.regex))


@dataclass(frozen=True)
class Inclusion:
    """The field must be one of the given choices (blank passes)."""

    choices: tuple

    def __post_init__(self) -> None:
        object.__setattr__(self, "choices", tuple(self.choices))


@dataclass(frozen=True)
class LengthRange:
    """The field length must lie within [minimum, maximum] (blank passes)."""

    minimum: int | None = None
    maximum: int | None = None

    def __post_init__(self) -> None:
        if self.minimum is None and self.maximum is None:
            raise DeclarationError("LengthRange needs a minimum or a maximum")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise DeclarationError(
                f"LengthRange minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    @classmethod
    def from_range(cls, value: range) -> "LengthRange":
        if value.step != 1:
            raise DeclarationError("Length ranges must have a step of 1")
        return cls(minimum=value.start, maximum=value.stop - 1)


@dataclass(frozen=True)
class CustomRule:
    """A whole-form validation hook.

    The hook is either the name of a method on the form or a callable taking
    the form. It returns an iterable of ValidationError (or None).
    """

    hook: Union[str, Callable[[Any], Any]]


ValidationSpec = Union[RequirePresence, Pattern, Inclusion, LengthRange, CustomRule]

_SPEC_TYPES = (RequirePresence, Pattern, Inclusion, LengthRange, CustomRule)


def validation_spec(value: Any) -> ValidationSpec | None:
    """Coerce the ``validate=`` shorthand into a validation spec.

    True -> RequirePresence, compiled regex -> Pattern, list/tuple/set ->
    Inclusion, range -> LengthRange, method name or callable -> CustomRule.
    """
    if value is None or value is False:
        return None
    if isinstance(value, _SPEC_TYPES):
        return value
    if value is True:
        return RequirePresence()
    if isinstance(value, re.Pattern):
        return Pattern(value)
    if isinstance(value, range):
        return LengthRange.from_range(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return Inclusion(tuple(value))
    if isinstance(value, str) or callable(value):
        return CustomRule(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        # Application-defined spec; ValidatorRegistry must know its type
        return value
    raise DeclarationError(f"Unsupported validation specifier: {value!r}")


# =============================================================================
# Field Declarations
# =============================================================================


@dataclass(frozen=True)
class FieldDeclaration:
    """One declared field.

    Attributes:
        name: Field name, also the accessor name on instances
        role: Plain value, attachment or honeypot
        validation: Validation spec carried by the declaring call, if any
        allow_blank: Suppresses the automatic presence check
    """

    name: str
    role: FieldRole = FieldRole.PLAIN
    validation: ValidationSpec | None = None
    allow_blank: bool = False


# =============================================================================
# Computed Values
# =============================================================================


def read_field(instance: Any, name: str) -> Any:
    """Read ``name`` from an instance, calling it when it is a method."""
    value = getattr(instance, name)
    if inspect.ismethod(value):
        return value()
    return value


@dataclass(frozen=True)
class Literal:
    value: Any

    def resolve(self, instance: Any) -> Any:
        return self.value


@dataclass(frozen=True)
class MethodRef:
    """Reads a method (or field) of the form when resolved."""

    name: str

    def resolve(self, instance: Any) -> Any:
        return read_field(instance, self.name)


@dataclass(frozen=True)
class Computation:
    """Calls ``fn(form)`` when resolved."""

    fn: Callable[[Any], Any]

    def resolve(self, instance: Any) -> Any:
        return self.fn(instance)


ComputedValue = Union[Literal, MethodRef, Computation]


def computed(value: Any) -> ComputedValue:
    """Wrap a slot value: callables become computations, anything else a literal."""
    if isinstance(value, (Literal, MethodRef, Computation)):
        return value
    if callable(value):
        return Computation(value)
    return Literal(value)


def humanize(name: str) -> str:
    """Convert snake_case or CamelCase to a human label ("first_name" -> "First name")."""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", name).replace("_", " ")
    spaced = " ".join(spaced.split())
    return spaced[:1].upper() + spaced[1:].lower()
