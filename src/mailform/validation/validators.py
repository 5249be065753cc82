"""Field and form validators.

These are the primitives the dispatcher registers for each declaration:
- presence: field must not be blank
- format: field must match a regex
- inclusion: field must be one of a set of choices
- length: field length must be within a range
- custom hook: whole-form rule returning its own errors
"""

from collections.abc import Iterable
from typing import Any, Callable, Hashable

from mailform.declarations.types import (
    Inclusion,
    LengthRange,
    Pattern,
    humanize,
    read_field,
)
from mailform.validation.types import ValidationError


def is_blank(value: Any) -> bool:
    """None, whitespace-only strings and empty collections are blank."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


class BaseValidator:
    """Base class for single-field validators.

    Subclasses implement ``check`` for non-blank values; blank values pass,
    since blankness is governed by the presence validator.
    """

    rule = "value"

    def __init__(self, field: str):
        self.field = field

    @property
    def key(self) -> Hashable:
        return (self.field, self.rule)

    @property
    def label(self) -> str:
        return humanize(self.field)

    def validate(self, form: Any) -> list[ValidationError]:
        value = read_field(form, self.field)
        if is_blank(value):
            return []
        return self.check(value)

    def check(self, value: Any) -> list[ValidationError]:
        raise NotImplementedError("Subclasses must implement check()")

    def error(self, message: str, code: str) -> list[ValidationError]:
        return [ValidationError(message=f"{self.label} {message}", code=code, field=self.field)]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field!r})"


class PresenceValidator(BaseValidator):
    rule = "presence"

    def validate(self, form: Any) -> list[ValidationError]:
        if is_blank(read_field(form, self.field)):
            return self.error("can't be blank", "BLANK")
        return []


class FormatValidator(BaseValidator):
    def __init__(self, field: str, spec: Pattern):
        super().__init__(field)
        self.regex = spec.regex

    def check(self, value: Any) -> list[ValidationError]:
        if self.regex.search(str(value)) is None:
            return self.error("is invalid", "INVALID_FORMAT")
        return []


class InclusionValidator(BaseValidator):
    def __init__(self, field: str, spec: Inclusion):
        super().__init__(field)
        self.choices = spec.choices

    def check(self, value: Any) -> list[ValidationError]:
        if value not in self.choices:
            return self.error("is not included in the list", "NOT_INCLUDED")
        return []


class LengthValidator(BaseValidator):
    def __init__(self, field: str, spec: LengthRange):
        super().__init__(field)
        self.minimum = spec.minimum
        self.maximum = spec.maximum

    def check(self, value: Any) -> list[ValidationError]:
        length = len(value) if hasattr(value, "__len__") else len(str(value))
        if self.minimum is not None and length < self.minimum:
            return self.error(
                f"is too short (minimum is {self.minimum} characters)", "TOO_SHORT"
            )
        if self.maximum is not None and length > self.maximum:
            return self.error(
                f"is too long (maximum is {self.maximum} characters)", "TOO_LONG"
            )
        return []


class CustomHookValidator:
    """Runs a whole-form hook once per form.

    The hook is a method name on the form or a callable taking the form, and
    returns an iterable of ValidationError (or None when valid).
    """

    def __init__(self, hook: str | Callable[[Any], Iterable[ValidationError] | None]):
        self.hook = hook

    @property
    def key(self) -> Hashable:
        return ("custom", self.hook)

    @property
    def name(self) -> str:
        if isinstance(self.hook, str):
            return self.hook
        return getattr(self.hook, "__name__", repr(self.hook))

    def validate(self, form: Any) -> list[ValidationError]:
        if isinstance(self.hook, str):
            result = getattr(form, self.hook)()
        else:
            result = self.hook(form)
        if result is None:
            return []
        errors = list(result)
        for error in errors:
            if not isinstance(error, ValidationError):
                raise TypeError(
                    f"Validation hook '{self.name}' returned {error!r}, "
                    "expected ValidationError"
                )
        return errors

    def __repr__(self) -> str:
        return f"CustomHookValidator({self.name!r})"
