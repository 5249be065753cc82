"""Translate a declaration's validation spec into validators.

Dispatch rules, per declaration call:
- RequirePresence: presence check on every field
- value rules (Pattern, Inclusion, LengthRange, registered extras): one
  validator per field, blank values pass
- CustomRule: a single whole-form hook for the call and nothing else
- unless allow_blank, every field of a non-custom call also gets a
  presence check
"""

from collections.abc import Iterable, Sequence

from mailform.declarations.types import CustomRule, RequirePresence, ValidationSpec
from mailform.validation.registry import ValidatorRegistry
from mailform.validation.types import Validator
from mailform.validation.validators import CustomHookValidator, PresenceValidator


class ValidationDispatcher:
    """Builds validators for declaration calls.

    Stateless; the declaring class keeps the validators it gets back, keyed
    by ``Validator.key`` so later registrations replace earlier ones.
    """

    def register_validation(
        self,
        field_names: Sequence[str],
        spec: ValidationSpec | None,
        allow_blank: bool = False,
    ) -> list[Validator]:
        """Return the validators for one declaration call.

        Args:
            field_names: Names declared by the call
            spec: Validation spec carried by the call, or None
            allow_blank: Skip the automatic presence check

        Returns:
            Validators in registration order (empty when spec is None)
        """
        if spec is None:
            return []

        if isinstance(spec, CustomRule):
            # The hook reports its own errors, so no per-field rules for this call
            return [CustomHookValidator(spec.hook)]

        validators: list[Validator] = []
        for name in field_names:
            if not isinstance(spec, RequirePresence):
                validators.append(ValidatorRegistry.create(name, spec))
            if not allow_blank:
                validators.append(PresenceValidator(name))
        return validators


def merge_validators(groups: Iterable[Iterable[Validator]]) -> tuple[Validator, ...]:
    """Flatten validator groups, letting later validators replace same-key ones."""
    merged: dict = {}
    for group in groups:
        for validator in group:
            merged[validator.key] = validator
    return tuple(merged.values())
