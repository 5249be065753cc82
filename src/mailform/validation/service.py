"""Validation service for mailform.

Runs every validator of a form and collects all errors; a failing check
never stops the remaining ones.
"""

import logging
from collections.abc import Iterable
from typing import Any

from mailform.validation.types import ValidationError, ValidationResult, Validator

logger = logging.getLogger(__name__)


class ValidationService:
    """Runs validators against a form instance."""

    def validate(self, form: Any, validators: Iterable[Validator]) -> ValidationResult:
        """Validate a form against all validators.

        A validator that raises is reported as a VALIDATOR_ERROR on the form
        instead of aborting the run.
        """
        all_errors: list[ValidationError] = []

        for validator in validators:
            try:
                all_errors.extend(validator.validate(form))
            except Exception as e:
                logger.warning(
                    "Validator %r failed on %s: %s", validator, type(form).__name__, e
                )
                all_errors.append(
                    ValidationError(
                        message=f"Validator error: {e}",
                        code="VALIDATOR_ERROR",
                    )
                )

        return ValidationResult.from_errors(all_errors)
