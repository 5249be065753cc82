"""mailform validation system.

- Validators: presence, format, inclusion, length, custom hook
- ValidatorRegistry: spec type -> validator factory
- ValidationDispatcher: declaration call -> validators
- ValidationService: runs validators and collects every error

Usage:
    from mailform.validation import register_builtin_validators

    # At application startup (done on `import mailform`)
    register_builtin_validators()
"""

from mailform.validation.dispatcher import ValidationDispatcher, merge_validators
from mailform.validation.registry import ValidatorRegistry, register_builtin_validators
from mailform.validation.service import ValidationService
from mailform.validation.types import ValidationError, ValidationResult, Validator
from mailform.validation.validators import (
    BaseValidator,
    CustomHookValidator,
    FormatValidator,
    InclusionValidator,
    LengthValidator,
    PresenceValidator,
    is_blank,
)

__all__ = [
    # Types
    "ValidationError",
    "ValidationResult",
    "Validator",
    # Validators
    "BaseValidator",
    "CustomHookValidator",
    "FormatValidator",
    "InclusionValidator",
    "LengthValidator",
    "PresenceValidator",
    "is_blank",
    # Dispatch
    "ValidationDispatcher",
    "ValidatorRegistry",
    "merge_validators",
    "register_builtin_validators",
    # Services
    "ValidationService",
]
