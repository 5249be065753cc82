"""mailform: declarative mail forms.

Declare fields, validations, honeypots and mail slots on a class; creating
an instance validates it, checks the honeypots and dispatches one
notification.
"""

from mailform.declarations.types import (
    Computation,
    CustomRule,
    FieldRole,
    Inclusion,
    LengthRange,
    Literal,
    MethodRef,
    Pattern,
    RequirePresence,
)
from mailform.delivery import (
    DeliveryLifecycle,
    DeliveryResult,
    DeliveryState,
    DispatcherRegistry,
    NotificationDescriptor,
    OutboxDispatcher,
    dispatcher,
    outbox,
    register_builtin_dispatchers,
)
from mailform.errors import (
    DeclarationError,
    HoneypotIntegrityFault,
    LifecycleError,
    MailFormError,
)
from mailform.form import Field, MailForm
from mailform.settings import MailFormSettings
from mailform.spam import SpamGuard
from mailform.validation import (
    ValidationError,
    ValidationResult,
    ValidatorRegistry,
    register_builtin_validators,
)

register_builtin_validators()
register_builtin_dispatchers()

__all__ = [
    # Declarations
    "Computation",
    "CustomRule",
    "Field",
    "FieldRole",
    "Inclusion",
    "LengthRange",
    "Literal",
    "MailForm",
    "MethodRef",
    "Pattern",
    "RequirePresence",
    # Validation
    "ValidationError",
    "ValidationResult",
    "ValidatorRegistry",
    "register_builtin_validators",
    # Delivery
    "DeliveryLifecycle",
    "DeliveryResult",
    "DeliveryState",
    "DispatcherRegistry",
    "NotificationDescriptor",
    "OutboxDispatcher",
    "SpamGuard",
    "dispatcher",
    "outbox",
    "register_builtin_dispatchers",
    # Settings and errors
    "DeclarationError",
    "HoneypotIntegrityFault",
    "LifecycleError",
    "MailFormError",
    "MailFormSettings",
]
