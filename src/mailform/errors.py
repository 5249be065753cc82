"""Exception types for mailform.

Validation failures and spam rejections are not exceptions: they are gate
outcomes reported through DeliveryResult. Only programming mistakes and
developer-facing faults are raised.
"""


class MailFormError(Exception):
    """Base class for all mailform errors."""


class DeclarationError(MailFormError, ValueError):
    """Raised when a form class declares fields or slots incorrectly."""


class HoneypotIntegrityFault(MailFormError, RuntimeError):
    """A honeypot field was filled in while running in development mode.

    Honeypot fields must be hidden from real users by the presentation layer.
    In development a filled honeypot means the UI is leaking the field, so it
    is surfaced loudly instead of silently dropping the submission.
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"The honeypot field '{field}' was supposed to be blank")


class LifecycleError(MailFormError, RuntimeError):
    """Raised when a form is pushed through the creation lifecycle twice."""
