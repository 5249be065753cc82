"""Creation lifecycle for mail forms.

    INITIALIZED -> VALIDATING -> REJECTED_SPAM
                              -> REJECTED_INVALID
                              -> ACCEPTED -> DELIVERED
                                          -> DELIVERY_FAILED

create() runs validate -> gate -> deliver. A form that reached ACCEPTED is
never dispatched again through create(); force_deliver() skips both gates
and always dispatches.
"""

import logging
from types import MappingProxyType
from typing import Any

from mailform.declarations.types import FieldRole
from mailform.delivery.dispatchers import DispatcherRegistry, DispatchFn
from mailform.delivery.request import extract
from mailform.delivery.types import (
    DeliveryResult,
    DeliveryState,
    GateResult,
    NotificationDescriptor,
)
from mailform.errors import HoneypotIntegrityFault, LifecycleError
from mailform.settings import MailFormSettings
from mailform.spam import SpamGuard
from mailform.validation.service import ValidationService
from mailform.validation.types import ValidationResult
from mailform.validation.validators import is_blank

logger = logging.getLogger(__name__)


def build_descriptor(form: Any) -> NotificationDescriptor:
    """Resolve a form's mail configuration into a NotificationDescriptor.

    Slots are resolved against the form here, never at declaration time.
    Honeypot fields never reach the body.
    """
    config = type(form).configuration()

    body: dict[str, Any] = {
        name: form.read(name) for name in config.field_names(FieldRole.PLAIN)
    }
    body.update(extract(form.request, config.appended_request_fields))

    attachments = []
    for name in config.field_names(FieldRole.ATTACHMENT):
        value = form.read(name)
        if not is_blank(value):
            attachments.append((name, value))

    recipients = config.resolve("recipients", form)
    if isinstance(recipients, (list, tuple, set, frozenset)):
        recipients = tuple(recipients)

    return NotificationDescriptor(
        subject=config.resolve("subject", form),
        sender=config.resolve("sender", form),
        recipients=recipients,
        template=config.resolve("template", form),
        headers=MappingProxyType(config.resolve_headers(form)),
        body=MappingProxyType(body),
        attachments=tuple(attachments),
        form_name=type(form).__name__,
    )


class DeliveryLifecycle:
    """Coordinates one form's creation attempt.

    Lifecycle:
    1. Validate (every validator runs, all errors collected)
    2. Spam gate (a filled honeypot vetoes creation silently)
    3. Validation gate (any error vetoes creation)
    4. Deliver (build descriptor, hand it to the dispatcher)
    """

    def __init__(
        self,
        dispatcher: DispatchFn | str | None = None,
        settings: MailFormSettings | None = None,
        validation_service: ValidationService | None = None,
    ):
        self.settings = settings or MailFormSettings.from_env()
        self._dispatcher = dispatcher if dispatcher is not None else self.settings.dispatcher
        self.validation_service = validation_service or ValidationService()
        self.spam_guard = SpamGuard(development=self.settings.is_development)

    @property
    def dispatcher(self) -> DispatchFn:
        return self.resolve_dispatcher()

    def resolve_dispatcher(self) -> DispatchFn:
        """Return the dispatcher callable, looking up a registered name on first use.

        Raises:
            ValueError: If the dispatcher name is not registered
        """
        if isinstance(self._dispatcher, str):
            self._dispatcher = DispatcherRegistry.get(self._dispatcher)
        return self._dispatcher

    def validate(self, form: Any) -> ValidationResult:
        """Run every validator of the form's class and store the result on it."""
        result = self.validation_service.validate(
            form, type(form).configuration().validators
        )
        form._errors = result
        return result

    def gate(self, form: Any, validation: ValidationResult | None = None) -> GateResult:
        """Evaluate the before-create gates.

        Raises:
            HoneypotIntegrityFault: In development, for a filled honeypot
        """
        if validation is None:
            validation = self.validate(form)

        if self.spam_guard.is_spam(form):
            return GateResult(state=DeliveryState.REJECTED_SPAM, validation=validation)
        if not validation.valid:
            return GateResult(state=DeliveryState.REJECTED_INVALID, validation=validation)
        return GateResult(state=DeliveryState.ACCEPTED, validation=validation)

    def deliver(self, form: Any) -> DeliveryResult:
        """Build the descriptor and dispatch it.

        Dispatcher errors are not retried; they propagate to the caller.
        """
        dispatch = self.dispatcher
        descriptor = build_descriptor(form)
        try:
            dispatch(descriptor)
        except Exception as e:
            logger.error("Delivery of %s failed: %s", descriptor.form_name, e)
            raise
        logger.debug("Delivered %s to %r", descriptor.form_name, descriptor.recipients)
        return DeliveryResult(state=DeliveryState.DELIVERED, descriptor=descriptor)

    def create(self, form: Any) -> DeliveryResult:
        """Run the guarded creation sequence.

        Rejections are returned, not raised. A form can be created once;
        rejected forms may be corrected and created again.

        Raises:
            LifecycleError: If the form was already created
            HoneypotIntegrityFault: In development, for a filled honeypot
            ValueError: If the dispatcher name is not registered
        """
        name = type(form).__name__
        if form.state.is_created:
            raise LifecycleError(f"{name} was already created ({form.state.value})")
        self.resolve_dispatcher()

        self._transition(form, DeliveryState.VALIDATING)
        try:
            gate = self.gate(form)
        except HoneypotIntegrityFault:
            self._transition(form, DeliveryState.INITIALIZED)
            raise
        self._transition(form, gate.state)

        if gate.state is DeliveryState.REJECTED_SPAM:
            logger.info("%s rejected as spam", name)
            return DeliveryResult(state=gate.state, validation=gate.validation)
        if gate.state is DeliveryState.REJECTED_INVALID:
            logger.info("%s rejected with %d error(s)", name, len(gate.validation.errors))
            return DeliveryResult(state=gate.state, validation=gate.validation)

        try:
            result = self.deliver(form)
        except Exception:
            self._transition(form, DeliveryState.DELIVERY_FAILED)
            raise
        self._transition(form, DeliveryState.DELIVERED)
        result.validation = gate.validation
        return result

    def force_deliver(self, form: Any) -> DeliveryResult:
        """Dispatch without validation or spam checks. Does not change form state."""
        logger.debug("Forcing delivery of %s", type(form).__name__)
        return self.deliver(form)

    def _transition(self, form: Any, state: DeliveryState) -> None:
        logger.debug("%s: %s -> %s", type(form).__name__, form.state.value, state.value)
        form._state = state
