"""Delivery types for mailform.

- DeliveryState: where a form is in its creation lifecycle
- NotificationDescriptor: what to send, built fresh for each delivery
- GateResult / DeliveryResult: outcomes returned by the lifecycle
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from mailform.validation.types import ValidationResult


class DeliveryState(Enum):
    INITIALIZED = "initialized"
    VALIDATING = "validating"
    REJECTED_SPAM = "rejected_spam"
    REJECTED_INVALID = "rejected_invalid"
    ACCEPTED = "accepted"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "delivery_failed"

    @property
    def is_rejected(self) -> bool:
        return self in (DeliveryState.REJECTED_SPAM, DeliveryState.REJECTED_INVALID)

    @property
    def is_created(self) -> bool:
        """True once the form passed both gates."""
        return self in (
            DeliveryState.ACCEPTED,
            DeliveryState.DELIVERED,
            DeliveryState.DELIVERY_FAILED,
        )


@dataclass(frozen=True)
class NotificationDescriptor:
    """Everything the notification dispatcher needs to send one mail.

    Attributes:
        subject: Resolved subject line
        sender: Resolved sender address
        recipients: One address or a tuple of addresses
        template: Template name used to render the body
        headers: Extra mail headers
        body: Attribute values plus appended request values, by name
        attachments: (field name, file) pairs for non-blank attachment fields
        form_name: Name of the form class that built the descriptor
    """

    subject: Any = None
    sender: Any = None
    recipients: str | tuple[str, ...] | None = None
    template: str | None = None
    headers: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    body: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    attachments: tuple[tuple[str, Any], ...] = ()
    form_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        recipients = self.recipients
        if isinstance(recipients, tuple):
            recipients = list(recipients)
        return {
            "form": self.form_name,
            "subject": self.subject,
            "sender": self.sender,
            "recipients": recipients,
            "template": self.template,
            "headers": dict(self.headers),
            "body": dict(self.body),
            "attachments": [name for name, _ in self.attachments],
        }


@dataclass
class GateResult:
    """Outcome of the before-create gates.

    Attributes:
        state: ACCEPTED, REJECTED_SPAM or REJECTED_INVALID
        validation: Validation result the gate was evaluated against
    """

    state: DeliveryState
    validation: ValidationResult

    @property
    def passed(self) -> bool:
        return self.state is DeliveryState.ACCEPTED


@dataclass
class DeliveryResult:
    """Outcome of a creation attempt or forced delivery."""

    state: DeliveryState
    validation: ValidationResult | None = None
    descriptor: NotificationDescriptor | None = None

    @property
    def delivered(self) -> bool:
        return self.state is DeliveryState.DELIVERED
