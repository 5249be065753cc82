"""Declarative mail forms.

Usage:
    class ContactForm(MailForm, recipients=["ops@example.com"]):
        name = Field(validate=True)
        email = Field(validate=re.compile(r"^\\S+@\\S+$"))
        message = Field()
        screenshot = Field(attachment=True, validate="interface_bug")
        nickname = Field(honeypot=True)

        def interface_bug(self):
            if self.message == "bug" and self.screenshot is None:
                return [ValidationError("Screenshot is required", field="screenshot")]

    form = ContactForm(request.POST, request=request)
    form.create()      # validates, checks honeypots, delivers once

The same declarations can be made with the class verbs
(ContactForm.attribute("name", validate=True), ContactForm.subject(...)),
as long as no instance has been created yet.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from mailform.declarations.registry import (
    ConfigurationBuilder,
    TypeConfiguration,
)
from mailform.declarations.types import (
    FieldRole,
    ValidationSpec,
    humanize,
    read_field,
    validation_spec,
)
from mailform.delivery.lifecycle import DeliveryLifecycle, build_descriptor
from mailform.delivery.types import DeliveryResult, DeliveryState, NotificationDescriptor
from mailform.errors import DeclarationError
from mailform.validation.types import ValidationError, ValidationResult
from mailform.validation.validators import CustomHookValidator

logger = logging.getLogger(__name__)

_SLOT_OPTIONS = {
    "subject": "subject",
    "sender": "sender",
    "from_": "sender",
    "recipients": "recipients",
    "to": "recipients",
    "template": "template",
}


class Field:
    """Class-body placeholder for a field declaration.

    Replaced by a FieldAccessor when the class is created.
    """

    def __init__(
        self,
        validate: Any = None,
        *,
        allow_blank: bool = False,
        attachment: bool = False,
        honeypot: bool = False,
    ):
        self.validate = validate
        self.allow_blank = allow_blank
        self.role = _role(attachment, honeypot)


class FieldAccessor:
    """Read/write accessor backed by the instance's field values."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._values.get(self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        instance._values[self.name] = value


def _role(attachment: bool, honeypot: bool) -> FieldRole:
    if attachment and honeypot:
        raise DeclarationError("A field cannot be both an attachment and a honeypot")
    if attachment:
        return FieldRole.ATTACHMENT
    if honeypot:
        return FieldRole.HONEYPOT
    return FieldRole.PLAIN


def _default_subject(form: Any) -> str:
    return humanize(type(form).__name__)


def _default_sender(form: Any) -> Any:
    return getattr(form, "email", None)


class MailForm:
    """Base class for declarative mail forms.

    Subclasses declare fields and mail slots; instances hold field values
    and run the creation lifecycle.
    """

    _builder: ClassVar[ConfigurationBuilder]
    _reserved_api: ClassVar[frozenset[str]] = frozenset()

    request: Any = None

    def __init_subclass__(cls, **options: Any) -> None:
        slot_options = {k: options.pop(k) for k in list(options) if k in _SLOT_OPTIONS}
        headers = options.pop("headers", None)
        append = options.pop("append", None)
        super().__init_subclass__(**options)

        parents = [base for base in cls.__bases__ if issubclass(base, MailForm)]
        if len(parents) > 1:
            raise DeclarationError(f"{cls.__name__} cannot extend more than one form")
        cls._builder = ConfigurationBuilder(cls.__qualname__, parent=parents[0]._builder)

        placeholders = [
            (name, value) for name, value in vars(cls).items() if isinstance(value, Field)
        ]
        for name, placeholder in placeholders:
            delattr(cls, name)
            cls.declare(
                [name],
                placeholder.role,
                validation_spec(placeholder.validate),
                placeholder.allow_blank,
            )

        for option, value in slot_options.items():
            cls._builder.set_slot(_SLOT_OPTIONS[option], value)
        if headers is not None:
            cls.headers(headers)
        if append is not None:
            cls.append(*([append] if isinstance(append, str) else append))

    # =========================================================================
    # Declaration verbs
    # =========================================================================

    @classmethod
    def declare(
        cls,
        names: Sequence[str],
        role: FieldRole = FieldRole.PLAIN,
        validation: ValidationSpec | None = None,
        allow_blank: bool = False,
    ) -> None:
        """Declare fields with one role and one validation spec."""
        for name in names:
            if name in cls._reserved_api:
                raise DeclarationError(
                    f"{cls.__name__}: '{name}' clashes with the MailForm API"
                )
        cls._builder.declare(names, role, validation, allow_blank)

        for name in names:
            if hasattr(cls, name):
                if not isinstance(getattr(cls, name), FieldAccessor):
                    logger.debug(
                        "%s.%s already defined, not generating an accessor",
                        cls.__name__,
                        name,
                    )
                continue
            setattr(cls, name, FieldAccessor(name))

    @classmethod
    def attribute(
        cls,
        *names: str,
        validate: Any = None,
        allow_blank: bool = False,
        attachment: bool = False,
        honeypot: bool = False,
    ) -> None:
        """Declare form fields.

        All plain fields are included in the mail body; honeypot fields never
        are.

        Options:
            validate: True checks presence, a compiled regex checks format, a
                list checks inclusion, a range checks length, a method name or
                callable registers a whole-form hook. Presence is checked too
                unless allow_blank is given (never for hooks).
            attachment: The field holds a file attached to the mail.
            honeypot: The field must stay blank; a value marks the form as spam.
        """
        cls.declare(
            list(names), _role(attachment, honeypot), validation_spec(validate), allow_blank
        )

    attributes = attribute

    @classmethod
    def subject(cls, value: Any) -> None:
        """Mail subject: a string, a MethodRef or a callable taking the form."""
        cls._builder.set_slot("subject", value)

    @classmethod
    def sender(cls, value: Any) -> None:
        """Mail sender. Defaults to the form's ``email`` value."""
        cls._builder.set_slot("sender", value)

    from_ = sender

    @classmethod
    def recipients(cls, value: Any) -> None:
        """One address, a list of addresses, a MethodRef or a callable."""
        cls._builder.set_slot("recipients", value)

    to = recipients

    @classmethod
    def template(cls, value: Any) -> None:
        """Template used to render the mail body. Defaults to "default"."""
        cls._builder.set_slot("template", value)

    @classmethod
    def headers(cls, headers: Mapping[str, Any]) -> None:
        """Extra mail headers, merged over the parent's by key."""
        cls._builder.merge_headers(headers)

    @classmethod
    def append(cls, *names: str) -> None:
        """Request values appended to the mail body (e.g. remote_ip, user_agent).

        The request must be passed to the constructor for these to resolve.
        """
        cls._builder.append(names)

    @classmethod
    def configuration(cls) -> TypeConfiguration:
        """Resolve (once) and return the class configuration.

        After the first call no further declarations are accepted.
        """
        config = cls._builder.resolve()
        if not cls.__dict__.get("_hooks_checked"):
            for validator in config.validators:
                if isinstance(validator, CustomHookValidator) and isinstance(
                    validator.hook, str
                ):
                    if not callable(getattr(cls, validator.hook, None)):
                        raise DeclarationError(
                            f"{cls.__name__}: validation hook '{validator.hook}' "
                            "is not a method of the form"
                        )
            cls._hooks_checked = True
        return config

    # =========================================================================
    # Instances
    # =========================================================================

    def __init__(
        self,
        values: Mapping[str, Any] | None = None,
        request: Any = None,
        **fields: Any,
    ):
        config = type(self).configuration()
        self._values: dict[str, Any] = {}
        self._errors: ValidationResult | None = None
        self._state = DeliveryState.INITIALIZED
        self.request = request

        data = dict(values or {})
        data.update(fields)
        declared = set(config.field_names())
        for name, value in data.items():
            if name not in declared:
                raise TypeError(f"{type(self).__name__} has no field '{name}'")
            self.write(name, value)

    def read(self, name: str) -> Any:
        return read_field(self, name)

    def write(self, name: str, value: Any) -> None:
        setattr(self, name, value)

    @property
    def state(self) -> DeliveryState:
        return self._state

    @property
    def errors(self) -> list[ValidationError]:
        """Errors from the last validation run (empty before any run)."""
        if self._errors is None:
            return []
        return list(self._errors.errors)

    def lifecycle(self) -> DeliveryLifecycle:
        """Lifecycle used by create(); override to pick a dispatcher per form."""
        return DeliveryLifecycle()

    def validate(self) -> ValidationResult:
        return self.lifecycle().validate(self)

    def is_valid(self) -> bool:
        return self.validate().valid

    def is_spam(self) -> bool:
        return self.lifecycle().spam_guard.is_spam(self)

    def not_spam(self) -> bool:
        return not self.is_spam()

    def create(self, lifecycle: DeliveryLifecycle | None = None) -> bool:
        """Validate, check honeypots and deliver once. Returns True if delivered."""
        return self.create_result(lifecycle).delivered

    deliver = create

    def create_result(self, lifecycle: DeliveryLifecycle | None = None) -> DeliveryResult:
        return (lifecycle or self.lifecycle()).create(self)

    def deliver_now(self, lifecycle: DeliveryLifecycle | None = None) -> DeliveryResult:
        """Deliver without validation or spam checks."""
        return (lifecycle or self.lifecycle()).force_deliver(self)

    def to_descriptor(self) -> NotificationDescriptor:
        return build_descriptor(self)

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"<{type(self).__name__} {values}>"


MailForm._builder = ConfigurationBuilder("MailForm")
MailForm._builder.set_slot("subject", _default_subject)
MailForm._builder.set_slot("sender", _default_sender)
MailForm._builder.set_slot("template", "default")
MailForm._reserved_api = frozenset(name for name in dir(MailForm) if not name.startswith("_"))
