"""Per-class declaration registry.

Each form class owns a ConfigurationBuilder that records only its own
declarations and links to its parent's builder. The effective configuration
is resolved once, root to leaf, into an immutable TypeConfiguration:

- attributes / attachments / honeypots / appended request fields accumulate
  (parent entries first, a child never removes any)
- subject / sender / recipients / template are overridden by the most
  specific class that sets them
- headers merge by key, child winning on collision
"""

from __future__ import annotations

import keyword
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from mailform.declarations.types import (
    ComputedValue,
    FieldDeclaration,
    FieldRole,
    ValidationSpec,
    computed,
)
from mailform.errors import DeclarationError
from mailform.validation.dispatcher import ValidationDispatcher, merge_validators
from mailform.validation.types import Validator

SLOT_NAMES = ("subject", "sender", "recipients", "template")
RESERVED_NAMES = frozenset(SLOT_NAMES + ("headers", "append"))


@dataclass(frozen=True)
class TypeConfiguration:
    """Resolved, read-only configuration of one form class."""

    attributes: tuple[FieldDeclaration, ...] = ()
    attachments: tuple[FieldDeclaration, ...] = ()
    honeypots: tuple[FieldDeclaration, ...] = ()
    appended_request_fields: tuple[str, ...] = ()
    subject: ComputedValue | None = None
    sender: ComputedValue | None = None
    recipients: ComputedValue | None = None
    template: ComputedValue | None = None
    headers: Mapping[str, ComputedValue] = field(
        default_factory=lambda: MappingProxyType({})
    )
    validators: tuple[Validator, ...] = ()

    def bucket(self, role: FieldRole) -> tuple[FieldDeclaration, ...]:
        if role is FieldRole.ATTACHMENT:
            return self.attachments
        if role is FieldRole.HONEYPOT:
            return self.honeypots
        return self.attributes

    def field_names(self, role: FieldRole | None = None) -> tuple[str, ...]:
        """Distinct declared names in declaration order."""
        if role is None:
            declarations = self.attributes + self.attachments + self.honeypots
        else:
            declarations = self.bucket(role)
        return tuple(dict.fromkeys(d.name for d in declarations))

    def resolve(self, slot: str, instance: Any) -> Any:
        """Resolve an override slot against a form instance."""
        if slot not in SLOT_NAMES:
            raise ValueError(f"Unknown slot '{slot}'")
        value = getattr(self, slot)
        if value is None:
            return None
        return value.resolve(instance)

    def resolve_headers(self, instance: Any) -> dict[str, Any]:
        return {name: value.resolve(instance) for name, value in self.headers.items()}


class ConfigurationBuilder:
    """Collects one class's own declarations until it is resolved.

    Once resolve() has run (on this builder or a descendant) the builder is
    frozen and further declarations raise DeclarationError.
    """

    def __init__(self, owner: str, parent: ConfigurationBuilder | None = None):
        self.owner = owner
        self.parent = parent
        self.declarations: list[FieldDeclaration] = []
        self.validators: list[Validator] = []
        self.appended: list[str] = []
        self.slots: dict[str, ComputedValue] = {}
        self.headers: dict[str, ComputedValue] = {}
        self.dispatcher = ValidationDispatcher()
        self._resolved: TypeConfiguration | None = None
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lineage(self) -> list[ConfigurationBuilder]:
        """Builders from the root class down to this one."""
        chain: list[ConfigurationBuilder] = []
        builder: ConfigurationBuilder | None = self
        while builder is not None:
            chain.append(builder)
            builder = builder.parent
        chain.reverse()
        return chain

    def declared_role(self, name: str) -> FieldRole | None:
        for builder in self.lineage():
            for declaration in builder.declarations:
                if declaration.name == name:
                    return declaration.role
        return None

    # -------------------------------------------------------------------------
    # Declaration verbs
    # -------------------------------------------------------------------------

    def declare(
        self,
        names: Sequence[str],
        role: FieldRole = FieldRole.PLAIN,
        validation: ValidationSpec | None = None,
        allow_blank: bool = False,
    ) -> list[FieldDeclaration]:
        """Record one declaration call and its validators."""
        self._check_writable()
        if not names:
            raise DeclarationError(f"{self.owner}: declare() needs at least one field name")

        for name in names:
            self._check_name(name, role)

        declarations = [
            FieldDeclaration(name=name, role=role, validation=validation, allow_blank=allow_blank)
            for name in names
        ]
        self.declarations.extend(declarations)
        self.validators.extend(
            self.dispatcher.register_validation(list(names), validation, allow_blank)
        )
        return declarations

    def set_slot(self, slot: str, value: Any) -> None:
        self._check_writable()
        if slot not in SLOT_NAMES:
            raise DeclarationError(f"{self.owner}: unknown slot '{slot}'")
        self.slots[slot] = computed(value)

    def merge_headers(self, headers: Mapping[str, Any]) -> None:
        self._check_writable()
        if not isinstance(headers, Mapping):
            raise DeclarationError(f"{self.owner}: headers must be a mapping, got {headers!r}")
        for name, value in headers.items():
            self.headers[str(name)] = computed(value)

    def append(self, names: Iterable[str]) -> None:
        self._check_writable()
        self.appended.extend(names)

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(self) -> TypeConfiguration:
        """Resolve the effective configuration once and freeze the lineage."""
        if self._resolved is not None:
            return self._resolved

        chain = self.lineage()
        buckets: dict[FieldRole, list[FieldDeclaration]] = {role: [] for role in FieldRole}
        appended: list[str] = []
        slots: dict[str, ComputedValue] = {}
        headers: dict[str, ComputedValue] = {}

        for builder in chain:
            for declaration in builder.declarations:
                buckets[declaration.role].append(declaration)
            appended.extend(builder.appended)
            slots.update(builder.slots)
            headers.update(builder.headers)

        self._resolved = TypeConfiguration(
            attributes=tuple(buckets[FieldRole.PLAIN]),
            attachments=tuple(buckets[FieldRole.ATTACHMENT]),
            honeypots=tuple(buckets[FieldRole.HONEYPOT]),
            appended_request_fields=tuple(appended),
            subject=slots.get("subject"),
            sender=slots.get("sender"),
            recipients=slots.get("recipients"),
            template=slots.get("template"),
            headers=MappingProxyType(headers),
            validators=merge_validators(builder.validators for builder in chain),
        )
        for builder in chain:
            builder._frozen = True
        return self._resolved

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def _check_writable(self) -> None:
        if self._frozen:
            raise DeclarationError(
                f"{self.owner} is already in use; declarations must happen "
                "at class-definition time"
            )

    def _check_name(self, name: str, role: FieldRole) -> None:
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise DeclarationError(f"{self.owner}: '{name}' is not a valid field name")
        if name.startswith("_"):
            raise DeclarationError(f"{self.owner}: field names cannot start with '_' ({name})")
        if name in RESERVED_NAMES:
            raise DeclarationError(f"{self.owner}: '{name}' is a reserved name")
        existing = self.declared_role(name)
        if existing is not None and existing is not role:
            raise DeclarationError(
                f"{self.owner}: '{name}' is already declared as {existing.value}"
            )
