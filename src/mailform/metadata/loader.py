"""Load form definitions from YAML files and build MailForm classes."""

import re
from pathlib import Path
from typing import Any

import yaml

from mailform.declarations.types import (
    CustomRule,
    Inclusion,
    LengthRange,
    MethodRef,
    Pattern,
    RequirePresence,
    ValidationSpec,
)
from mailform.errors import DeclarationError
from mailform.form import MailForm
from mailform.metadata.validator import validate_form_document


class FormLoader:
    """Loads form definitions from a YAML file or a directory of YAML files.

    Forms may extend each other through ``extends``; parents are built first
    regardless of file order. Forms without ``extends`` derive from ``base``,
    which is where validation hook methods referenced by ``{hook: name}``
    must live.
    """

    def __init__(self, path: Path, base: type[MailForm] = MailForm):
        self.path = path
        self.base = base
        self.documents: dict[str, dict[str, Any]] = {}
        self.forms: dict[str, type[MailForm]] = {}

    def load_all(self) -> None:
        """Load, validate and build every form."""
        self._load_documents()
        for name in self.documents:
            self._build(name, [])

    def _load_documents(self) -> None:
        if self.path.is_dir():
            files = sorted(self.path.glob("*.yaml"))
        else:
            files = [self.path]

        for yaml_file in files:
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if not data:
                continue

            issues = [i for i in validate_form_document(data, yaml_file) if i.severity == "error"]
            if issues:
                raise ValueError(
                    f"Invalid form definition {yaml_file}:\n"
                    + "\n".join(str(issue) for issue in issues)
                )

            name = data["form"]
            if name in self.documents:
                raise ValueError(f"Form '{name}' is defined more than once ({yaml_file})")
            self.documents[name] = data

    def _build(self, name: str, resolving: list[str]) -> type[MailForm]:
        """Build a form class, building its parent first."""
        if name in self.forms:
            return self.forms[name]
        if name in resolving:
            cycle = " -> ".join(resolving + [name])
            raise ValueError(f"Circular form inheritance: {cycle}")
        if name not in self.documents:
            raise ValueError(f"Form '{name}' is not defined")

        data = self.documents[name]
        parent = self.base
        if data.get("extends"):
            parent = self._build(data["extends"], resolving + [name])

        form_class = type(
            name,
            (parent,),
            {"__module__": __name__, "__doc__": data.get("description")},
        )
        self._declare(form_class, data)
        self.forms[name] = form_class
        return form_class

    def _declare(self, form_class: type[MailForm], data: dict[str, Any]) -> None:
        """Apply a form document through the declaration verbs."""
        for field_data in data.get("fields", []):
            role = field_data.get("role", "plain")
            form_class.attribute(
                field_data["name"],
                validate=self._resolve_validation(field_data.get("validate")),
                allow_blank=field_data.get("allowBlank", False),
                attachment=role == "attachment",
                honeypot=role == "honeypot",
            )

        for slot in ("subject", "sender", "recipients", "template"):
            if slot in data:
                getattr(form_class, slot)(self._resolve_computed(data[slot]))

        if data.get("headers"):
            form_class.headers(data["headers"])
        if data.get("append"):
            form_class.append(*data["append"])

    def _resolve_validation(self, data: Any) -> ValidationSpec | None:
        """Convert a ``validate`` entry to a validation spec."""
        if data is None or data is False:
            return None
        if data is True or data.get("presence"):
            return RequirePresence()
        if "pattern" in data:
            try:
                return Pattern(re.compile(data["pattern"]))
            except re.error as e:
                raise DeclarationError(f"Invalid pattern {data['pattern']!r}: {e}") from e
        if "inclusion" in data:
            return Inclusion(tuple(data["inclusion"]))
        if "length" in data:
            return LengthRange(
                minimum=data["length"].get("min"),
                maximum=data["length"].get("max"),
            )
        if "hook" in data:
            return CustomRule(data["hook"])
        raise DeclarationError(f"Unsupported validate entry: {data!r}")

    def _resolve_computed(self, value: Any) -> Any:
        """``{method: name}`` becomes a MethodRef; anything else is a literal."""
        if isinstance(value, dict):
            return MethodRef(value["method"])
        return value

    def get_form(self, name: str) -> type[MailForm] | None:
        """Get a built form class by name."""
        return self.forms.get(name)

    def list_forms(self) -> list[str]:
        """List all form names."""
        return list(self.forms.keys())
