"""
metadata/validator.py: JSON Schema validation for form definition YAML files.

Usage:
    from mailform.metadata.validator import validate_forms_dir, validate_form_file

    issues = validate_forms_dir(Path("forms"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from mailform.metadata.schema import FORM_SCHEMA

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """A single validation finding for a form YAML file."""

    file: Path
    message: str
    path: str = ""          # location within the document, e.g. "fields[0]/validate"
    severity: str = "error"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.file}{loc}: {self.message}"


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def validate_form_document(doc: Any, file: Path) -> list[ValidationIssue]:
    """Validate an already-parsed form document against the form schema."""
    validator = Draft202012Validator(FORM_SCHEMA)
    issues = [
        ValidationIssue(file=file, message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(doc), key=lambda e: [str(p) for p in e.path])
    ]

    # Duplicate names inside one document are legal but almost always a typo
    fields = doc.get("fields") if isinstance(doc, dict) else None
    if isinstance(fields, list):
        seen: set[str] = set()
        for field in fields:
            name = field.get("name") if isinstance(field, dict) else None
            if not isinstance(name, str):
                continue
            if name in seen:
                issues.append(
                    ValidationIssue(
                        file=file,
                        message=f"Field '{name}' is declared more than once",
                        path="fields",
                        severity="warning",
                    )
                )
            seen.add(name)
    return issues


def validate_form_file(yaml_path: Path) -> list[ValidationIssue]:
    """
    Validate a single form YAML file.

    Returns:
        A list of :class:`ValidationIssue` objects (empty on success).
    """
    try:
        with yaml_path.open() as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        return [ValidationIssue(file=yaml_path, message=f"YAML parse error: {exc}")]

    if raw is None:
        return [
            ValidationIssue(file=yaml_path, message="File is empty or contains only whitespace")
        ]

    return validate_form_document(raw, yaml_path)


def validate_forms_dir(forms_dir: Path, *, strict: bool = False) -> list[ValidationIssue]:
    """
    Validate every ``*.yaml`` file in *forms_dir*.

    Args:
        forms_dir: Directory holding form definitions.
        strict:    If ``True``, warnings are escalated to errors.
    """
    if not forms_dir.is_dir():
        return [
            ValidationIssue(
                file=forms_dir,
                message=f"Forms directory does not exist: {forms_dir}",
            )
        ]

    all_issues: list[ValidationIssue] = []
    for yaml_file in sorted(forms_dir.glob("*.yaml")):
        file_issues = validate_form_file(yaml_file)
        if strict:
            for issue in file_issues:
                if issue.severity == "warning":
                    issue.severity = "error"
        all_issues.extend(file_issues)

    logger.debug("Validated %s: %d issue(s)", forms_dir, len(all_issues))
    return all_issues
