"""Form definitions in YAML: loading and schema validation."""

from mailform.metadata.loader import FormLoader
from mailform.metadata.validator import (
    ValidationIssue,
    validate_form_document,
    validate_form_file,
    validate_forms_dir,
)

__all__ = [
    "FormLoader",
    "ValidationIssue",
    "validate_form_document",
    "validate_form_file",
    "validate_forms_dir",
]
