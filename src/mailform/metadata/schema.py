"""JSON Schema (Draft 2020-12) for form definition YAML files."""

from typing import Any

IDENTIFIER = "^[A-Za-z][A-Za-z0-9_]*$"

FORM_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "https://mailform.dev/schemas/form.schema.json",
    "title": "Mail form definition",
    "type": "object",
    "required": ["form"],
    "additionalProperties": False,
    "properties": {
        "form": {"type": "string", "pattern": IDENTIFIER},
        "extends": {"type": "string", "pattern": IDENTIFIER},
        "description": {"type": "string"},
        "subject": {"$ref": "#/$defs/computed"},
        "sender": {"$ref": "#/$defs/computed"},
        "recipients": {
            "oneOf": [
                {"$ref": "#/$defs/computed"},
                {"type": "array", "items": {"type": "string"}, "minItems": 1},
            ]
        },
        "template": {"$ref": "#/$defs/computed"},
        "headers": {
            "type": "object",
            "additionalProperties": {"type": ["string", "number", "boolean"]},
        },
        "append": {
            "type": "array",
            "items": {"type": "string", "pattern": IDENTIFIER},
        },
        "fields": {"type": "array", "items": {"$ref": "#/$defs/field"}},
    },
    "$defs": {
        "computed": {
            "oneOf": [
                {"type": "string"},
                {
                    "type": "object",
                    "required": ["method"],
                    "additionalProperties": False,
                    "properties": {"method": {"type": "string", "pattern": IDENTIFIER}},
                },
            ]
        },
        "field": {
            "type": "object",
            "required": ["name"],
            "additionalProperties": False,
            "properties": {
                "name": {"type": "string", "pattern": IDENTIFIER},
                "role": {"enum": ["plain", "attachment", "honeypot"]},
                "allowBlank": {"type": "boolean"},
                "validate": {"$ref": "#/$defs/validate"},
            },
        },
        "validate": {
            "oneOf": [
                {"type": "boolean"},
                {
                    "type": "object",
                    "minProperties": 1,
                    "maxProperties": 1,
                    "additionalProperties": False,
                    "properties": {
                        "presence": {"const": True},
                        "pattern": {"type": "string"},
                        "inclusion": {"type": "array", "minItems": 1},
                        "length": {
                            "type": "object",
                            "minProperties": 1,
                            "additionalProperties": False,
                            "properties": {
                                "min": {"type": "integer", "minimum": 0},
                                "max": {"type": "integer", "minimum": 0},
                            },
                        },
                        "hook": {"type": "string", "pattern": IDENTIFIER},
                    },
                },
            ]
        },
    },
}
