"""
Attribute schema for provider resources: which attributes exist, which are required,
computed, force replacement, or sensitive. Sensitive values are redacted everywhere
they are shown (API responses, plans, logs).
"""
from dataclasses import dataclass
from typing import Any, Callable

SENSITIVE_MARKER = "(sensitive value)"

TYPE_STRING = "string"


@dataclass(frozen=True)
class Attribute:
    type: str
    description: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    default: Any = None
    force_new: bool = False
    sensitive: bool = False
    # (value, key) -> (warnings, errors)
    validate_func: Callable | None = None

    def describe(self) -> dict:
        return {
            "type": self.type,
            "description": self.description,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
            "default": self.default,
            "force_new": self.force_new,
            "sensitive": self.sensitive,
        }


def input_names(schema: dict[str, Attribute]) -> list[str]:
    """Attributes the user configures (required or optional), in schema order."""
    return [name for name, attr in schema.items() if not attr.computed]


def apply_defaults(schema: dict[str, Attribute], raw: dict) -> dict:
    """Copy of raw with defaults filled in for unset optional attributes."""
    values = dict(raw)
    for name, attr in schema.items():
        if attr.computed:
            continue
        if values.get(name) is None and attr.default is not None:
            values[name] = attr.default
    return values


def redact(schema: dict[str, Attribute], attributes: dict) -> dict:
    """Replace sensitive attribute values with SENSITIVE_MARKER. Unset values stay None."""
    out = {}
    for name, value in attributes.items():
        attr = schema.get(name)
        if attr is not None and attr.sensitive and value is not None:
            out[name] = SENSITIVE_MARKER
        else:
            out[name] = value
    return out


def describe_schema(schema: dict[str, Attribute]) -> dict:
    return {name: attr.describe() for name, attr in schema.items()}
