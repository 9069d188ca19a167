from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class FieldDefinition:
    """Lightweight schema descriptor used by the Dash modals and /api/schema."""

    field: str
    label: str
    kind: str = "text"  # text | number | percent | year | select | checkbox | textarea
    default: Any = ""
    options: List[str] | None = None
    min_value: float | None = None
    max_value: float | None = None
    step: float | None = None
    required: bool = False
    help: str | None = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "kind": self.kind,
            "default": self.default,
            "options": self.options or [],
            "min": self.min_value,
            "max": self.max_value,
            "step": self.step,
            "required": self.required,
            "help": self.help,
        }


@dataclass
class FormModel:
    """Container for a form schema plus option labels."""

    name: str
    title: str
    fields: List[FieldDefinition]
    option_labels: Dict[str, Dict[str, str]] = field(default_factory=dict)

    def field_names(self) -> List[str]:
        return [item.field for item in self.fields]

    def get(self, name: str) -> FieldDefinition:
        for item in self.fields:
            if item.field == name:
                return item
        raise KeyError(name)

    def blank_values(self) -> Dict[str, Any]:
        return {item.field: item.default for item in self.fields}

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "fields": [item.to_payload() for item in self.fields],
            "optionLabels": self.option_labels,
        }
