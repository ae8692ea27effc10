"""
Form Template Schema
====================

Read-only views of the form templates the engine binds onto.

Templates are created and stored by the template library; the engine only
reads them. Instances are frozen so a template borrowed for one extraction
cannot be mutated by it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class FieldType(str, Enum):
    """Input kinds a template field may declare."""
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    URL = "url"
    NUMBER = "number"
    DYNAMIC_LIST = "dynamic-list"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        """Unknown or missing field types are treated as plain text."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.TEXT


@dataclass(frozen=True)
class FieldDefinition:
    """A single declared field of a template."""
    name: str
    label: str = ""
    type: FieldType = FieldType.TEXT
    required: bool = False
    options: Tuple[str, ...] = ()
    placeholder: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldDefinition":
        """Build from a library record (camelCase or snake_case keys)."""
        return cls(
            name=str(data["name"]),
            label=str(data.get("label") or data["name"]),
            type=FieldType.parse(data.get("type", FieldType.TEXT.value)),
            required=bool(data.get("required", False)),
            options=tuple(str(o) for o in (data.get("options") or ())),
            placeholder=str(data.get("placeholder") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'label': self.label,
            'type': self.type.value,
            'required': self.required,
            'options': list(self.options),
            'placeholder': self.placeholder,
        }


@dataclass(frozen=True)
class FormTemplate:
    """
    A named, ordered list of field definitions for one document or
    procedure category.
    """
    id: str
    name: str
    type: str
    category: str = ""
    description: str = ""
    fields: Tuple[FieldDefinition, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        for definition in self.fields:
            if definition.name == name:
                return definition
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormTemplate":
        """Build from a library record."""
        return cls(
            id=str(data.get("id") or data["name"]),
            name=str(data["name"]),
            type=str(data.get("type") or ""),
            category=str(data.get("category") or ""),
            description=str(data.get("description") or ""),
            fields=tuple(FieldDefinition.from_dict(f) for f in (data.get("fields") or ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'category': self.category,
            'description': self.description,
            'fields': [f.to_dict() for f in self.fields],
        }
