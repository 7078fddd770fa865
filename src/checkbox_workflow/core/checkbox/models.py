"""Checkbox data models.

Provides immutable dataclasses for parsed checkbox items, configured
key/label pairs and the state metadata embedded in rendered documents.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

# Mapping of checkbox key -> checked. Absent keys compare as unchecked.
CheckboxState = Dict[str, bool]


@dataclass(frozen=True, slots=True)
class CheckboxItem:
    """A checkbox line parsed from markdown.

    Attributes:
        key: Stable identity from the hidden ``<!-- key -->`` comment
        label: Visible label text (trimmed)
        checked: Whether the box is ticked (``x`` or ``X``)
        indentation: Leading whitespace captured verbatim
        full_match: The matched source text
        index: Offset of the match in the source document
    """

    key: str
    label: str
    checked: bool
    indentation: str = ""
    full_match: str = ""
    index: int = 0


@dataclass(frozen=True, slots=True)
class ConfigPair:
    """A key/label pair from the user configuration."""

    key: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "label": self.label}


@dataclass(frozen=True, slots=True)
class StateMetadata:
    """Payload stored in the hidden state comment.

    ``id`` scopes the metadata to one action so several checklists can share
    a comment thread.
    """

    id: str
    previous_state: CheckboxState = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StateMetadata:
        return cls(id=data["id"], previous_state=dict(data["previousState"]))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "previousState": dict(self.previous_state)}


__all__ = ["CheckboxState", "CheckboxItem", "ConfigPair", "StateMetadata"]
