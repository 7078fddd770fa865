"""Checkbox markdown codec.

Parses and renders task-list lines that carry a hidden key comment:

    - [ ] <!-- key --> label
    - [x] <!-- key --> label

The key is the stable identity of a checkbox across renders; labels may be
edited freely without losing state.
"""
from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Set

from .models import CheckboxItem, CheckboxState, ConfigPair

CHECKBOX_PATTERN = re.compile(
    r"^(\s*)- \[([ xX])\]\s*<!--\s*(.+?)\s*-->\s*(.*)$",
    re.MULTILINE,
)


def format_item_comment(key: str) -> str:
    """Return the hidden key comment for a checkbox line."""
    return f"<!-- {key} -->"


def parse_checkboxes(markdown: str) -> List[CheckboxItem]:
    """Parse every keyed checkbox line in ``markdown``, in document order.

    Example:
        >>> [i.key for i in parse_checkboxes("- [x] <!-- a --> Task A")]
        ['a']
    """
    items: List[CheckboxItem] = []
    for match in CHECKBOX_PATTERN.finditer(markdown):
        items.append(
            CheckboxItem(
                key=match.group(3).strip(),
                label=match.group(4).strip(),
                checked=match.group(2).lower() == "x",
                indentation=match.group(1) or "",
                full_match=match.group(0),
                index=match.start(),
            )
        )
    return items


def state_from_items(items: Iterable[CheckboxItem]) -> CheckboxState:
    """Build a state map from parsed items. Duplicate keys: last one wins."""
    state: CheckboxState = {}
    for item in items:
        state[item.key] = item.checked
    return state


def extract_state(markdown: str) -> CheckboxState:
    """Extract the current checkbox state directly from markdown."""
    return state_from_items(parse_checkboxes(markdown))


def extract_pairs(markdown: str) -> List[ConfigPair]:
    """Recover key/label pairs from an already rendered document."""
    return [ConfigPair(key=item.key, label=item.label) for item in parse_checkboxes(markdown)]


def render_checkboxes(pairs: Iterable[ConfigPair], checked_keys: Optional[Set[str]] = None) -> str:
    """Render one checkbox line per pair, in input order."""
    checked_keys = checked_keys or set()
    lines = []
    for pair in pairs:
        mark = "x" if pair.key in checked_keys else " "
        lines.append(f"- [{mark}] {format_item_comment(pair.key)} {pair.label}")
    return "\n".join(lines)


def rerender_checkboxes(pairs: Iterable[ConfigPair], state: Mapping[str, bool]) -> str:
    """Render pairs with the boxes ticked according to ``state``."""
    checked = {key for key, value in state.items() if value}
    return render_checkboxes(pairs, checked)


__all__ = [
    "CHECKBOX_PATTERN",
    "format_item_comment",
    "parse_checkboxes",
    "state_from_items",
    "extract_state",
    "extract_pairs",
    "render_checkboxes",
    "rerender_checkboxes",
]
