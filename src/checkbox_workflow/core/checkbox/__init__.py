"""Checkbox codecs and state engine.

- markdown: parse/render ``- [x] <!-- key --> label`` lines
- comments: section markers and the hidden state metadata comment
- config: relaxed-JSON checkbox configuration and forced-key parsing
- state: change detection and forced-state application
"""
from __future__ import annotations

from .comments import (
    attach_metadata,
    decode_state_metadata,
    encode_state_metadata,
    extract_previous_state,
    has_state_metadata,
    render_message,
    restore_template,
)
from .config import extract_config_pairs, load_config_pairs, parse_config, parse_forced_keys
from .markdown import (
    extract_pairs,
    extract_state,
    parse_checkboxes,
    render_checkboxes,
    rerender_checkboxes,
    state_from_items,
)
from .models import CheckboxItem, CheckboxState, ConfigPair, StateMetadata
from .state import (
    all_checked,
    apply_forced_checked,
    changed_keys,
    has_state_changed,
    initial_state,
)

__all__ = [
    "CheckboxItem",
    "CheckboxState",
    "ConfigPair",
    "StateMetadata",
    "parse_checkboxes",
    "state_from_items",
    "extract_state",
    "extract_pairs",
    "render_checkboxes",
    "rerender_checkboxes",
    "render_message",
    "restore_template",
    "attach_metadata",
    "encode_state_metadata",
    "decode_state_metadata",
    "extract_previous_state",
    "has_state_metadata",
    "parse_config",
    "extract_config_pairs",
    "load_config_pairs",
    "parse_forced_keys",
    "has_state_changed",
    "changed_keys",
    "apply_forced_checked",
    "all_checked",
    "initial_state",
]
