"""State engine: pure functions over two checkbox state maps."""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .models import CheckboxState, ConfigPair


def has_state_changed(
    previous: Optional[Mapping[str, bool]],
    current: Mapping[str, bool],
) -> bool:
    """Return True if ``current`` differs from ``previous``.

    A missing previous state (first run) always counts as a change. Iteration
    order of either mapping is irrelevant.
    """
    if previous is None:
        return True
    if len(previous) != len(current):
        return True
    for key, value in current.items():
        if previous.get(key) != value:
            return True
    return False


def changed_keys(previous: Mapping[str, bool], current: Mapping[str, bool]) -> List[str]:
    """Keys whose effective value differs; absent keys count as unchecked.

    Order: keys of ``previous`` first, then keys only present in ``current``.
    """
    keys = list(previous.keys()) + [k for k in current.keys() if k not in previous]
    return [k for k in keys if bool(previous.get(k, False)) != bool(current.get(k, False))]


def apply_forced_checked(state: Mapping[str, bool], forced_keys: Iterable[str]) -> CheckboxState:
    """Reset every key to unchecked, then check the forced keys that exist.

    Forced keys unknown to ``state`` are ignored, never added. The input
    mapping is left untouched.
    """
    result: CheckboxState = {key: False for key in state}
    for key in forced_keys:
        if key in result:
            result[key] = True
    return result


def all_checked(state: Mapping[str, bool]) -> bool:
    """True only for a non-empty state where every box is checked."""
    return len(state) > 0 and all(value is True for value in state.values())


def initial_state(pairs: Iterable[ConfigPair]) -> CheckboxState:
    """All-unchecked state for freshly configured pairs."""
    return {pair.key: False for pair in pairs}


__all__ = [
    "has_state_changed",
    "changed_keys",
    "apply_forced_checked",
    "all_checked",
    "initial_state",
]
