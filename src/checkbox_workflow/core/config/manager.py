"""
Settings management (YAML + environment, validated with JSON Schema).
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

from checkbox_workflow.core.exceptions import SettingsError
from checkbox_workflow.core.schemas import format_violations, validate_payload_safe
from checkbox_workflow.core.utils.merge import deep_merge
from checkbox_workflow.data import read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHECKBOX_WORKFLOW_"
SETTINGS_FILE_ENV = "CHECKBOX_WORKFLOW_SETTINGS"


class SettingsManager:
    """Load, merge, and validate checkbox-workflow settings.

    Sources (highest to lowest priority):
    1. Environment variables: ``CHECKBOX_WORKFLOW_<section>__<key>``
       (plus ``GITHUB_API_URL``, set by GitHub Actions runners)
    2. Settings file: ``--settings PATH`` or ``CHECKBOX_WORKFLOW_SETTINGS``
    3. Bundled defaults: ``checkbox_workflow/data/config/defaults.yaml``
    """

    def __init__(
        self,
        settings_path: Optional[Path] = None,
        *,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.env: Mapping[str, str] = os.environ if env is None else env
        if settings_path is None and self.env.get(SETTINGS_FILE_ENV):
            settings_path = Path(self.env[SETTINGS_FILE_ENV])
        self.settings_path = Path(settings_path) if settings_path else None

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: a settings file that was asked for must exist and parse.
        if not path.exists():
            raise SettingsError(f"Settings file not found: {path}", context={"path": str(path)})
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(
                f"Settings file must contain a YAML mapping: {path}",
                context={"path": str(path)},
            )
        return data

    # ---- environment overrides -------------------------------------------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(self.env.keys()):
            if not key.startswith(ENV_PREFIX) or key == SETTINGS_FILE_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = raw.split("__")
            if not raw or any(seg == "" for seg in segs):
                raise SettingsError(f"Malformed {ENV_PREFIX}* key: '{key}'")
            yield [seg.lower() for seg in segs], self._coerce_type(self.env[key])

    def _set_nested(self, root: Dict[str, Any], path: List[str], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        api_url = (self.env.get("GITHUB_API_URL") or "").strip()
        if api_url:
            self._set_nested(cfg, ["github", "api_url"], api_url)
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ---- loading -----------------------------------------------------------

    def load_settings(self, *, validate: bool = True) -> Dict[str, Any]:
        """Return the merged settings dictionary.

        Raises:
            SettingsError: If a source is unreadable or the merged result does
                not match ``settings.schema.yaml``.
        """
        # Copy: read_yaml() is cached and overrides mutate in place.
        cfg = copy.deepcopy(read_yaml("config", "defaults.yaml"))
        if self.settings_path is not None:
            logger.debug("Loading settings from %s", self.settings_path)
            cfg = deep_merge(cfg, self.load_yaml(self.settings_path))
        self.apply_env_overrides(cfg)

        if validate:
            violations = validate_payload_safe(cfg, "settings")
            if violations:
                raise SettingsError(
                    format_violations(violations, "settings"),
                    context={"violations": [v.format() for v in violations]},
                )
        return cfg


def load_settings(
    settings_path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Convenience wrapper around :class:`SettingsManager`."""
    return SettingsManager(settings_path, env=env).load_settings()


__all__ = ["SettingsManager", "load_settings", "ENV_PREFIX", "SETTINGS_FILE_ENV"]
