# Rev 1.0.0
# flowdesk/utils/config.py
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from flowdesk.utils.paths import config_dir

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# first hit wins; the REACT_APP_ names keep an existing web-client .env usable
_URL_KEYS = ("FLOWDESK_SUPABASE_URL", "SUPABASE_URL", "REACT_APP_SUPABASE_URL")
_KEY_KEYS = ("FLOWDESK_SUPABASE_KEY", "SUPABASE_ANON_KEY", "SUPABASE_KEY", "REACT_APP_SUPABASE_ANON_KEY")


def _first(env: Mapping[str, str], keys) -> str:
    for k in keys:
        v = (env.get(k) or "").strip()
        if v:
            return v
    return ""


@dataclass(frozen=True)
class BackendConfig:
    url: str = ""
    key: str = ""
    timeout: float = DEFAULT_TIMEOUT

    @property
    def is_complete(self) -> bool:
        return bool(self.url and self.key)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> "BackendConfig":
        """
        Read the backend endpoint and access key once at start.
        Missing values are not an error here; the first fetch reports them.
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        raw_timeout = (env.get("FLOWDESK_HTTP_TIMEOUT") or "").strip()
        timeout = DEFAULT_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                log.warning("Ignoring invalid FLOWDESK_HTTP_TIMEOUT=%r", raw_timeout)
            if timeout <= 0:
                timeout = DEFAULT_TIMEOUT

        cfg = cls(url=_first(env, _URL_KEYS), key=_first(env, _KEY_KEYS), timeout=timeout)
        if not cfg.is_complete:
            log.warning("Supabase URL/key not configured; first fetch will fail")
        return cfg


# ---- UI settings (window size, last view) ----

_DEFAULTS: Dict[str, Any] = {
    "main_window": {
        "width": 1280,
        "height": 800,
    },
    "ui": {
        "view_mode": "List",
        "sidebar_open": True,
        "diagnostics_dock_visible": False,
    },
}


def settings_file() -> Path:
    return config_dir() / "settings.json"


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or settings_file()
    merged = json.loads(json.dumps(_DEFAULTS))
    if not path.exists():
        return merged
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        log.warning("Unreadable settings at %s; using defaults", path)
        return merged
    if not isinstance(data, dict):
        return merged
    for section, values in data.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
