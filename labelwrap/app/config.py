from __future__ import annotations

from typing import Any, Dict, Tuple
import os
import json
import pathlib
import logging

from ..core.models import DEFAULT_BARCODE, DEFAULT_LABEL_COLUMNS
from ..core.wrapper import LOOK_BACK_WINDOW

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "LABELWRAP_WIDTH": DEFAULT_LABEL_COLUMNS,
    "LABELWRAP_LOOK_BACK": LOOK_BACK_WINDOW,
    "LABELWRAP_BARCODE": DEFAULT_BARCODE,
    "LABELWRAP_HEADER": "",
}

_INT_KEYS = ("LABELWRAP_WIDTH", "LABELWRAP_LOOK_BACK", "LABELWRAP_BARCODE")


def _parse_env_line(line: str) -> Tuple[str, str] | None:
    raw = line.strip()
    if not raw or raw.startswith("#"):
        return None
    if raw.lower().startswith("export "):
        raw = raw[7:].lstrip()
    if "=" not in raw:
        return None
    key, value = raw.split("=", 1)
    key = key.strip()
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    if not key:
        return None
    return key, value


def _env_file_candidates() -> list:
    candidates = []
    explicit = os.getenv("LABELWRAP_ENV_PATH")
    if isinstance(explicit, str) and explicit.strip():
        candidates.append(explicit.strip())

    repo_root = pathlib.Path(__file__).resolve().parent.parent.parent
    cwd = pathlib.Path.cwd()
    for base in (repo_root, cwd):
        candidates.extend([str(base / ".env"), str(base / ".env.local")])

    if os.name == "nt":
        for var in ("ProgramData", "APPDATA"):
            base = os.getenv(var, "")
            if base:
                candidates.append(os.path.join(base, "labelwrap", "env"))
    else:
        candidates.append("/etc/labelwrap/env")

    # Same file may be reachable from repo root and CWD
    unique = []
    for c in candidates:
        if c not in unique:
            unique.append(c)
    return unique


def load_env_from_files(override: bool = False) -> None:
    """Load environment variables from common .env locations.

    - Does not override existing vars unless override=True
    - Supports simple KEY=VALUE and export KEY=VALUE lines, with optional quotes
    """
    for path in _env_file_candidates():
        if not os.path.exists(path):
            continue
        loaded_any = False
        try:
            with open(path, "r", encoding="utf-8") as fh:
                for line in fh:
                    parsed = _parse_env_line(line)
                    if not parsed:
                        continue
                    key, value = parsed
                    if override or not os.getenv(key):
                        os.environ[key] = value
                        loaded_any = True
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Failed to load env file {path}: {e}")
            continue
        if loaded_any:
            logger.info(f"Loaded environment from: {path}")


def get_config_path() -> str:
    env_path = os.getenv("LABELWRAP_CONFIG_PATH")
    if isinstance(env_path, str) and env_path.strip():
        return os.path.expanduser(env_path.strip())

    xdg = (os.getenv("XDG_CONFIG_HOME") or "").strip() or "~/.config"
    user_cfg = os.path.join(os.path.expanduser(xdg), "labelwrap", "config.json")
    if os.name != "nt":
        sys_cfg = "/etc/labelwrap/config.json"
        is_root = getattr(os, "geteuid", lambda: -1)() == 0
        user_readable = os.path.exists(user_cfg) and os.access(user_cfg, os.R_OK)
        sys_readable = os.path.exists(sys_cfg) and os.access(sys_cfg, os.R_OK)
        # Services running as root prefer the system config
        if is_root and sys_readable:
            return sys_cfg
        if not user_readable and sys_readable:
            return sys_cfg
    return user_cfg


def _read_json_file(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {path}: expected a JSON object")
        return {}
    return {str(k): v for k, v in data.items()}


def _coerce_int(key: str, value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        logger.warning(f"Ignoring non-integer {key}={value!r}")
        return fallback
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-integer {key}={value!r}")
        return fallback


def load_config() -> Dict[str, Any]:
    """Return the effective configuration.

    Priority: environment variables override the JSON config file, which
    overrides the built-in defaults.
    """
    load_env_from_files(override=False)
    file_cfg = _read_json_file(get_config_path())

    cfg: Dict[str, Any] = dict(DEFAULTS)
    for key in DEFAULTS:
        if key in file_cfg and file_cfg[key] is not None:
            cfg[key] = file_cfg[key]
        env_value = os.getenv(key)
        if isinstance(env_value, str) and env_value.strip():
            cfg[key] = env_value.strip()

    for key in _INT_KEYS:
        cfg[key] = _coerce_int(key, cfg[key], DEFAULTS[key])
    cfg["LABELWRAP_HEADER"] = str(cfg.get("LABELWRAP_HEADER") or "").strip()
    return cfg
