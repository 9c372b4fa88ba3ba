"""Unified config: server (bind, static assets, webhook) and readings (source, paths).

Defaults: loaded from kiosk/config/config.yaml.example (single source of truth, shipped with the package).
Environment overrides are applied last: PORT, KIOSK_SOURCE, KIOSK_READINGS_DIR, KIOSK_SNAPSHOT_PATH.
Relative paths resolve against the working directory.
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

PACKAGE_DIR = Path(__file__).resolve().parent.parent
EXAMPLE_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml.example"
DEFAULT_STATIC_DIR = PACKAGE_DIR / "web"

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults. No code-level defaults."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        with open(EXAMPLE_CONFIG_PATH, encoding="utf-8") as f:
            _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from config file."""
    return _deep_merge(_load_example_config(), cfg)


def _resolve_path(value: Any) -> Path:
    p = Path(os.path.expandvars(os.path.expanduser(str(value))))
    if not p.is_absolute():
        p = Path.cwd() / p
    return p


def _parse_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid port {value!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range: {port}")
    return port


def read_config(config_path: Optional[str] = None) -> Tuple[dict, str]:
    """Load YAML config. Returns (config, resolved_path).

    Path: argument, else KIOSK_CONFIG, else config/config.yaml in the working directory; falls back to the example
    when the file does not exist.
    """
    config_path = config_path or os.environ.get("KIOSK_CONFIG", "config/config.yaml")
    if not Path(config_path).exists():
        config_path = str(EXAMPLE_CONFIG_PATH)
    config_path = str(Path(config_path).resolve())
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return config, config_path


def get_readings_config(
    config: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return readings config: source, readings_dir (Path), snapshot_path (Path)."""
    env = os.environ if environ is None else environ
    merged = _merged_config(config or {})
    r = merged.get("readings") or {}
    source = env.get("KIOSK_SOURCE") or r.get("source")
    return {
        "source": str(source).strip().lower() if source else None,
        "readings_dir": _resolve_path(env.get("KIOSK_READINGS_DIR") or r.get("readings_dir")),
        "snapshot_path": _resolve_path(env.get("KIOSK_SNAPSHOT_PATH") or r.get("snapshot_path")),
    }


def get_server_config(
    config: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return server config: host, port (PORT env wins), static_dir (Path), webhook_enabled (bool).

    webhook_enabled null in config means: enabled only when readings.source is directory.
    """
    env = os.environ if environ is None else environ
    merged = _merged_config(config or {})
    s = merged.get("server") or {}
    port = env.get("PORT") or s.get("port")
    static_dir = s.get("static_dir")
    webhook = s.get("webhook_enabled")
    if webhook is None:
        webhook = get_readings_config(config, env)["source"] == "directory"
    return {
        "host": s.get("host") or "0.0.0.0",
        "port": _parse_port(port),
        "static_dir": _resolve_path(static_dir) if static_dir else DEFAULT_STATIC_DIR,
        "webhook_enabled": bool(webhook),
    }
