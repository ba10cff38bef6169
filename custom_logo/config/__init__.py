"""Configuration accessors for the custom logo plugin.

Centralizes environment variable parsing & defaults. Every accessor reads the
environment on call so tests (and operators restarting workers) can change
values without reloading modules.
"""
from __future__ import annotations

import os
from functools import lru_cache

APP_NAME = "custom_logo"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Custom icon and banner overrides for a static web bundle"

DEFAULT_STORE_DIRNAME = "CustomLogo"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_URL_PREFIX = "/web"
DEFAULT_DASHBOARD_URL = "/web/#/dashboard/plugins"
ORIGINALS_SUFFIX = ".originals"

MODE_INTERCEPT = "intercept"
MODE_PUSH = "push"
MODE_BOTH = "both"
MODES = (MODE_INTERCEPT, MODE_PUSH, MODE_BOTH)
DEFAULT_MODE = MODE_INTERCEPT

_TRUE = {"1", "true", "yes", "on"}


def _raw_env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _stripped_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_bool(name: str, default: bool = False) -> bool:
    raw = _raw_env(name, str(default).lower())
    if raw is None:
        return default
    return raw.lower() in _TRUE


def _resolve_config_relative(raw: str) -> str:
    if os.path.isabs(raw):
        return raw
    config_root = _stripped_env("CUSTOM_LOGO_CONFIG_ROOT")
    if config_root:
        return os.path.join(config_root, raw)
    return raw


def store_dir() -> str:
    """Directory holding the uploaded override images (CUSTOM_LOGO_DIR)."""
    raw = _stripped_env("CUSTOM_LOGO_DIR") or DEFAULT_STORE_DIRNAME
    return _resolve_config_relative(raw)


def web_path() -> str | None:
    """Root of the host's static web bundle (CUSTOM_LOGO_WEB_PATH), if known."""
    return _stripped_env("CUSTOM_LOGO_WEB_PATH")


def url_prefix() -> str:
    """URL prefix the web bundle is served under.

    Environment Variable: CUSTOM_LOGO_URL_PREFIX
    An empty value means the bundle is served from the site root.
    """
    raw = _raw_env("CUSTOM_LOGO_URL_PREFIX", DEFAULT_URL_PREFIX) or ""
    raw = raw.strip().rstrip("/")
    if raw and not raw.startswith("/"):
        raw = "/" + raw
    return raw


def mode() -> str:
    raw = (_raw_env("CUSTOM_LOGO_MODE", DEFAULT_MODE) or "").strip().lower()
    if raw in MODES:
        return raw
    return DEFAULT_MODE


def mode_is_valid() -> bool:
    raw = (_raw_env("CUSTOM_LOGO_MODE", DEFAULT_MODE) or "").strip().lower()
    return raw in MODES


def push_enabled() -> bool:
    return mode() in (MODE_PUSH, MODE_BOTH)


def intercept_enabled() -> bool:
    return mode() in (MODE_INTERCEPT, MODE_BOTH)


def backup_originals() -> bool:
    """Whether push mode keeps a pristine copy of each file it overwrites.

    Environment Variable: CUSTOM_LOGO_BACKUP_ORIGINALS (default true)
    Without backups a deleted override cannot be undone in the web bundle.
    """
    return env_bool("CUSTOM_LOGO_BACKUP_ORIGINALS", default=True)


def originals_dir() -> str:
    raw = _stripped_env("CUSTOM_LOGO_ORIGINALS_DIR")
    if raw:
        return _resolve_config_relative(raw)
    return store_dir().rstrip("/\\") + ORIGINALS_SUFFIX


def dashboard_url() -> str:
    return _stripped_env("CUSTOM_LOGO_DASHBOARD_URL") or DEFAULT_DASHBOARD_URL


def log_level_name() -> str:
    return (_raw_env("CUSTOM_LOGO_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()


@lru_cache(maxsize=1)
def metadata() -> dict:
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "description": APP_DESCRIPTION,
    }


def summarize_runtime_config() -> dict:
    return {
        "store_dir": store_dir(),
        "web_path": web_path(),
        "url_prefix": url_prefix(),
        "mode": mode(),
        "originals_dir": originals_dir() if backup_originals() else None,
        "log_level": log_level_name(),
    }


__all__ = [
    "APP_NAME",
    "APP_VERSION",
    "APP_DESCRIPTION",
    "MODE_INTERCEPT",
    "MODE_PUSH",
    "MODE_BOTH",
    "MODES",
    "env_bool",
    "store_dir",
    "web_path",
    "url_prefix",
    "mode",
    "mode_is_valid",
    "push_enabled",
    "intercept_enabled",
    "backup_originals",
    "originals_dir",
    "dashboard_url",
    "log_level_name",
    "metadata",
    "summarize_runtime_config",
]
