"""Application initialization / wiring.

Orchestrates: collaborator construction from config, route registration,
and the startup distribution pass.
"""
from __future__ import annotations
from typing import Any, Optional

from custom_logo import config as app_config
from custom_logo.routes.inject import register_all as register_routes
from custom_logo.services.roles import RoleTable
from custom_logo.startup.context import EXTENSION_KEY, LogoContext, build_context
from custom_logo.utils.logging import get_logger

LOG = get_logger("startup")


def init_app(app: Any, roles: Optional[RoleTable] = None, run_startup: bool = True) -> LogoContext:
    existing = getattr(app, "extensions", {}).get(EXTENSION_KEY)
    if existing is not None:
        LOG.debug("init_app already applied; reusing context")
        return existing
    LOG.debug("init_app starting")
    if not app_config.mode_is_valid():
        LOG.warning("Unknown CUSTOM_LOGO_MODE; falling back to %s", app_config.mode())
    ctx = build_context(roles)
    app.extensions[EXTENSION_KEY] = ctx
    register_routes(app, intercept=ctx.intercept_enabled)
    LOG.debug("Routes registered (intercept=%s)", ctx.intercept_enabled)
    if run_startup:
        ctx.lifecycle.on_start()
    LOG.info("Custom logo wiring complete config=%s", app_config.summarize_runtime_config())
    return ctx


__all__ = ["init_app"]
