"""Per-application bundle of the custom logo collaborators."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from custom_logo import config as app_config
from custom_logo.services.distribution import DistributionReport, LogoDistributor
from custom_logo.services.interception import AssetInterceptor
from custom_logo.services.override_store import OverrideStore
from custom_logo.services.roles import LogoRole, RoleTable, default_role_table
from custom_logo.startup.lifecycle import LogoLifecycle

EXTENSION_KEY = "custom_logo"


@dataclass
class LogoContext:
    roles: RoleTable
    store: OverrideStore
    distributor: LogoDistributor
    interceptor: AssetInterceptor
    lifecycle: LogoLifecycle
    push_enabled: bool
    intercept_enabled: bool
    dashboard_url: str

    def redistribute(self, *roles: LogoRole) -> Optional[DistributionReport]:
        if not self.push_enabled:
            return None
        return self.distributor.distribute(roles or None)


def build_context(roles: Optional[RoleTable] = None) -> LogoContext:
    """Assemble a context from environment configuration."""
    table = roles or default_role_table()
    store = OverrideStore(app_config.store_dir(), table)
    web_root = app_config.web_path()
    originals = app_config.originals_dir() if app_config.backup_originals() else None
    distributor = LogoDistributor(store, web_root, table, originals_dir=originals)
    interceptor = AssetInterceptor(store, table, web_root, url_prefix=app_config.url_prefix())
    push = app_config.push_enabled()
    return LogoContext(
        roles=table,
        store=store,
        distributor=distributor,
        interceptor=interceptor,
        lifecycle=LogoLifecycle(distributor, push_enabled=push),
        push_enabled=push,
        intercept_enabled=app_config.intercept_enabled(),
        dashboard_url=app_config.dashboard_url(),
    )


def get_context(app: Any) -> LogoContext:
    extensions = getattr(app, "extensions", None) or {}
    ctx = extensions.get(EXTENSION_KEY)
    if ctx is None:
        raise RuntimeError("custom_logo is not initialised on this app; call init_app first")
    return ctx


__all__ = ["EXTENSION_KEY", "LogoContext", "build_context", "get_context"]
