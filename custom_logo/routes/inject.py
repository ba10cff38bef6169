"""Route & override registration.

Called from startup to register the admin blueprint and, in intercept mode,
the request hook that shadows the bundle's branding assets.
"""
from __future__ import annotations
from typing import Any

from .logo_admin import register_logo_blueprint
from custom_logo.routes.overrides.asset_interception import register_asset_interception


def register_all(app: Any, intercept: bool = True) -> None:
    register_logo_blueprint(app)
    if intercept:
        register_asset_interception(app)

__all__ = ["register_all"]
