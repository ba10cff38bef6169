"""Serves custom logos in place of the web bundle's branding assets.

A before_request hook checks GET/HEAD requests against the intercepted
paths of each logo role. A match is answered here (override, or original
bundle file when no override is set); everything else goes on to the host.
"""
from __future__ import annotations

from typing import Any

from flask import Response, current_app, jsonify, request, send_file

from custom_logo.services.errors import HashValidationError, LogoNotFoundError
from custom_logo.startup.context import get_context
from custom_logo.utils.logging import get_logger

LOG = get_logger("asset_interception")

INTERCEPT_METHODS = {"GET", "HEAD"}


def _intercept() -> Any:
    if request.method not in INTERCEPT_METHODS:
        return None
    interceptor = get_context(current_app).interceptor
    try:
        match = interceptor.match(request.path)
    except HashValidationError as exc:
        LOG.warning("rejected hashed asset path=%s reason=%s", request.path, exc)
        return jsonify({"error": "invalid_hash", "reason": str(exc)}), 400
    if match is None:
        return None
    try:
        asset = interceptor.resolve(match)
    except LogoNotFoundError:
        LOG.debug("intercepted asset missing role=%s path=%s", match.role.value, match.relative_path)
        return jsonify({"error": "not_found"}), 404
    LOG.debug("serving %s for role=%s path=%s", asset.source, match.role.value, request.path)
    try:
        resp: Response = send_file(str(asset.path), mimetype=asset.mimetype, conditional=True, max_age=0)
    except OSError as exc:
        LOG.error("failed serving %s asset path=%s err=%s", asset.source, asset.path, exc)
        return jsonify({"error": "io_error"}), 500
    resp.headers["Cache-Control"] = "no-cache"
    return resp


def register_asset_interception(app: Any) -> None:  # pragma: no cover - glue code
    if getattr(app, "_custom_logo_interception_hook", False):  # type: ignore[attr-defined]
        return
    app.before_request(_intercept)
    setattr(app, "_custom_logo_interception_hook", True)
    LOG.debug("asset interception hook registered")


__all__ = ["register_asset_interception"]
