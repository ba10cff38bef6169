"""Custom logo admin blueprint.

Routes:
    POST   /logo/upload          -> multipart upload (Logo, BannerDark, BannerLight)
    GET    /logo/status          -> which overrides are currently set
    GET    /logo/<role>          -> override image bytes
    DELETE /logo/<role>          -> remove override and redistribute

Access control is left to the host (these routes are expected to sit behind
its admin guard).
"""
from __future__ import annotations

from html import escape
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request
from flask_babel import gettext as _babel_gettext
from werkzeug.datastructures import FileStorage

from custom_logo.services.errors import LogoError, LogoNotFoundError, LogoPermissionError
from custom_logo.services.roles import LogoRole, RoleSpec
from custom_logo.startup.context import LogoContext, get_context
from custom_logo.utils.logging import get_logger

LOG = get_logger("logo_admin")

bp = Blueprint("custom_logo", __name__, url_prefix="/logo")


def _(message, **kwargs):  # type: ignore
    """gettext that tolerates apps without Flask-Babel configured."""
    try:
        return _babel_gettext(message, **kwargs)
    except Exception:
        pass
    if kwargs:
        try:
            return message % kwargs
        except Exception:
            return message
    return message


_ERROR_MESSAGES = {
    "override_missing": "No custom image is set for this role.",
    "role_unknown": "Unknown logo role.",
    "permission_denied": "The server does not have write access. Please check the permissions and ensure the application has sufficient rights.",
    "io_error": "The image could not be stored.",
}

_MESSAGE_PAGE = (
    "<html><head></head><body>{message}<br><a href='{url}'>{back}</a></body></html>"
)
_REDIRECT_PAGE = (
    "<html><head><meta http-equiv='refresh' content='0;url={url}' /></head>"
    "<body>{body}</body></html>"
)


def _ctx() -> LogoContext:
    return get_context(current_app)


def _json_error(code: str, status: int = 400, *, message: Optional[str] = None):
    payload: Dict[str, Any] = {"error": code}
    template = _ERROR_MESSAGES.get(code)
    final_message = message or (_(template) if template else None)
    if final_message:
        payload["message"] = final_message
    return jsonify(payload), status


def _json_error_for(exc: LogoError):
    if isinstance(exc, LogoNotFoundError):
        return _json_error("override_missing", 404)
    if isinstance(exc, LogoPermissionError):
        return _json_error("permission_denied", 403)
    return _json_error("io_error", 500, message=str(exc))


def _html(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/html")


def _spec_for(slug: str) -> Optional[RoleSpec]:
    return _ctx().roles.by_slug(slug)


def _uploaded_parts(ctx: LogoContext) -> List[Tuple[RoleSpec, FileStorage]]:
    parts = []
    for spec in ctx.roles:
        storage = request.files.get(spec.form_field)
        # Browsers send an empty part for untouched file inputs.
        if storage is None or _is_empty(storage):
            continue
        parts.append((spec, storage))
    return parts


def _is_empty(storage: FileStorage) -> bool:
    stream = storage.stream
    try:
        pos = stream.tell()
        stream.seek(0, 2)
        size = stream.tell()
        stream.seek(pos)
    except (AttributeError, OSError):  # pragma: no cover - non seekable stream
        return False
    return size <= 0


def _push_saved(ctx: LogoContext, saved: List[LogoRole]) -> None:
    if not saved:
        return
    report = ctx.redistribute(*saved)
    if report is not None and not report.ok:
        LOG.warning("upload distribution had failures: %s", report.failures)


@bp.route("/upload", methods=["POST"])
def upload():
    ctx = _ctx()
    dashboard = escape(ctx.dashboard_url, quote=True)
    back = escape(_("Return to dashboard"))
    saved: List[LogoRole] = []
    try:
        for spec, storage in _uploaded_parts(ctx):
            ctx.store.save(spec.role, storage.stream)
            saved.append(spec.role)
    except LogoPermissionError as exc:
        LOG.error("upload failed: permission denied path=%s", exc.path)
        message = escape(_(_ERROR_MESSAGES["permission_denied"]))
        return _html(_MESSAGE_PAGE.format(message=message, url=dashboard, back=back), 403)
    except LogoError as exc:
        LOG.error("upload failed: %s path=%s", exc, exc.path)
        message = escape(_("Upload failed: %(error)s", error=str(exc)))
        return _html(_MESSAGE_PAGE.format(message=message, url=dashboard, back=back), 500)
    finally:
        # Parts stored before a failure still reach the bundle.
        _push_saved(ctx, saved)
    LOG.info("upload complete roles=%s", ",".join(r.value for r in saved) or "-")
    return _html(_REDIRECT_PAGE.format(url=dashboard, body=escape(_("Redirecting..."))))


@bp.route("/status", methods=["GET"])
def status():
    resp = jsonify(_ctx().store.status())
    resp.headers["Cache-Control"] = "no-store"
    return resp


@bp.route("/<slug>", methods=["GET"])
def get_logo(slug: str):
    spec = _spec_for(slug)
    if spec is None:
        return _json_error("role_unknown", 404)
    try:
        data = _ctx().store.read(spec.role)
    except LogoError as exc:
        return _json_error_for(exc)
    resp = Response(data, mimetype="image/png")
    resp.headers["Cache-Control"] = "no-cache"
    return resp


@bp.route("/<slug>", methods=["DELETE"])
def delete_logo(slug: str):
    spec = _spec_for(slug)
    if spec is None:
        return _json_error("role_unknown", 404)
    ctx = _ctx()
    try:
        ctx.store.delete(spec.role)
    except LogoError as exc:
        if not isinstance(exc, LogoNotFoundError):
            LOG.error("delete failed role=%s err=%s path=%s", spec.slug, exc, exc.path)
        return _json_error_for(exc)
    payload: Dict[str, Any] = {"status": "deleted", "role": spec.slug}
    report = ctx.redistribute(spec.role)
    if report is not None:
        payload["distribution"] = report.summary()
    return jsonify(payload)


def register_logo_blueprint(app: Any) -> None:
    if not getattr(app, "_custom_logo_bp", None):
        app.register_blueprint(bp)
        setattr(app, "_custom_logo_bp", bp)


__all__ = ["register_logo_blueprint", "bp"]
