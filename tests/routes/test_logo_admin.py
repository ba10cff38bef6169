"""Tests for the /logo admin blueprint."""
from __future__ import annotations

import io

import pytest
from flask import Flask

from custom_logo.services import override_store
from custom_logo.services.errors import LogoIOError, LogoPermissionError
from custom_logo.startup.context import get_context
from custom_logo.startup.wiring import init_app


def _make_app(monkeypatch, tmp_path, mode="intercept"):
    web = tmp_path / "web"
    (web / "assets" / "img").mkdir(parents=True)
    (web / "assets" / "img" / "icon-transparent.png").write_bytes(b"orig-icon")
    (web / "icon-transparent.abc123.png").write_bytes(b"orig-icon-hashed")
    (web / "assets" / "img" / "banner-dark.png").write_bytes(b"orig-dark")
    monkeypatch.setenv("CUSTOM_LOGO_DIR", str(tmp_path / "config" / "CustomLogo"))
    monkeypatch.setenv("CUSTOM_LOGO_WEB_PATH", str(web))
    monkeypatch.setenv("CUSTOM_LOGO_MODE", mode)
    monkeypatch.setenv("CUSTOM_LOGO_DASHBOARD_URL", "/web/#/dashboard/plugins")
    monkeypatch.delenv("CUSTOM_LOGO_ORIGINALS_DIR", raising=False)
    monkeypatch.delenv("CUSTOM_LOGO_BACKUP_ORIGINALS", raising=False)
    monkeypatch.delenv("CUSTOM_LOGO_CONFIG_ROOT", raising=False)
    app = Flask(__name__)
    app.config["SECRET_KEY"] = "logo-test"
    init_app(app)
    return app


@pytest.fixture
def logo_app(monkeypatch, tmp_path):
    return _make_app(monkeypatch, tmp_path)


@pytest.fixture
def client(logo_app):
    return logo_app.test_client()


def _upload(client, **parts):
    data = {name: (io.BytesIO(payload), f"{name}.png") for name, payload in parts.items()}
    return client.post("/logo/upload", data=data, content_type="multipart/form-data")


def test_status_initially_empty(client):
    resp = client.get("/logo/status")

    assert resp.status_code == 200
    assert resp.get_json() == {"iconSet": False, "bannerDarkSet": False, "bannerLightSet": False}
    assert resp.headers["Cache-Control"] == "no-store"


def test_upload_redirects_to_dashboard(client):
    resp = _upload(client, BannerDark=b"DARK")

    assert resp.status_code == 200
    assert resp.mimetype == "text/html"
    assert b"http-equiv='refresh'" in resp.data
    assert b"/web/#/dashboard/plugins" in resp.data


def test_upload_single_part_only_sets_that_role(client):
    _upload(client, BannerDark=b"DARK")

    status = client.get("/logo/status").get_json()
    assert status == {"iconSet": False, "bannerDarkSet": True, "bannerLightSet": False}

    resp = client.get("/logo/banner-dark")
    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data == b"DARK"
    assert client.get("/logo/icon").status_code == 404
    assert client.get("/logo/banner-light").status_code == 404


def test_upload_replaces_previous_override(client, logo_app):
    _upload(client, Logo=b"one")
    _upload(client, Logo=b"two")

    assert client.get("/logo/icon").data == b"two"
    store = get_context(logo_app).store
    assert sorted(p.name for p in store.directory.iterdir()) == ["icon-transparent.png"]


def test_empty_part_is_ignored(client):
    resp = _upload(client, Logo=b"", BannerLight=b"LIGHT")

    assert resp.status_code == 200
    status = client.get("/logo/status").get_json()
    assert status == {"iconSet": False, "bannerDarkSet": False, "bannerLightSet": True}


def test_delete_removes_override(client):
    _upload(client, Logo=b"ICON")

    resp = client.delete("/logo/icon")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "deleted"
    assert client.get("/logo/status").get_json()["iconSet"] is False

    resp = client.delete("/logo/icon")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "override_missing"


def test_unknown_role_is_not_found(client):
    assert client.get("/logo/wallpaper").status_code == 404
    assert client.delete("/logo/wallpaper").status_code == 404


def test_upload_permission_error_shows_message(client, logo_app, monkeypatch):
    store = get_context(logo_app).store

    def deny(role, data):
        raise LogoPermissionError("permission_denied", "/srv/config/CustomLogo")

    monkeypatch.setattr(store, "save", deny)

    resp = _upload(client, Logo=b"ICON")

    assert resp.status_code == 403
    assert b"write access" in resp.data
    assert b"Traceback" not in resp.data


def test_upload_generic_error_shows_escaped_message(client, logo_app, monkeypatch):
    store = get_context(logo_app).store

    def disk_full(role, data):
        raise LogoIOError("No space <left>")

    monkeypatch.setattr(store, "save", disk_full)

    resp = _upload(client, Logo=b"ICON")

    assert resp.status_code == 500
    assert b"No space &lt;left&gt;" in resp.data
    assert b"Traceback" not in resp.data


def test_delete_permission_error_is_forbidden(client, logo_app, monkeypatch):
    store = get_context(logo_app).store

    def deny(role):
        raise LogoPermissionError("permission_denied")

    monkeypatch.setattr(store, "delete", deny)

    resp = client.delete("/logo/banner-light")

    assert resp.status_code == 403
    assert "write access" in resp.get_json()["message"]


def test_push_mode_upload_and_delete_update_bundle(monkeypatch, tmp_path):
    app = _make_app(monkeypatch, tmp_path, mode="push")
    client = app.test_client()
    web = tmp_path / "web"

    _upload(client, Logo=b"NEW-ICON")

    assert (web / "assets" / "img" / "icon-transparent.png").read_bytes() == b"NEW-ICON"
    assert (web / "icon-transparent.abc123.png").read_bytes() == b"NEW-ICON"
    assert (web / "assets" / "img" / "banner-dark.png").read_bytes() == b"orig-dark"

    resp = client.delete("/logo/icon")

    assert resp.status_code == 200
    assert resp.get_json()["distribution"]["roles"]["icon"]["restored"] == 2
    assert (web / "assets" / "img" / "icon-transparent.png").read_bytes() == b"orig-icon"
    assert (web / "icon-transparent.abc123.png").read_bytes() == b"orig-icon-hashed"
    assert not (tmp_path / "config" / "CustomLogo" / "icon-transparent.png").exists()


def test_push_mode_partial_upload_still_pushes_saved_roles(monkeypatch, tmp_path):
    app = _make_app(monkeypatch, tmp_path, mode="push")
    client = app.test_client()
    web = tmp_path / "web"
    real_replace = override_store.os.replace

    def replace_except_banner(src, dst):
        if str(dst).endswith("banner-dark.png"):
            raise PermissionError(13, "Permission denied", str(dst))
        return real_replace(src, dst)

    monkeypatch.setattr(override_store.os, "replace", replace_except_banner)

    resp = _upload(client, Logo=b"NEW-ICON", BannerDark=b"DARK")

    assert resp.status_code == 403
    assert client.get("/logo/status").get_json()["iconSet"] is True
    assert (web / "assets" / "img" / "icon-transparent.png").read_bytes() == b"NEW-ICON"
    assert (web / "assets" / "img" / "banner-dark.png").read_bytes() == b"orig-dark"
