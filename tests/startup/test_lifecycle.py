"""Tests for the host lifecycle hooks and init_app wiring."""
from __future__ import annotations

import pytest
from flask import Flask

from custom_logo.services.distribution import LogoDistributor
from custom_logo.services.override_store import OverrideStore
from custom_logo.services.roles import LogoRole, default_role_table
from custom_logo.startup.context import EXTENSION_KEY
from custom_logo.startup.lifecycle import LogoLifecycle
from custom_logo.startup.wiring import init_app


@pytest.fixture
def bundle(tmp_path):
    web = tmp_path / "web"
    web.mkdir()
    (web / "banner-light.1a2b.png").write_bytes(b"orig-light")
    roles = default_role_table()
    store = OverrideStore(tmp_path / "CustomLogo", roles)
    store.save(LogoRole.BANNER_LIGHT, b"LIGHT")
    return web, store, LogoDistributor(store, web, roles)


def test_on_start_pushes_in_push_mode(bundle):
    web, _store, distributor = bundle

    report = LogoLifecycle(distributor, push_enabled=True).on_start()

    assert report is not None and report.ok
    assert (web / "banner-light.1a2b.png").read_bytes() == b"LIGHT"


def test_on_start_is_noop_in_intercept_mode(bundle):
    web, _store, distributor = bundle

    assert LogoLifecycle(distributor, push_enabled=False).on_start() is None
    assert (web / "banner-light.1a2b.png").read_bytes() == b"orig-light"


def test_on_start_swallows_unexpected_errors(bundle, monkeypatch):
    _web, _store, distributor = bundle

    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(distributor, "distribute", boom)
    lifecycle = LogoLifecycle(distributor, push_enabled=True)

    assert lifecycle.on_start() is None
    lifecycle.on_stop()


def test_init_app_is_idempotent_and_runs_startup(monkeypatch, tmp_path):
    web = tmp_path / "web"
    web.mkdir()
    (web / "touchicon.png").write_bytes(b"orig-touch")
    store_dir = tmp_path / "CustomLogo"
    OverrideStore(store_dir, default_role_table()).save(LogoRole.ICON, b"ICON")
    monkeypatch.setenv("CUSTOM_LOGO_DIR", str(store_dir))
    monkeypatch.setenv("CUSTOM_LOGO_WEB_PATH", str(web))
    monkeypatch.setenv("CUSTOM_LOGO_MODE", "both")

    app = Flask(__name__)
    first = init_app(app)
    second = init_app(app)

    assert first is second
    assert app.extensions[EXTENSION_KEY] is first
    assert first.push_enabled and first.intercept_enabled
    assert (web / "touchicon.png").read_bytes() == b"ICON"
    assert "custom_logo" in app.blueprints


def test_init_app_unknown_mode_falls_back_to_intercept(monkeypatch, tmp_path):
    monkeypatch.setenv("CUSTOM_LOGO_DIR", str(tmp_path / "CustomLogo"))
    monkeypatch.setenv("CUSTOM_LOGO_MODE", "sideways")

    ctx = init_app(Flask(__name__))

    assert ctx.intercept_enabled
    assert not ctx.push_enabled
