"""Tests for the application lifespan, with MongoDB and httpx mocked out."""

from unittest.mock import AsyncMock, MagicMock

import pytest

import api
from common.database import StoreError
from portfolio.auth.services.admin_service import AdminService
from portfolio.auth.services.session_manager import SessionManager


@pytest.fixture
def startup(monkeypatch):
    """Patch the external resources the lifespan acquires; returns the mocks."""
    mocks = MagicMock()
    mocks.connect = AsyncMock()
    mocks.disconnect = AsyncMock()
    mocks.http_client.aclose = AsyncMock()

    monkeypatch.setattr(api, "configure_logging", MagicMock())
    monkeypatch.setattr(api.MongoDB, "connect", mocks.connect)
    monkeypatch.setattr(api.MongoDB, "disconnect", mocks.disconnect)
    monkeypatch.setattr(api.MongoDB, "db", property(lambda self: MagicMock()))
    monkeypatch.setattr(api.httpx, "AsyncClient", MagicMock(return_value=mocks.http_client))
    monkeypatch.setattr(SessionManager, "ensure_indexes", AsyncMock())
    return mocks


@pytest.mark.asyncio
async def test_lifespan_wires_services_and_releases_on_shutdown(startup, test_settings, monkeypatch):
    monkeypatch.setattr(AdminService, "ensure_indexes", AsyncMock())
    app = api.create_app(test_settings)

    async with app.router.lifespan_context(app):
        assert app.state.auth.admin_service is not None
        startup.http_client.aclose.assert_not_awaited()

    startup.connect.assert_awaited_once()
    startup.http_client.aclose.assert_awaited_once()
    startup.disconnect.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_startup_still_releases_clients(startup, test_settings, monkeypatch):
    monkeypatch.setattr(
        AdminService, "ensure_indexes", AsyncMock(side_effect=StoreError("index build failed"))
    )
    app = api.create_app(test_settings)

    with pytest.raises(StoreError):
        async with app.router.lifespan_context(app):
            pass

    startup.http_client.aclose.assert_awaited_once()
    startup.disconnect.assert_awaited_once()
