"""
Restaurants API - Server Lifecycle Tests
=========================================

What:  start()/stop() against a real uvicorn server on 127.0.0.1.
Why:   The lifecycle is all-or-nothing and must release the port, so
       sequential runs can reuse it.

What we test:
    ✅ start → serve real HTTP → stop, store disconnected afterwards
    ✅ restarting on the same port after stop
    ✅ unreachable store: LifecycleError, nothing bound
    ✅ occupied port: LifecycleError, store disconnected
    ✅ stop is idempotent
    ✅ start leaves the embedding process's logging handlers in place
"""

import logging
import socket
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from restaurants_api.exceptions import LifecycleError
from restaurants_api.server import start, stop

HOST = "127.0.0.1"


@pytest.mark.asyncio
async def test_start_serves_requests_then_stops(database_url):
    handle = await start(database_url=database_url, port=0, host=HOST)
    try:
        assert handle.running
        assert handle.port > 0
        async with httpx.AsyncClient(base_url=f"http://{HOST}:{handle.port}") as client:
            created = await client.post(
                "/restaurants", json={"name": "Test", "borough": "Queens", "cuisine": "Diner"},
            )
            listed = await client.get("/restaurants")
        assert created.status_code == 201
        assert listed.json()["restaurants"][0]["id"] == created.json()["id"]
    finally:
        await stop(handle)

    assert not handle.running
    assert not handle.database.connected


@pytest.mark.asyncio
async def test_restart_on_same_port(database_url):
    first = await start(database_url=database_url, port=0, host=HOST)
    port = first.port
    await stop(first)

    second = await start(database_url=database_url, port=port, host=HOST)
    try:
        assert second.port == port
        async with httpx.AsyncClient(base_url=f"http://{HOST}:{port}") as client:
            response = await client.get("/unknown")
        assert response.status_code == 404
    finally:
        await stop(second)


@pytest.mark.asyncio
async def test_stop_twice_is_harmless(database_url):
    handle = await start(database_url=database_url, port=0, host=HOST)
    await stop(handle)
    await stop(handle)

    assert not handle.database.connected


@pytest.mark.asyncio
async def test_start_keeps_host_logging(database_url, caplog):
    caplog.set_level(logging.WARNING)
    root_handlers = list(logging.getLogger().handlers)

    handle = await start(database_url=database_url, port=0, host=HOST)
    try:
        logging.getLogger("harness").warning("logged while serving")
    finally:
        await stop(handle)

    assert logging.getLogger().handlers == root_handlers
    assert "logged while serving" in [record.getMessage() for record in caplog.records]


@pytest.mark.asyncio
async def test_unreachable_store_binds_nothing(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'restaurants.db'}"

    with patch("restaurants_api.server._bind_socket") as bind:
        with pytest.raises(LifecycleError, match="connect"):
            await start(database_url=url, port=0, host=HOST)

    bind.assert_not_called()


@pytest.mark.asyncio
async def test_occupied_port_disconnects_store():
    blocker = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    blocker.bind((HOST, 0))
    blocker.listen(1)
    port = blocker.getsockname()[1]

    try:
        with patch("restaurants_api.server.Database") as database_cls:
            database = database_cls.return_value
            database.connect = AsyncMock()
            database.disconnect = AsyncMock()

            with pytest.raises(LifecycleError, match="listen") as exc_info:
                await start(database_url="sqlite+aiosqlite://", port=port, host=HOST)

        database.connect.assert_awaited_once()
        database.disconnect.assert_awaited_once()
        assert exc_info.value.context["port"] == port
    finally:
        blocker.close()
