"""
Restaurants API - Server Lifecycle
===================================

What:  start() and stop(): connect the store, listen, serve, and tear down.
Why:   The test suite (and anything embedding the service) needs to run a real
       server on a chosen port and stop it again cleanly, so sequential runs
       can reuse the same port.
How:   Two independent async steps composed in order, each with explicit
       failure handling:

           start():  Database.connect()  ──fail──▶ LifecycleError (nothing bound)
                          │
                          ▼
                     bind + listen       ──fail──▶ disconnect store, LifecycleError
                          │
                          ▼
                     uvicorn.Server.serve(sockets=[sock]) in a task
                          │
                          ▼
                     wait until server.started ──aborted──▶ cleanup, LifecycleError
                          │
                          ▼
                     ServerHandle

           stop(handle): ask uvicorn to exit → await the serve task
                         (listening socket closed) → disconnect store

State:
    Unstarted → start() → Connected+Listening → stop() → Unstarted
    The handle returned by start() is the only reference to the running
    server; there is no module-level server object.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Optional

import uvicorn

from restaurants_api.config import settings
from restaurants_api.database import Database
from restaurants_api.exceptions import LifecycleError
from restaurants_api.main import create_app

logger = logging.getLogger(__name__)

# Same listen backlog uvicorn uses by default
BACKLOG = 2048


@dataclass
class ServerHandle:
    """A started server: its store connection, socket and serve task."""
    database: Database
    server: uvicorn.Server
    sock: socket.socket
    task: "asyncio.Task[None]"
    host: str
    port: int

    @property
    def running(self) -> bool:
        return self.server.started and not self.task.done()

    async def wait_closed(self) -> None:
        """Block until the server stops serving (e.g. after SIGINT/SIGTERM)."""
        await asyncio.wait({self.task})


def _bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind and listen on (host, port).

    SO_REUSEADDR lets a restarted server take the port back while old
    connections sit in TIME_WAIT. It does not allow two live listeners.
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family=family, type=socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(BACKLOG)
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


async def _wait_started(server: uvicorn.Server, task: "asyncio.Task[None]") -> None:
    while not server.started:
        if task.done():
            cause = None if task.cancelled() else task.exception()
            raise LifecycleError(
                message="Server exited before accepting connections",
            ) from cause
        await asyncio.sleep(0.01)


async def start(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    host: Optional[str] = None,
) -> ServerHandle:
    """
    Connect to the store, then listen and serve the API.

    Args:
        database_url: Store URL (default: settings.database_url / DATABASE_URL)
        port:         Listen port (default: settings.port / PORT); 0 = ephemeral
        host:         Listen address (default: settings.host)

    Returns:
        ServerHandle, once the server is accepting connections.

    Raises:
        LifecycleError: store connection failed, port could not be bound, or
                        the server aborted during startup. Nothing is left
                        connected or bound when this is raised.
    """
    database_url = database_url or settings.database_url
    port = settings.port if port is None else port
    host = host or settings.host

    # ── Step 1: Connect to the store ──────────────────────────────────────
    database = Database(database_url)
    try:
        await database.connect()
    except Exception as e:
        logger.error("Could not connect to the restaurants store: %s", str(e))
        raise LifecycleError(
            message="Could not connect to the restaurants store",
            context={"error_type": type(e).__name__},
        ) from e

    # ── Step 2: Bind the listening socket ─────────────────────────────────
    try:
        sock = _bind_socket(host, port)
    except OSError as e:
        logger.error("Could not listen on %s:%d: %s", host, port, str(e))
        await database.disconnect()
        raise LifecycleError(
            message=f"Could not listen on {host}:{port}",
            context={"host": host, "port": port, "errno": e.errno},
        ) from e

    # ── Step 3: Serve on the bound socket ─────────────────────────────────
    config = uvicorn.Config(
        create_app(database),
        lifespan="on",
        log_config=None,     # logging is configured by restaurants_api.main
        access_log=False,    # RequestLoggingMiddleware writes the access log
    )
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve(sockets=[sock]))

    try:
        await _wait_started(server, task)
    except BaseException:
        server.should_exit = True
        await asyncio.wait({task})
        sock.close()
        await database.disconnect()
        raise

    handle = ServerHandle(
        database=database,
        server=server,
        sock=sock,
        task=task,
        host=host,
        port=sock.getsockname()[1],
    )
    logger.info("Your app is listening on port %d", handle.port)
    return handle


async def stop(handle: ServerHandle) -> None:
    """
    Stop serving, close the listening socket, then disconnect the store.

    Completes only after both are done. Calling it again on a stopped
    handle is a no-op apart from logging.

    The socket is closed before the store is disconnected, so requests
    still in flight finish against a live connection pool.

    Raises:
        LifecycleError: the serve task had failed; cleanup still ran.
    """
    logger.info("Closing server")
    handle.server.should_exit = True
    await asyncio.wait({handle.task})

    handle.sock.close()
    await handle.database.disconnect()

    if not handle.task.cancelled() and handle.task.exception() is not None:
        raise LifecycleError(
            message="Server stopped with an error",
            context={"error_type": type(handle.task.exception()).__name__},
        ) from handle.task.exception()
