"""
Run the Restaurants API as a long-lived server.

    python -m restaurants_api
    restaurants-api

PORT and DATABASE_URL are read from the environment (or .env).
"""

import asyncio
import logging
import sys

from restaurants_api.exceptions import LifecycleError
from restaurants_api.main import setup_logging
from restaurants_api.server import start, stop

logger = logging.getLogger("restaurants_api")


async def serve() -> None:
    handle = await start()
    try:
        await handle.wait_closed()
    finally:
        await stop(handle)


def main() -> None:
    setup_logging()
    try:
        asyncio.run(serve())
    except LifecycleError as e:
        logger.error("%s | Context: %s", e.message, e.context)
        sys.exit(1)
    except KeyboardInterrupt:
        # uvicorn re-raises the captured SIGINT once it has shut down
        pass


if __name__ == "__main__":
    main()
