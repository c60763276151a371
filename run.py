#!/usr/bin/env python3
"""Run the badge cache refresher until SIGINT/SIGTERM."""

import asyncio
import signal
import sys

from loguru import logger

from app.container import Container
from app.errors import StoreError
from settings import LOG_LEVEL, verify_required_variables
from settings.logging import setup_logging


def install_signal_handlers(stop: asyncio.Event) -> None:
    """Route SIGINT/SIGTERM to ``stop`` so an in-flight cycle can finish."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)


async def main() -> int:
    verify_required_variables()
    container = Container()

    # installed before the startup cycle, which may spend minutes in git clones
    stop = asyncio.Event()
    install_signal_handlers(stop)

    try:
        await container.start()
    except StoreError as e:
        logger.error("Failed to connect to Redis - cannot start application: {}", e)
        await container.redis.aclose()
        return 1

    if stop.is_set():
        logger.info("Stop requested during startup")
    await stop.wait()
    logger.info("Shutting down...")
    await container.shutdown()
    return 0


if __name__ == "__main__":
    setup_logging(level=LOG_LEVEL, to_file=True)
    sys.exit(asyncio.run(main()))
