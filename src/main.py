"""Entry point for the coin-battle leaderboard poller and API."""

import asyncio
import signal

from loguru import logger

from config.settings import settings
from src.parsers.worker import run_worker
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(json_logs=settings.json_logs, level=settings.log_level, log_dir=settings.log_dir)
    logger.info("Starting coin-battle poller...")

    # Graceful shutdown on SIGINT/SIGTERM
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _signal_handler)

    worker_task = asyncio.create_task(run_worker())

    # Wait for either the worker to finish or a shutdown signal
    done, pending = await asyncio.wait(
        [worker_task, asyncio.create_task(shutdown_event.wait())],
        return_when=asyncio.FIRST_COMPLETED,
    )

    for task in pending:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    for task in done:
        if task is worker_task and task.exception() is not None:
            logger.error(f"Worker stopped with error: {task.exception()}")

    logger.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
