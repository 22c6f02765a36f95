import os
import sys
from pathlib import Path

from loguru import logger

# Records bound with this channel also go to the stats file
STATS_CHANNEL = "stats"


def is_stats_record(record: dict) -> bool:
    return record["extra"].get("channel") == STATS_CHANNEL


def stats_logger():
    """Logger for the periodic ``[STATS]`` line; kept in its own file for trending."""
    return logger.bind(channel=STATS_CHANNEL)


def setup_logger(*, json_logs: bool = False, level: str = "INFO", log_dir: str = "logs") -> None:
    """Configure loguru for the poller and API.

    Console level comes from LOG_LEVEL (falls back to ``level``). The main
    file keeps DEBUG, per-pass poller lines included. A second small file
    holds only the stats lines so a day of throughput fits in one view.
    """
    console_level = os.getenv("LOG_LEVEL", level).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stdout, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stdout,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    directory = Path(log_dir)
    logger.add(
        directory / "coinbattle_{time:YYYY-MM-DD}.log",
        rotation="20 MB",
        retention="3 days",
        compression="gz",
        level="DEBUG",
        serialize=json_logs,
    )
    logger.add(
        directory / "stats_{time:YYYY-MM-DD}.log",
        format="{time:YYYY-MM-DD HH:mm:ss} {message}",
        filter=is_stats_record,
        rotation="1 day",
        retention="14 days",
        level="INFO",
    )
