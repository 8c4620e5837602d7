# app/core/logging_config.py
import logging
import sys


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger once for the whole process."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # aiosqlite logs every operation at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
