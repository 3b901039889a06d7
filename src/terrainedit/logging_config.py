"""
Logging Configuration
Sets up the package logger. The library itself only creates module loggers;
the hosting game server calls ``setup_logging`` once at start-up.
"""
import logging
import sys
from typing import Optional


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configures the root logger for the 'terrainedit' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        handler: Optional extra handler, e.g. a structured sink owned by the host.

    Returns:
        The configured package logger.
    """
    # Get the logger for our package
    logger = logging.getLogger("terrainedit")
    logger.setLevel(level)

    # Check if handlers already exist to avoid duplicate logs during reload/restart
    if logger.hasHandlers():
        logger.handlers.clear()

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # 1. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 2. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # 3. Injected sink (Optional), keeps its own formatter
    if handler is not None:
        handler.setLevel(level)
        logger.addHandler(handler)

    logger.info("Logging initialized.")
    return logger
