import logging

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME: str = "skill-review-agent"

BASE_LOGGER_CACHE = {}


def get_logger(name: str) -> logging.Logger:
    """
    Returns the logger with the given name if it exists, else creates a new one.
    """
    if name in BASE_LOGGER_CACHE:
        return BASE_LOGGER_CACHE[name]

    base_logger = logging.getLogger(name)
    BASE_LOGGER_CACHE[name] = base_logger

    # Stream handler (stderr) with JSON formatting so the Actions log stays greppable
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(
        JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            static_fields={"service": SERVICE_NAME},
        )
    )
    base_logger.addHandler(stream_handler)

    return base_logger


def set_log_level(level: str) -> None:
    """Apply the configured level to every logger handed out so far."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    for base_logger in BASE_LOGGER_CACHE.values():
        base_logger.setLevel(numeric_level)

