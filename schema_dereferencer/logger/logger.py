import atexit
import json
import logging
import logging.config
from pathlib import Path

LOGGER_NAME = "SchemaDereferencer"
CONFIG_FILE = Path(__file__).parent / "logging_config.json"

logger = logging.getLogger(LOGGER_NAME)


def setup_logger(level: str | None = None, config_file: Path = CONFIG_FILE) -> None:
    """Apply the dictConfig logging configuration and start the queue listener.

    Args:
        level: Optional level name overriding the configured level of the package logger
        config_file: JSON file holding the dictConfig configuration
    """
    with open(config_file, encoding="utf-8") as f:
        config = json.load(f)
    if level is not None:
        config["loggers"][LOGGER_NAME]["level"] = level.upper()
    logging.config.dictConfig(config)

    queue_handler = logging.getHandlerByName("queue_handler")
    listener = getattr(queue_handler, "listener", None)
    if listener is not None:
        listener.start()
        atexit.register(listener.stop)
