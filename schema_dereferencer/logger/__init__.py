"""Package logger.

``logger`` can be used as soon as it is imported; handlers are only attached
once ``setup_logger()`` applies logging_config.json (done by the CLI):

    from schema_dereferencer.logger import logger

    logger.debug("Resolving component %s", name)
"""

from .logger import LOGGER_NAME, logger, setup_logger

__all__ = ["LOGGER_NAME", "logger", "setup_logger"]
