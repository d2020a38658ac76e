import logging
from graphql_headerkit.utils.config import config

def setup_logging():
    """Configure root logging from config.LOG_LEVEL."""
    log_level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger("graphql_headerkit")
    logger.setLevel(log_level)
    return logger
