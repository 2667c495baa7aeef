"""Logging configuration"""
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL = os.getenv("HIVE_LOG_LEVEL", "INFO").upper()

# Console only, the backend owns persistence
logging.basicConfig(
    level=LOG_LEVEL,
    format=LOG_FORMAT,
    datefmt=DATE_FORMAT,
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger("hive_server")
logger.setLevel(LOG_LEVEL)


def get_logger(name: str) -> logging.Logger:
    """Child logger under the application logger, e.g. ``hive_server.feed``"""
    return logger.getChild(name)
