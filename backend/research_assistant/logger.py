"""
Named loggers for the research assistant.

All components log under the "ResearchAssistant" prefix at config.LOG_LEVEL,
through a single stdout handler on each component logger.
"""
import logging
import sys

from research_assistant import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ROOT_NAME = "ResearchAssistant"


def get_logger(component: str) -> logging.Logger:
    """
    Return the logger for one component, e.g. get_logger("Store").

    Handlers are attached once; later calls reuse the configured logger.
    """
    logger = logging.getLogger(f"{ROOT_NAME}.{component}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(handler)
        logger.setLevel(config.LOG_LEVEL)
    return logger
