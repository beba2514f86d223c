"""Structured colored logging for workflow runs.

Every module logs through `get_logger()` so node execution, transitions and
request handling share one stderr stream and one format.
"""

import logging
import sys
from datetime import datetime

GREEN = "\x1b[32m"
RED = "\x1b[31m"
YELLOW = "\x1b[33m"
DIM = "\x1b[2m"
BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class PipelineFormatter(logging.Formatter):
    LEVEL_COLORS = {
        logging.DEBUG: DIM,
        logging.INFO: "",
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED + BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now().strftime("%H:%M:%S")
        color = self.LEVEL_COLORS.get(record.levelno, "")
        message = f"{DIM}[{ts}]{RESET} {color}{record.getMessage()}{RESET}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def get_logger(name: str = "campaign_flow", level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(PipelineFormatter())
        logger.addHandler(handler)
    if level is None:
        from campaign_flow.config import settings

        level = settings.log_level
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
