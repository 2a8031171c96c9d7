"""
Fan Control logging set-up

Imported for its side effect. Routes stdlib logging from the core package
into loguru, which writes to stderr and, where available, to syslog.
"""

import logging
import logging.handlers
import os
import sys

from loguru import logger

LOG_LEVEL = os.environ.get("FANCONTROL_LOG_LEVEL", "INFO").upper()
SYSLOG_SOCKET = "/dev/log"


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that issued the record so loguru reports the right module
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


logger.remove()
logger.add(sys.stderr, level=LOG_LEVEL)

if os.path.exists(SYSLOG_SOCKET):
    syslog_handler = logging.handlers.SysLogHandler(
        address=SYSLOG_SOCKET, facility=logging.handlers.SysLogHandler.LOG_USER
    )
    syslog_handler.ident = "fancontrol: "
    logger.add(syslog_handler, level=LOG_LEVEL, format="{message}")

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
