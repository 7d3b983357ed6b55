import logging
import sys
import os
from app.core.config import settings


class Logger:
    _file_handler = None

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(settings.LOG_LEVEL.upper())

        # Prevent adding multiple handlers if already configured
        if not self.logger.handlers:
            console_handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

            # File handler - shared across all loggers
            log_dir = os.path.dirname(settings.LOG_FILE)
            if Logger._file_handler is None and log_dir and os.path.isdir(log_dir):
                try:
                    Logger._file_handler = logging.FileHandler(settings.LOG_FILE)
                    Logger._file_handler.setFormatter(formatter)
                except OSError:
                    Logger._file_handler = None

            if Logger._file_handler:
                self.logger.addHandler(Logger._file_handler)

    def info(self, msg: str):
        self.logger.info(msg)

    def warn(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str, exc: Exception = None):
        self.logger.error(msg, exc_info=exc)

    def debug(self, msg: str):
        self.logger.debug(msg)

    def is_debug(self) -> bool:
        return self.logger.isEnabledFor(logging.DEBUG)
