# File: src/zenon_wallet_api/monitoring/logging_config.py

import logging
import logging.handlers
import os
from datetime import datetime
from typing import List, Optional

from ..config.settings import WalletApiConfig

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries whose debug output drowns the service's own records
NOISY_LOGGERS = ("websockets", "asyncio")

# Stream handlers attached by get_logger before setup_logging ran
_fallback_handlers: List[logging.Handler] = []

def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Logger that prints to the console even before logging is configured.

    A stream handler is added once, and only while the root logger has no
    handlers; ``LogConfig.setup_logging`` removes it again.
    """
    logger = logging.getLogger(name)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        _fallback_handlers.append(handler)

    if level is not None:
        logger.setLevel(level)
    elif not logger.level:
        logger.setLevel(logging.INFO)

    return logger

class LogConfig:
    def __init__(
        self,
        log_dir: str = "logs",
        max_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        self.log_dir = log_dir
        self.max_size = max_size
        self.backup_count = backup_count
        self.handlers: List[logging.Handler] = []

        os.makedirs(log_dir, exist_ok=True)

    @classmethod
    def from_config(cls, config: WalletApiConfig) -> 'LogConfig':
        return cls(
            log_dir=config.get('monitoring.log_dir', 'logs'),
            max_size=int(config.get('monitoring.log_max_bytes', 10 * 1024 * 1024)),
            backup_count=int(config.get('monitoring.log_backup_count', 5))
        )

    @property
    def log_file(self) -> str:
        return os.path.join(
            self.log_dir,
            f'wallet_api_{datetime.now().strftime("%Y%m%d")}.log'
        )

    def setup_logging(self, level: str = "INFO"):
        """Send every record to the rotating file and ``level`` and up to the console"""
        root_logger = logging.getLogger()
        self._remove_handlers(root_logger)

        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=self.max_size,
            backupCount=self.backup_count
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))
        console_handler.setLevel(logging.getLevelName(level.upper()))

        root_logger.setLevel(logging.DEBUG)
        for handler in (file_handler, console_handler):
            root_logger.addHandler(handler)
            self.handlers.append(handler)

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _remove_handlers(self, root_logger: logging.Logger):
        # fallback console handlers would print every record twice
        while _fallback_handlers:
            handler = _fallback_handlers.pop()
            for logger in [root_logger, *logging.root.manager.loggerDict.values()]:
                if isinstance(logger, logging.Logger) and handler in logger.handlers:
                    logger.removeHandler(handler)

        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers = []
