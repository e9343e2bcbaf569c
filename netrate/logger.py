"""
Logging module for netrate
Console output plus detailed and errors-only log files
"""

import glob
import logging
import logging.handlers
import os
import platform
import sys
import threading
import time
import traceback
from datetime import datetime
from typing import Optional

import psutil

from .config import DEFAULT_LOG_DIR
from .errors import ConfigError

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3


class NetRateLogger:
    """Logging system for netrate"""

    def __init__(self, log_dir: str = DEFAULT_LOG_DIR, log_level: str = "INFO"):
        self.log_dir = log_dir
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        try:
            self.logger = self._setup_logger()
        except OSError as e:
            raise ConfigError(f"Cannot use log directory \"{log_dir}\": {e}") from e

    def _setup_logger(self) -> logging.Logger:
        """Setup the "netrate" logger and its handlers"""
        os.makedirs(self.log_dir, exist_ok=True)

        logger = logging.getLogger("netrate")
        logger.setLevel(self.log_level)

        # Close and drop existing handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )

        simple_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s"
        )

        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        log_file = os.path.join(self.log_dir, f"netrate_{stamp}.log")
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

        # Console handler for real-time output
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(max(self.log_level, logging.INFO))
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

        error_file = os.path.join(self.log_dir, f"netrate_errors_{stamp}.log")
        error_handler = logging.FileHandler(error_file, mode="a", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        logger.addHandler(error_handler)

        return logger

    def log_system_info(self, net_dev: Optional[str] = None):
        """Log system information and check the interface against psutil"""
        self.logger.info("=== System Information ===")
        self.logger.info(f"Platform: {platform.platform()}")
        self.logger.info(f"Python Version: {platform.python_version()}")
        self.logger.info(f"CPU Cores: {psutil.cpu_count()}")
        self.logger.info(f"Boot Time: {datetime.fromtimestamp(psutil.boot_time())}")
        if net_dev is not None:
            interfaces = psutil.net_if_stats()
            if net_dev in interfaces:
                self.logger.info(
                    f"Interface {net_dev}: up={interfaces[net_dev].isup}, "
                    f"speed={interfaces[net_dev].speed} Mb/s"
                )
            else:
                self.logger.warning(
                    f"Interface {net_dev} not reported by the system "
                    f"(known: {', '.join(sorted(interfaces))})"
                )
        self.logger.info("=========================")

    def log_sample(self, net_dev: str, delta, duration: float):
        """Log one sampling step"""
        self.logger.debug(
            f"Sample {net_dev} - RX: {delta.received} B, TX: {delta.sent} B, "
            f"Duration: {duration:.4f}s"
        )

    def log_error(self, error: Exception, context: str = ""):
        """Log errors with context"""
        self.logger.error(f"Error in {context}: {type(error).__name__}: {str(error)}")
        self.logger.debug(f"Traceback: {traceback.format_exc()}")

    def log_info(self, message: str):
        """Log info messages"""
        self.logger.info(message)

    def log_debug(self, message: str):
        """Log debug messages"""
        self.logger.debug(message)

    def cleanup_old_logs(self, days: int = 7):
        """Clean up old log files"""
        cutoff_time = time.time() - (days * 24 * 60 * 60)
        log_files = glob.glob(os.path.join(self.log_dir, "netrate_*.log*"))

        for log_file in log_files:
            if os.path.getmtime(log_file) < cutoff_time:
                try:
                    os.remove(log_file)
                    self.logger.info(f"Cleaned up old log file: {log_file}")
                except OSError as e:
                    self.logger.error(f"Failed to clean up log file {log_file}: {e}")


# Global logger instance
_logger_instance: Optional[NetRateLogger] = None
_lock = threading.Lock()


def get_logger(
    log_dir: Optional[str] = None, log_level: Optional[str] = None
) -> NetRateLogger:
    """
    Get the global logger instance

    It is created on first use and rebuilt when a different log_dir or
    log_level is requested. Without arguments the current instance is
    returned as is.
    """
    global _logger_instance

    with _lock:
        current = _logger_instance
        if (
            current is None
            or (log_dir is not None and log_dir != current.log_dir)
            or (
                log_level is not None
                and getattr(logging, log_level.upper(), logging.INFO) != current.log_level
            )
        ):
            if current is not None:
                log_dir = log_dir or current.log_dir
                log_level = log_level or logging.getLevelName(current.log_level)
            _logger_instance = NetRateLogger(
                log_dir or DEFAULT_LOG_DIR, log_level or "INFO"
            )

    return _logger_instance
