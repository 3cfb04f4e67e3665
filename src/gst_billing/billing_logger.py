"""
Structured Logging for the GST billing core
Console logging by default, with rotating file logs when a log directory is set
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from . import billing_config as cfg


class BillingLogger:
    """Component-prefixed logger for GST billing calculations"""

    def __init__(
        self,
        name: str = "GST-Billing",
        log_dir: Optional[str] = None,
        log_level: Optional[str] = None,
    ):
        """
        Initialize logger handlers

        Args:
            name: Logger name
            log_dir: Directory for log files; console only when empty
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        log_dir = cfg.LOG_DIR if log_dir is None else log_dir
        log_level = log_level or cfg.LOG_LEVEL

        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

        # Clear any existing handlers
        self.logger.handlers.clear()

        log_format = logging.Formatter(
            '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if log_dir:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)

            # 1. Main rotating file handler
            main_handler = RotatingFileHandler(
                log_path / 'gst_billing.log',
                maxBytes=cfg.LOG_MAX_MB * 1024 * 1024,
                backupCount=cfg.LOG_BACKUP_COUNT,
                encoding='utf-8'
            )
            main_handler.setLevel(logging.DEBUG)
            main_handler.setFormatter(log_format)
            self.logger.addHandler(main_handler)

            # 2. Error-only log file (5MB per file, keep 3 files)
            error_handler = RotatingFileHandler(
                log_path / 'errors.log',
                maxBytes=5*1024*1024,
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(log_format)
            self.logger.addHandler(error_handler)

        # 3. Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(log_format)
        self.logger.addHandler(console_handler)

    def debug(self, message, component=""):
        """Log debug message"""
        self._log(logging.DEBUG, message, component)

    def info(self, message, component=""):
        """Log info message"""
        self._log(logging.INFO, message, component)

    def warning(self, message, component=""):
        """Log warning message"""
        self._log(logging.WARNING, message, component)

    def error(self, message, component="", exc_info=False):
        """Log error message"""
        self._log(logging.ERROR, message, component, exc_info=exc_info)

    def _log(self, level, message, component="", exc_info=False):
        """Internal logging method with component prefix"""
        if component:
            message = f"[{component}] {message}"

        self.logger.log(level, message, exc_info=exc_info)

    def log_invoice_summary(self, item_count, grand_total, masked_gstin, requires_e_invoice):
        """Log a generated invoice summary"""
        customer = f"B2B {masked_gstin}" if masked_gstin else "B2C"
        self.info(
            f"Invoice summary - {item_count} line(s), grand total {grand_total}, "
            f"{customer}, e-invoice required: {requires_e_invoice}",
            component="InvoiceSummary"
        )

    def log_hsn_fallback(self, hsn_code, default_rate):
        """Log an HSN code that fell back to the default rate"""
        self.warning(
            f"HSN code '{hsn_code}' not in rate table - using default {default_rate}%",
            component="HSNLookup"
        )


# Global logger instance
_global_logger = None

def get_logger(log_level=None):
    """Get or create global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = BillingLogger(log_level=log_level)
    return _global_logger
