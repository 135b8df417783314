from .logger_setup import setup_logger
from .sensitive import sensitive_log_filter

__all__ = ["setup_logger", "sensitive_log_filter"]
