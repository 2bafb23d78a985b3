"""Utility modules for the extraction service."""

from .logging_config import ExtractionFormatter, LoggingAdapter, get_logger, log_operation, setup_logging

__all__ = [
    'ExtractionFormatter',
    'LoggingAdapter',
    'get_logger',
    'log_operation',
    'setup_logging',
]
