"""Logging setup for the extraction service.

Strategy traces and operation summaries attach structured fields to their
records (``extra=``); ``ExtractionFormatter`` renders them after the message
so a console line shows which strategy ran for which field and how long it
took.
"""

import logging
import sys
from typing import Any, Dict, Optional

from ..config import get_settings

LINE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(filename)s:%(lineno)d | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Record attributes set by ExtractionTrace, rendered in this order
TRACE_FIELDS = (
    'event',
    'field',
    'strategy',
    'success',
    'duration_ms',
    'error',
    'source',
    'strategies_tried',
    'errors_count',
    'succeeded',
    'failed',
)


class ExtractionFormatter(logging.Formatter):
    """Formatter that appends trace fields and operation context to the message."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = LINE_FORMAT, datefmt: str = DATE_FORMAT, use_colors: bool = False):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = use_colors

    @staticmethod
    def structured_fields(record: logging.LogRecord) -> Dict[str, Any]:
        """Collect the structured values attached to a record."""
        fields = {
            name: getattr(record, name)
            for name in TRACE_FIELDS
            if getattr(record, name, None) is not None
        }
        context = getattr(record, 'context', None)
        if isinstance(context, dict):
            fields.update((k, v) for k, v in context.items() if v is not None)
        return fields

    def format(self, record):
        levelname = record.levelname
        if self.use_colors:
            # Colour only this handler's copy of the level name
            record.levelname = f"{self.COLORS.get(levelname, self.RESET)}{levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = levelname

        component = getattr(record, 'component', None)
        if component:
            message = f"{message} ({component})"

        fields = self.structured_fields(record)
        if fields:
            details = " | ".join(f"{k}={v}" for k, v in fields.items())
            message = f"{message} [{details}]"

        return message


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> None:
    """
    Configure the root logger with the extraction formatter.

    Args:
        level: Log level name; defaults to LOG_LEVEL
        log_file: Optional file to log to; defaults to LOG_FILE
        use_colors: Colour the level name when stdout is a terminal
    """
    settings = get_settings()
    log_level = level or settings.log_level
    log_file = log_file or settings.log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(ExtractionFormatter(use_colors=use_colors and sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(ExtractionFormatter(fmt=FILE_FORMAT))
        root_logger.addHandler(file_handler)

    # Fetch internals are noisy below WARNING
    for noisy in ('aiohttp', 'asyncio'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


class LoggingAdapter(logging.LoggerAdapter):
    """Adapter that tags every record with a component name."""

    def process(self, msg, kwargs):
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs


def get_logger(name: str, component: str = 'EXTRACTION') -> LoggingAdapter:
    """Return a logger whose records carry ``component``."""
    return LoggingAdapter(logging.getLogger(name), {'component': component})


def log_operation(
    logger: logging.Logger,
    operation: str,
    status: str,
    **context
) -> None:
    """
    Log one line for an operation, with its context as structured fields.

    ``failed`` logs at ERROR, ``started``/``completed`` at INFO and any
    other status at DEBUG.
    """
    if status == 'failed':
        log_level = logging.ERROR
    elif status in ('started', 'completed'):
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    logger.log(log_level, f"{operation} {status}", extra={'context': context})
