"""
Logging configuration for hivemall-spark.

Modules log through ``logging.getLogger(__name__)``; this module wires the
handlers and formatters, including a structured JSON formatter.
"""

import json
import logging
import logging.config
import traceback
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

ROOT_LOGGER = "hivemall_spark"

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'message', 'exc_info', 'exc_text', 'stack_info', 'taskName',
])


@dataclass
class LogEntry:
    """Structured log entry."""
    timestamp: str
    level: str
    logger: str
    message: str
    module: str
    function: str
    line_number: int
    process_id: int
    thread_id: int
    extra_data: Optional[Dict[str, Any]] = None
    stack_trace: Optional[str] = None


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record):
        log_entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
            module=record.module,
            function=record.funcName,
            line_number=record.lineno,
            process_id=record.process,
            thread_id=record.thread,
        )

        if record.exc_info:
            log_entry.stack_trace = ''.join(traceback.format_exception(*record.exc_info))

        if self.include_extra:
            extra_data = {key: value for key, value in record.__dict__.items()
                          if key not in _RESERVED_ATTRS}
            if extra_data:
                log_entry.extra_data = extra_data

        return json.dumps(asdict(log_entry), default=str, ensure_ascii=False)


def build_logging_config(level: str = "INFO",
                         json_format: bool = False,
                         log_file: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    level = level.upper()
    formatter = 'json' if json_format else 'standard'

    config: Dict[str, Any] = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)8s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'json': {
                '()': StructuredFormatter,
                'include_extra': True
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'level': level,
                'formatter': formatter,
                'stream': 'ext://sys.stderr'
            }
        },
        'loggers': {
            ROOT_LOGGER: {
                'level': level,
                'handlers': ['console'],
                'propagate': False
            }
        }
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        config['handlers']['file'] = {
            'class': 'logging.FileHandler',
            'level': level,
            'formatter': formatter,
            'filename': str(log_file)
        }
        config['loggers'][ROOT_LOGGER]['handlers'].append('file')

    return config


def setup_logging(level: Union[str, int] = "INFO",
                  json_format: bool = False,
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the package loggers.

    Args:
        level: Log level name or number
        json_format: Emit one JSON object per record instead of plain text
        log_file: Also write records to this file

    Returns:
        The package root logger
    """
    if isinstance(level, int):
        level = logging.getLevelName(level)
    logging.config.dictConfig(build_logging_config(level, json_format, log_file))
    return logging.getLogger(ROOT_LOGGER)
