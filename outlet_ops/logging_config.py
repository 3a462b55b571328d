"""
Structured logging configuration.

configure_logging() runs once from create_app(). LOG_FORMAT picks text or
JSON output, LOG_LEVEL the root level. Pass outlet_id / import_token / row
through ``extra=`` and the JSON formatter emits them as top-level keys.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from outlet_ops.config import LOG_LEVEL, LOG_FORMAT

# Record attributes promoted to JSON keys when a caller sets them via extra=
CONTEXT_FIELDS = ('outlet_id', 'import_token', 'row')

TEXT_FORMAT = '%(asctime)s %(levelname)-7s [%(name)s] %(message)s'
TEXT_DATEFMT = '%Y-%m-%d %H:%M:%S'

# Chatty at INFO; the board only cares about their warnings
QUIET_LOGGERS = (
    'urllib3',
    'openai',
    'httpcore',
    'httpx',
    'sqlalchemy.engine',
    'werkzeug',
)


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def resolve_level(name) -> int:
    """Level number for a name like 'debug'; unknown names mean INFO."""
    level = logging.getLevelName(str(name or '').strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _formatter(fmt: str) -> logging.Formatter:
    if fmt == 'json':
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def configure_logging(app=None):
    """
    Install a single stderr handler on the root logger.

    Environment variables:
        LOG_LEVEL  — level name (default: config.LOG_LEVEL, INFO)
        LOG_FORMAT — "text" or "json" (default: config.LOG_FORMAT, text)

    Read again on every call so a changed environment takes effect.
    """
    level = resolve_level(os.getenv('LOG_LEVEL', LOG_LEVEL))
    fmt = os.getenv('LOG_FORMAT', LOG_FORMAT).strip().lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(fmt))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.setLevel(level)
