"""Logging setup

Initializes loguru sinks and redacts sensitive values before they are written.
"""
import os
import re
import sys
from typing import Any, Dict

from loguru import logger

from rym_lubricentro_api.core.config import Settings, settings as default_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

REDACTED = "***REDACTED***"

SENSITIVE_PATTERNS = [
    # Authorization header
    (re.compile(r'(Authorization)["\']?\s*[:=]\s*["\']?(Bearer\s+)?([a-zA-Z0-9_\-\.]{20,})["\']?', re.IGNORECASE), r'\1=' + REDACTED),
    # Token
    (re.compile(r'(token|bearer|jwt)["\']?\s*[:=]?\s*["\']?([a-zA-Z0-9_\-\.]{20,})["\']?', re.IGNORECASE), r'\1=' + REDACTED),
    # Password
    (re.compile(r'(password|passwd|pwd|contraseña)["\']?\s*[:=]\s*["\']?([^"\'\s,}]{3,})["\']?', re.IGNORECASE), r'\1=' + REDACTED),
    # Secret key
    (re.compile(r'(api[_-]?key|secret[_-]?key|secret)["\']?\s*[:=]\s*["\']?([a-zA-Z0-9_\-]{8,})["\']?', re.IGNORECASE), r'\1=' + REDACTED),
    # Email (partial)
    (re.compile(r'([a-zA-Z0-9_.+-]+)@([a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+)'), r'***@\2'),
]

SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd', 'secret', 'token', 'api_key', 'apikey',
    'authorization', 'credential', 'credentials',
}


def sanitize_log_message(message: str) -> str:
    """
    Redact sensitive values from a log message.

    Args:
        message: raw log message

    Returns:
        the message with secrets replaced
    """
    if not message:
        return message

    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    return sanitized


def sanitize_dict(data: Dict[str, Any], sensitive_keys: set = None) -> Dict[str, Any]:
    """Redact sensitive keys (recursively) from a mapping."""
    if sensitive_keys is None:
        sensitive_keys = SENSITIVE_KEYS

    if not isinstance(data, dict):
        return data

    result = {}
    for key, value in data.items():
        key_lower = str(key).lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            result[key] = sanitize_log_message(value)
        else:
            result[key] = value

    return result


class SanitizingFilter:
    """loguru filter that redacts the message and the extra fields"""

    def __call__(self, record: Dict[str, Any]) -> bool:
        if 'message' in record:
            record['message'] = sanitize_log_message(record['message'])

        if 'extra' in record and isinstance(record['extra'], dict):
            record['extra'] = sanitize_dict(record['extra'])

        return True


def setup_logging(settings: Settings | None = None) -> None:
    """Initialize the logging sinks (console and, optionally, file)."""
    settings = settings or default_settings
    logger.remove()

    sanitizing_filter = SanitizingFilter()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=settings.LOG_LEVEL,
        colorize=True,
        filter=sanitizing_filter,
    )

    if settings.LOG_TO_FILE:
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        logger.add(
            settings.LOG_FILE_PATH,
            format=FILE_FORMAT,
            level=settings.LOG_LEVEL,
            rotation="500 MB",
            retention="30 days",
            compression="zip",
            encoding="utf-8",
            enqueue=True,
            filter=sanitizing_filter,
        )

    logger.info(
        f"Logging inicializado: level={settings.LOG_LEVEL}, file={settings.LOG_TO_FILE}, "
        f"environment={settings.ENVIRONMENT}"
    )
