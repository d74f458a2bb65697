"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules. Decrypted
values must never reach a log event; the redaction processor is a second
line for values that look like credentials.
"""

import logging
import re
import sys
from typing import Any

import structlog

from encryptedconfig.shared.infrastructure.config import settings

_SENSITIVE_KEYS = re.compile(r"(password|secret|token|plaintext|credential)", re.IGNORECASE)

_PATTERNS = {
    r"(api[_-]?key|token|password|secret)['\"]?\s*[:=]\s*['\"]?([^'\"\s]+)": r"\1=[REDACTED]",
    r"Bearer\s+\S+": "Bearer [TOKEN_REDACTED]",
}


def _redact_string(text: str) -> str:
    for pattern, replacement in _PATTERNS.items():
        text = re.sub(pattern, replacement, text, flags=re.IGNORECASE)
    return text


def privacy_redactor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Redact sensitive information from log events.

    Values under keys that name a secret are replaced wholesale; string
    values elsewhere are scrubbed for key=value credential assignments.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Redacted event dictionary
    """
    if not getattr(settings, "log_redaction_enabled", True):
        return event_dict

    redacted = {}
    for key, value in event_dict.items():
        if key != "event" and _SENSITIVE_KEYS.search(key):
            redacted[key] = "[REDACTED]"
        elif isinstance(value, str):
            redacted[key] = _redact_string(value)
        else:
            redacted[key] = value
    return redacted


def configure_logging(stream: Any = sys.stderr) -> None:
    """
    Configure structlog for the application.

    Sets up:
    - Pretty console output for development
    - JSON output otherwise
    - Log level from settings
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        privacy_redactor,
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=stream.isatty() if hasattr(stream, "isatty") else False),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        force=True,  # Force reconfiguration in case it was already set
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("property_source_loaded", filename="app.yml.1.mte")
    """
    return structlog.get_logger(name)
