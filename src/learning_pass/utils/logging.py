"""Structured logging for Learning Pass.

Every module logs through structlog, rendered as one JSON object per line on
stderr (and, when enabled, in a daily rotated file). Patron credentials never
reach a handler: keys such as ``pin``, ``USER_PIN`` or anything containing
``password``, ``token``, ``api_key`` or ``secret`` are replaced with
``[REDACTED]`` before rendering.

Settings come from learning_pass.config.settings:
- LP_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
- LP_LOG_TO_FILE: also write learningpass-YYYYMMDD.log (default off)
- LP_LOG_FILE_DIR: directory for the log file (default logs/)

Usage:
    >>> from learning_pass.utils.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("customer.validated", partner="neos", error_count=0)
"""

import logging
import re
from datetime import date
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import structlog
from structlog.types import EventDict, Processor

from learning_pass.config.settings import Settings, get_settings

REDACTED_VALUE = "[REDACTED]"

# pin / USER_PIN match exactly; the rest anywhere in the key.
SENSITIVE_KEY = re.compile(r"^(?:pin|user_pin)$|password|token|api_?key|secret", re.IGNORECASE)


def is_sensitive_key(key: Any) -> bool:
    return isinstance(key, str) and SENSITIVE_KEY.search(key) is not None


def sanitize_for_logging(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``data`` with sensitive values redacted, nested dicts included.

    Example:
        >>> sanitize_for_logging({"pin": "IlikeBread", "firstName": "Andrew"})
        {'pin': '[REDACTED]', 'firstName': 'Andrew'}
    """
    return {key: _redact(key, value) for key, value in data.items()}


def _redact(key: Any, value: Any) -> Any:
    if is_sensitive_key(key):
        return REDACTED_VALUE
    if isinstance(value, dict):
        return sanitize_for_logging(value)
    return value


def sanitization_processor(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> MutableMapping[str, Any]:
    return sanitize_for_logging(event_dict)


def _level(settings: Settings) -> int:
    level = logging.getLevelName(settings.log_level)
    return level if isinstance(level, int) else logging.INFO


def _handlers(settings: Settings, level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_to_file:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(
                filename=str(log_dir / f"learningpass-{date.today():%Y%m%d}.log"),
                when="midnight",
                backupCount=30,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


PROCESSORS: List[Processor] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    sanitization_processor,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.JSONRenderer(),
]


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Route structlog through the stdlib root logger with the JSON renderer.

    Called once on import; calling it again adds a second set of handlers.
    """
    settings = settings or get_settings()
    level = _level(settings)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in _handlers(settings, level):
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.configure(
        processors=PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Logger carrying ``kwargs`` on every event.

    Example:
        >>> log = bind_context(partner="neos", command="convert")
        >>> log.info("cli.converted", status=201)
    """
    return structlog.get_logger().bind(**kwargs)
