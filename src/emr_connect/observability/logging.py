"""
Structured Logging

Features:
- JSON or console rendered logs
- Log levels
- Identifier redaction for FHIR references
"""

import logging
import re
import sys
from typing import Any, Optional

import structlog

from emr_connect.config import EMRConnectSettings, get_settings


# Patient/123, Encounter/abc-1, Practitioner/x.y
REFERENCE_PATTERN = re.compile(
    r"\b(Patient|Encounter|Practitioner|RelatedPerson|Person)/[A-Za-z0-9\-\.]{1,64}"
)
REDACTED = "[REDACTED]"

_SKIP_KEYS = {"level", "logger", "timestamp"}


def redact_references(text: str) -> str:
    """Mask the id part of FHIR references in text."""
    return REFERENCE_PATTERN.sub(lambda m: f"{m.group(1)}/{REDACTED}", text)


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_references(value)
    if isinstance(value, dict):
        return {k: _redact_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact_value(v) for v in value]
    return value


def reference_redaction_processor(logger, method_name, event_dict):
    """Redact patient, encounter and user references from log events."""
    for key, value in event_dict.items():
        if key not in _SKIP_KEYS:
            event_dict[key] = _redact_value(value)
    return event_dict


def configure_logging(settings: Optional[EMRConnectSettings] = None) -> None:
    """
    Configure structlog for the library.

    Applications that already configure structlog can skip this; loggers
    are obtained lazily with ``structlog.get_logger(__name__)``.
    """
    settings = settings or get_settings()

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.redact_identifiers:
        processors.append(reference_redaction_processor)
    if settings.json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
