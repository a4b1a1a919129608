"""
EMR Connect Observability

Structured logging with structlog and FHIR reference redaction.
"""

from emr_connect.observability.logging import (
    configure_logging,
    redact_references,
    reference_redaction_processor,
)

__all__ = [
    "configure_logging",
    "redact_references",
    "reference_redaction_processor",
]
