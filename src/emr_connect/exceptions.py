"""
EMR Connect Exceptions

Error taxonomy:
- Configuration errors (missing or invalid endpoints, unsupported vendor)
- Resolution errors (invalid input shape)
- Hydration errors (missing session identifiers)
- Transport errors (session create/request failures)
- Validation errors (malformed resources and responses)
"""

from typing import Any, Optional


class EMRConnectError(Exception):
    """Base class for all EMR Connect errors."""
    pass


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(EMRConnectError):
    """Vendor configuration is incomplete or unavailable."""
    pass


class MissingEndpointError(ConfigurationError):
    """An endpoint of a vendor's endpoint set is not defined."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Endpoint '{field}' not defined")


class InvalidEndpointError(ConfigurationError):
    """An endpoint of a vendor's endpoint set is not an absolute http(s) URL."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Endpoint '{field}' is not an absolute http(s) URL")


class UnsupportedVendorError(ConfigurationError):
    """No static endpoint set or client profile exists for the vendor."""

    def __init__(self, vendor: Any):
        self.vendor = vendor
        super().__init__(f"Endpoints not found for EMR type: {getattr(vendor, 'value', vendor)}")


# =============================================================================
# Resolution
# =============================================================================

class ResolutionError(EMRConnectError):
    """Vendor resolution could not be performed."""
    pass


class InvalidInputError(ResolutionError):
    """Input is neither a session handle, token claims nor a vendor tag."""
    pass


# =============================================================================
# Hydration
# =============================================================================

class HydrationError(EMRConnectError):
    """Resource context could not be derived from the session."""
    pass


class MissingIdentifierError(HydrationError):
    """A session identifier resolved to an empty value."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"{identifier} id not found")


# =============================================================================
# Transport
# =============================================================================

class TransportError(EMRConnectError):
    """The session failed to perform a network operation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class CreateFailedError(TransportError):
    """Resource creation through the session failed."""
    pass


class RequestFailedError(TransportError):
    """A read or request through the session failed."""
    pass


# =============================================================================
# Validation
# =============================================================================

class ResourceValidationError(EMRConnectError):
    """A resource does not have the expected structure."""
    pass


class MalformedResourceError(ResourceValidationError):
    """Resource lacks a usable resourceType discriminant."""
    pass


class InvalidResponseError(ResourceValidationError):
    """The session returned something that is not a FHIR resource."""
    pass


class UnexpectedResourceTypeError(ResourceValidationError):
    """A session entity resolved to a different resource type than expected."""

    def __init__(self, expected: str, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} but got {actual}")
