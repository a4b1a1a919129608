"""
EMR Connect

Vendor dispatch and resource hydration for SMART on FHIR sessions:
- Epic
- Cerner
- athenahealth (platform and athenaPractice)
- eClinicalWorks

Usage:
    from emr_connect import create_emr_client

    client = await create_emr_client(launcher)
    created = await client.create({"resourceType": "DocumentReference", ...})
"""

from emr_connect.client import EMRClient
from emr_connect.config import EMRConnectSettings, get_settings
from emr_connect.endpoints import EndpointSet, construct_endpoints
from emr_connect.exceptions import (
    ConfigurationError,
    CreateFailedError,
    EMRConnectError,
    HydrationError,
    InvalidEndpointError,
    InvalidInputError,
    InvalidResponseError,
    MalformedResourceError,
    MissingEndpointError,
    MissingIdentifierError,
    RequestFailedError,
    ResolutionError,
    ResourceValidationError,
    TransportError,
    UnexpectedResourceTypeError,
    UnsupportedVendorError,
)
from emr_connect.factory import client_for, create_emr_client
from emr_connect.hydrator import ContextHydrator
from emr_connect.profiles import VENDOR_PROFILES, VendorProfile, endpoints_for, get_profile
from emr_connect.session import DeferredIdentifier, Launcher, SessionHandle
from emr_connect.transformer import SessionResource, to_canonical, to_session_shape
from emr_connect.vendors import (
    VendorTag,
    resolve_vendor,
    resolve_vendor_from_opaque,
    resolve_vendor_from_url,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "EMRClient",
    "client_for",
    "create_emr_client",
    # Vendors
    "VendorTag",
    "VendorProfile",
    "VENDOR_PROFILES",
    "get_profile",
    "resolve_vendor",
    "resolve_vendor_from_opaque",
    "resolve_vendor_from_url",
    # Endpoints
    "EndpointSet",
    "construct_endpoints",
    "endpoints_for",
    # Resources
    "ContextHydrator",
    "SessionResource",
    "to_canonical",
    "to_session_shape",
    # Session
    "SessionHandle",
    "DeferredIdentifier",
    "Launcher",
    # Config
    "EMRConnectSettings",
    "get_settings",
    # Errors
    "EMRConnectError",
    "ConfigurationError",
    "MissingEndpointError",
    "InvalidEndpointError",
    "UnsupportedVendorError",
    "ResolutionError",
    "InvalidInputError",
    "HydrationError",
    "MissingIdentifierError",
    "TransportError",
    "CreateFailedError",
    "RequestFailedError",
    "ResourceValidationError",
    "MalformedResourceError",
    "InvalidResponseError",
    "UnexpectedResourceTypeError",
]
