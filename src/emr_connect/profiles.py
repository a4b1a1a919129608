"""
Vendor Profiles

One profile per supported EMR vendor: its static endpoints, the header
policy for reads and creates, and the hydration hooks it requires. Adding a
vendor means adding a row to VENDOR_PROFILES and a URL pattern in
emr_connect.vendors.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from emr_connect.endpoints import EndpointSet, construct_endpoints
from emr_connect.exceptions import UnsupportedVendorError
from emr_connect.hydrator import HydrationHook, mandatory_author
from emr_connect.vendors import VendorTag

FHIR_JSON = "application/fhir+json"


def _frozen(headers: Optional[Dict[str, str]] = None) -> Mapping[str, str]:
    return MappingProxyType(dict(headers or {}))


@dataclass(frozen=True)
class VendorProfile:
    """
    Behavior of one EMR vendor.

    Attributes:
        vendor: The vendor this profile describes
        token_endpoint: OAuth2 token endpoint
        r4_endpoint: FHIR R4 base URL
        authorize_endpoint: OAuth2 authorize endpoint
        request_headers: Headers the vendor requires on reads. They take
            precedence over caller headers.
        create_headers: Default headers on creates. Caller headers take
            precedence over them.
        hydration_hooks: Extra hydration applied on create
        endpoints: The validated endpoint set, built when the profile is
            created

    Raises:
        MissingEndpointError: If an endpoint is not defined
        InvalidEndpointError: If an endpoint is not an absolute http(s) URL
    """
    vendor: VendorTag
    token_endpoint: Optional[str] = None
    r4_endpoint: Optional[str] = None
    authorize_endpoint: Optional[str] = None
    request_headers: Mapping[str, str] = field(default_factory=_frozen)
    create_headers: Mapping[str, str] = field(default_factory=_frozen)
    hydration_hooks: Tuple[HydrationHook, ...] = ()
    endpoints: EndpointSet = field(init=False, repr=False)

    def __post_init__(self):
        endpoints = construct_endpoints(
            self.token_endpoint, self.r4_endpoint, self.authorize_endpoint
        )
        object.__setattr__(self, "endpoints", endpoints)


# =============================================================================
# Profiles
# =============================================================================

EPIC_PROFILE = VendorProfile(
    vendor=VendorTag.EPIC,
    token_endpoint="https://fhir.epic.com/interconnect-fhir-oauth/oauth2/token",
    r4_endpoint="https://fhir.epic.com/interconnect-fhir-oauth/api/FHIR/R4/",
    authorize_endpoint="https://fhir.epic.com/interconnect-fhir-oauth/oauth2/authorize",
    # Epic answers a create with an empty body unless asked for the resource
    create_headers=_frozen({"Prefer": "return=representation"}),
)

CERNER_PROFILE = VendorProfile(
    vendor=VendorTag.CERNER,
    token_endpoint=(
        "https://authorization.cerner.com/tenants/ec2458f2-1e24-41c8-b71b-0e701af7583d"
        "/protocols/oauth2/profiles/smart-v1/token"
    ),
    r4_endpoint="https://fhir-ehr-code.cerner.com/r4/ec2458f2-1e24-41c8-b71b-0e701af7583d/",
    authorize_endpoint=(
        "https://authorization.cerner.com/tenants/ec2458f2-1e24-41c8-b71b-0e701af7583d"
        "/protocols/oauth2/profiles/smart-v1/personas/provider/authorize"
    ),
    request_headers=_frozen({"Accept": FHIR_JSON}),
    hydration_hooks=(mandatory_author,),
)

ECW_PROFILE = VendorProfile(
    vendor=VendorTag.ECW,
    token_endpoint="https://staging-oauthserver.ecwcloud.com/oauth/oauth2/token",
    r4_endpoint="https://staging-fhir.ecwcloud.com/fhir/r4/FFBJCD/",
    authorize_endpoint="https://staging-oauthserver.ecwcloud.com/oauth/oauth2/authorize",
)

ATHENA_PROFILE = VendorProfile(
    vendor=VendorTag.ATHENA,
    token_endpoint="https://api.preview.platform.athenahealth.com/oauth2/v1/token",
    r4_endpoint="https://api.preview.platform.athenahealth.com/fhir/r4/",
    authorize_endpoint="https://api.preview.platform.athenahealth.com/oauth2/v1/authorize",
)

ATHENAPRACTICE_PROFILE = VendorProfile(
    vendor=VendorTag.ATHENAPRACTICE,
    token_endpoint="https://ap22sandbox.fhirapi.athenahealth.com/demo/oauth2/token",
    r4_endpoint="https://ap22sandbox.fhirapi.athenahealth.com/demo/r4/",
    authorize_endpoint="https://ap22sandbox.fhirapi.athenahealth.com/demo/oauth2/authorize",
)

# SMART and NONE have no static endpoints and no profile
VENDOR_PROFILES: Mapping[VendorTag, VendorProfile] = MappingProxyType({
    VendorTag.EPIC: EPIC_PROFILE,
    VendorTag.CERNER: CERNER_PROFILE,
    VendorTag.ECW: ECW_PROFILE,
    VendorTag.ATHENA: ATHENA_PROFILE,
    VendorTag.ATHENAPRACTICE: ATHENAPRACTICE_PROFILE,
})


def get_profile(vendor: VendorTag) -> VendorProfile:
    """
    Get the profile of a vendor.

    Raises:
        UnsupportedVendorError: If the vendor has no profile
    """
    try:
        return VENDOR_PROFILES[vendor]
    except (KeyError, TypeError):
        raise UnsupportedVendorError(vendor) from None


def endpoints_for(vendor: VendorTag) -> EndpointSet:
    """
    Get the endpoints for a vendor.

    Raises:
        UnsupportedVendorError: For SMART, NONE or any vendor without a profile
    """
    return get_profile(vendor).endpoints
