"""
Vendor Identity Resolver

Maps a session handle, token claims or an already resolved tag to the EMR
vendor it belongs to.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, List, Tuple

import jwt
import structlog

from emr_connect.exceptions import InvalidInputError

logger = structlog.get_logger(__name__)


class VendorTag(str, Enum):
    """EMR vendors. NONE means the vendor is not recognized."""
    EPIC = "epic"
    CERNER = "cerner"
    ECW = "ecw"
    ATHENA = "athena"
    ATHENAPRACTICE = "athenapractice"
    SMART = "smart"
    NONE = "none"


# Order matters: the first matching substring wins. A server URL that
# carries two vendor keywords resolves to the earlier entry, so new
# substrings must not collide with existing vendor hosts.
VENDOR_URL_PATTERNS: List[Tuple[str, VendorTag]] = [
    ("cerner", VendorTag.CERNER),
    ("smarthealthit", VendorTag.SMART),
    ("epic", VendorTag.EPIC),
    ("ecw", VendorTag.ECW),
    ("platform.athenahealth.com", VendorTag.ATHENA),
    ("fhirapi.athenahealth.com", VendorTag.ATHENAPRACTICE),
]

# Launch-context claims that only a given vendor issues
VENDOR_CLAIM_KEYS: List[Tuple[str, VendorTag]] = [
    ("epic.eci", VendorTag.EPIC),
]


# =============================================================================
# Type Guards
# =============================================================================

def is_session_handle(source: Any) -> bool:
    """Check if source is a session exposing ``state.server_url``."""
    state = getattr(source, "state", None)
    return isinstance(getattr(state, "server_url", None), str)


def is_token_claims(source: Any) -> bool:
    """Check if source is a decoded token (claims mapping)."""
    return isinstance(source, Mapping)


def is_vendor_tag(source: Any) -> bool:
    """Check if source is a VendorTag or the name/value of one."""
    if isinstance(source, VendorTag):
        return True
    if isinstance(source, str):
        return source.lower() in VendorTag._value2member_map_
    return False


def is_encoded_token(source: Any) -> bool:
    """Check if source looks like a compact-serialized JWT."""
    return isinstance(source, str) and source.count(".") == 2


# =============================================================================
# Resolution
# =============================================================================

def resolve_vendor_from_url(server_url: str) -> VendorTag:
    """Resolve the vendor from a FHIR server URL, NONE if unknown."""
    url = server_url.lower()
    for substring, vendor in VENDOR_URL_PATTERNS:
        if substring in url:
            return vendor
    return VendorTag.NONE


def resolve_vendor_from_claims(claims: Mapping) -> VendorTag:
    """Resolve the vendor from token claims, NONE if unknown."""
    for key, vendor in VENDOR_CLAIM_KEYS:
        if key in claims:
            return vendor
    return VendorTag.NONE


def resolve_vendor(source: Any) -> VendorTag:
    """
    Determine the EMR vendor of a session or token.

    Args:
        source: A session handle or a token claims mapping

    Returns:
        The vendor tag, VendorTag.NONE when nothing matches

    Raises:
        InvalidInputError: If source is neither a session nor claims
    """
    if is_session_handle(source):
        vendor = resolve_vendor_from_url(source.state.server_url)
    elif is_token_claims(source):
        vendor = resolve_vendor_from_claims(source)
    else:
        raise InvalidInputError(
            f"Cannot resolve vendor from {type(source).__name__}"
        )

    if vendor is VendorTag.NONE:
        logger.info("EMR vendor not recognized")
    else:
        logger.debug(f"Resolved EMR vendor {vendor.value}")
    return vendor


def decode_token_claims(token: str) -> Dict[str, Any]:
    """Decode JWT claims without verifying the signature."""
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as e:
        raise InvalidInputError(f"Token could not be decoded: {e}") from e


def resolve_vendor_from_opaque(source: Any) -> VendorTag:
    """
    Resolve the vendor from a token, an encoded JWT or a vendor tag.

    Raises:
        InvalidInputError: If source matches none of these shapes
    """
    if isinstance(source, VendorTag):
        return source
    if is_vendor_tag(source):
        return VendorTag(source.lower())
    if is_token_claims(source):
        return resolve_vendor(source)
    if is_encoded_token(source):
        return resolve_vendor_from_claims(decode_token_claims(source))
    raise InvalidInputError("Invalid object type.")
