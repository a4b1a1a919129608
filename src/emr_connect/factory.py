"""
Client Factory

Picks the vendor profile for a session and builds the client.
"""

from typing import Optional

import structlog

from emr_connect.client import EMRClient
from emr_connect.config import EMRConnectSettings, get_settings
from emr_connect.exceptions import UnsupportedVendorError
from emr_connect.profiles import VENDOR_PROFILES, get_profile
from emr_connect.session import Launcher, SessionHandle
from emr_connect.vendors import resolve_vendor

logger = structlog.get_logger(__name__)


def client_for(
    session: SessionHandle,
    settings: Optional[EMRConnectSettings] = None,
) -> EMRClient:
    """
    Create the client for a ready session.

    Sessions of vendors without a profile (SMART, NONE) get the client of
    settings.fallback_vendor, unless strict_vendor_resolution is set.

    Raises:
        UnsupportedVendorError: In strict mode, for SMART or NONE sessions
    """
    settings = settings or get_settings()
    vendor = resolve_vendor(session)

    if vendor not in VENDOR_PROFILES:
        if settings.strict_vendor_resolution:
            logger.error(f"No client for EMR type {vendor.value}")
            raise UnsupportedVendorError(vendor)
        logger.warning(
            f"No client for EMR type {vendor.value}, "
            f"falling back to {settings.fallback_vendor.value}"
        )
        vendor = settings.fallback_vendor

    return EMRClient(session, get_profile(vendor))


async def create_emr_client(
    launcher: Launcher,
    settings: Optional[EMRConnectSettings] = None,
) -> EMRClient:
    """Wait for the SMART launch to complete and create its client."""
    session = await launcher.ready()
    client = client_for(session, settings=settings)
    logger.info(f"Created EMR client for {client.vendor.value}")
    return client
