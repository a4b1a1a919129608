"""
EMR Client

One client for every supported vendor. Vendor behavior (endpoints, header
policy, extra hydration) comes from the VendorProfile the client is bound
to.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional

import structlog

from emr_connect.endpoints import EndpointSet
from emr_connect.exceptions import (
    CreateFailedError,
    InvalidResponseError,
    RequestFailedError,
    UnexpectedResourceTypeError,
)
from emr_connect.hydrator import ContextHydrator
from emr_connect.models import to_typed
from emr_connect.profiles import VendorProfile
from emr_connect.session import DeferredIdentifier, SessionHandle
from emr_connect.transformer import to_canonical, to_session_shape
from emr_connect.vendors import VendorTag

logger = structlog.get_logger(__name__)


def _require_resource_type(resource: Any) -> Dict[str, Any]:
    resource_type = resource.get("resourceType") if isinstance(resource, Mapping) else None
    if not isinstance(resource_type, str) or not resource_type:
        raise InvalidResponseError(f"Resource {resource!r}, must have a resource type.")
    return dict(resource)


class EMRClient:
    """
    Vendor-aware client bound to one session.

    Usage:
        client = client_for(session)
        created = await client.create({"resourceType": "DocumentReference", ...})
        patient = await client.get_patient_read()
    """

    def __init__(
        self,
        session: SessionHandle,
        profile: VendorProfile,
        hydrator: Optional[ContextHydrator] = None,
    ):
        self._session = session
        self._profile = profile
        self.hydrator = hydrator or ContextHydrator(session)

    def __repr__(self) -> str:
        return f"EMRClient(vendor={self.vendor.value})"

    @property
    def session(self) -> SessionHandle:
        return self._session

    @property
    def profile(self) -> VendorProfile:
        return self._profile

    @property
    def vendor(self) -> VendorTag:
        return self._profile.vendor

    def get_endpoints(self) -> EndpointSet:
        """Endpoints of this client's vendor."""
        return self._profile.endpoints

    # =========================================================================
    # Headers
    # =========================================================================

    def create_headers(self, extra_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Vendor create defaults overlaid with caller headers."""
        return {**self._profile.create_headers, **(extra_headers or {})}

    def request_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Caller headers overlaid with the vendor's mandatory headers."""
        return {**(headers or {}), **self._profile.request_headers}

    # =========================================================================
    # Create / Read
    # =========================================================================

    async def create(
        self,
        resource: Dict[str, Any],
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Hydrate and create a resource through the session.

        Args:
            resource: Canonical FHIR resource with a resourceType
            extra_headers: Headers added to the vendor's create defaults

        Returns:
            The created resource as returned by the server

        Raises:
            MalformedResourceError: If resource has no resourceType
            MissingIdentifierError: If session context is incomplete
            CreateFailedError: If the session fails to create the resource
            InvalidResponseError: If the server answer is not a resource
        """
        session_resource = to_session_shape(resource)
        hydrated = await self.hydrator.hydrate(
            session_resource, hooks=self._profile.hydration_hooks
        )

        logger.info(
            f"Creating {hydrated.resource_type}",
            vendor=self.vendor.value,
        )
        try:
            result = await self._session.create(
                hydrated.to_dict(),
                {"headers": self.create_headers(extra_headers)},
            )
        except Exception as e:
            logger.error(
                f"Create {hydrated.resource_type} failed: {e}",
                vendor=self.vendor.value,
            )
            raise CreateFailedError(f"It failed with: {e}", cause=e) from e

        return to_canonical(_require_resource_type(result))

    async def read(
        self,
        resource_id: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Request a resource by id or relative URL (e.g. "Patient/123").

        Vendor-mandated headers override caller headers with the same name.

        Raises:
            RequestFailedError: If the session request fails
            InvalidResponseError: If the server answer is not a resource
        """
        options = {"url": resource_id, "headers": self.request_headers(headers)}
        try:
            result = await self._session.request(options)
        except Exception as e:
            logger.error(f"Request failed: {e}", vendor=self.vendor.value)
            raise RequestFailedError(f"Request for {resource_id} failed: {e}", cause=e) from e

        return to_canonical(_require_resource_type(result))

    async def request_resource(
        self,
        resource_id: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Alias of read()."""
        return await self.read(resource_id, headers=headers)

    # =========================================================================
    # Session Entities
    # =========================================================================

    async def _read_entity(
        self,
        entity: DeferredIdentifier,
        expected: str,
        typed: bool = False,
    ) -> Any:
        try:
            resource = await entity.read()
        except Exception as e:
            logger.error(f"{expected} read failed: {e}", vendor=self.vendor.value)
            raise RequestFailedError(f"{expected} read failed: {e}", cause=e) from e

        resource_type = resource.get("resourceType") if isinstance(resource, Mapping) else None
        if resource_type != expected:
            raise UnexpectedResourceTypeError(expected, resource_type)
        if typed:
            return to_typed(resource)
        return to_canonical(resource)

    async def get_practitioner_read(self, typed: bool = False) -> Any:
        """
        Read the session user as a Practitioner.

        Args:
            typed: Return a fhir.resources Practitioner instead of a dict

        Raises:
            UnexpectedResourceTypeError: If the user is not a Practitioner
        """
        return await self._read_entity(self._session.user, "Practitioner", typed)

    async def get_patient_read(self, typed: bool = False) -> Any:
        """Read the session patient."""
        return await self._read_entity(self._session.patient, "Patient", typed)

    async def get_encounter_read(self, typed: bool = False) -> Any:
        """Read the session encounter."""
        return await self._read_entity(self._session.encounter, "Encounter", typed)
