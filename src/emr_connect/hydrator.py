"""
Context Hydrator

Enriches a resource with patient, encounter and author context taken from
the active session. Elements the resource already declares are never
overwritten.
"""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

import structlog

from emr_connect.session import SessionHandle, resolve_identifier
from emr_connect.transformer import SessionResource

logger = structlog.get_logger(__name__)

# async (hydrator, resource) -> fragment
HydrationHook = Callable[["ContextHydrator", SessionResource], Awaitable[Dict[str, Any]]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_instant(moment: datetime) -> str:
    """ISO-8601 instant with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ContextHydrator:
    """
    Derives context fragments from a session.

    Usage:
        hydrator = ContextHydrator(session)
        hydrated = await hydrator.hydrate(to_session_shape(observation))
    """

    def __init__(
        self,
        session: SessionHandle,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.session = session
        self.clock = clock or utc_now

    # =========================================================================
    # Fragments
    # =========================================================================

    async def patient_subject(self) -> Dict[str, Any]:
        """Subject reference to the session's patient."""
        patient_id = await resolve_identifier(self.session.patient, "patient")
        return {"subject": {"reference": f"Patient/{patient_id}"}}

    async def encounter_reference(self) -> Dict[str, str]:
        encounter_id = await resolve_identifier(self.session.encounter, "encounter")
        return {"reference": f"Encounter/{encounter_id}"}

    def period(self, start: str) -> Dict[str, str]:
        """A zero-length period starting and ending at start."""
        return {"start": start, "end": start}

    async def encounter_context(self) -> Dict[str, Any]:
        """Context with the session's encounter and a period of now."""
        encounter = [await self.encounter_reference()]
        return {
            "context": {
                "encounter": encounter,
                "period": self.period(format_instant(self.clock())),
            }
        }

    async def author_reference(self) -> Dict[str, Any]:
        """Author reference array pointing at the session's user."""
        user_id = await resolve_identifier(self.session.user, "user")
        return {"author": [{"reference": f"Practitioner/{user_id}"}]}

    # =========================================================================
    # Hydration
    # =========================================================================

    async def hydrate(
        self,
        resource: SessionResource,
        hooks: Sequence[HydrationHook] = (),
    ) -> SessionResource:
        """
        Hydrate a resource with subject and encounter context.

        Args:
            resource: The session-shape resource to hydrate
            hooks: Vendor hooks adding elements that vendor requires

        Returns:
            A hydrated copy, or resource itself when nothing was missing

        Raises:
            MissingIdentifierError: If a needed session id is empty
        """
        fragment: Dict[str, Any] = {}
        if not resource.has("subject"):
            fragment.update(await self.patient_subject())
        if not (resource.has("encounter") or resource.has("context")):
            fragment.update(await self.encounter_context())

        hydrated = resource.merge(fragment)
        for hook in hooks:
            hydrated = hydrated.merge(await hook(self, hydrated))

        added = sorted(set(hydrated.to_dict()) - set(resource.to_dict()))
        if added:
            logger.debug(
                "Hydrated resource",
                resource_type=resource.resource_type,
                added=added,
            )
        return hydrated


# =============================================================================
# Vendor Hooks
# =============================================================================

async def mandatory_author(hydrator: ContextHydrator, resource: SessionResource) -> Dict[str, Any]:
    """Add the session user as author unless the resource names one."""
    if resource.has("author"):
        return {}
    return await hydrator.author_reference()
